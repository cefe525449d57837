"""
CSV analysis service.
Embeds a bounded sample of CSV text in an analysis prompt.
"""
from typing import Any, Optional

from config import Config
from models.api_models import CsvAnalysisResponse
from models.thinking_models import PromptKind, PromptRequest
from services.gateway import ModelGateway
from utils.constants import CSV_ANALYSIS_PROMPT, Messages
from utils.logger import app_logger


class CsvAnalysisService:
    """Service for model-driven CSV analysis."""

    @staticmethod
    def truncate_csv(csv_text: str) -> str:
        """Keep at most MAX_CSV_CHARS characters of the CSV text."""
        return csv_text[:Config.MAX_CSV_CHARS]

    @staticmethod
    def build_analysis_prompt(csv_text: str) -> PromptRequest:
        return PromptRequest(
            kind=PromptKind.CSV_ANALYSIS,
            text=CSV_ANALYSIS_PROMPT.format(csv_text=CsvAnalysisService.truncate_csv(csv_text)),
            max_output_tokens=Config.EXECUTION_MAX_TOKENS
        )

    @staticmethod
    async def analyze_csv(file_name: Optional[str], csv_text: Any) -> CsvAnalysisResponse:
        """
        Analyze uploaded CSV text with the model.

        Args:
            file_name: Name of the uploaded file (logging only)
            csv_text: Raw CSV content

        Returns:
            CsvAnalysisResponse with the model's Markdown report
        """
        if not csv_text or not isinstance(csv_text, str):
            return CsvAnalysisResponse(success=False, error=Messages.EMPTY_CSV)

        if len(csv_text) > Config.MAX_CSV_CHARS:
            app_logger.info(f"Truncating '{file_name}' from {len(csv_text)} to {Config.MAX_CSV_CHARS} characters")

        app_logger.info(f"Analyzing CSV '{file_name}'")
        result = await ModelGateway.send(CsvAnalysisService.build_analysis_prompt(csv_text))

        if not result.ok:
            return CsvAnalysisResponse(success=False, error=result.error or Messages.NO_ANALYSIS)

        return CsvAnalysisResponse(success=True, text=result.text)
