"""
Route handlers for the desktop command surface.
Each command is one JSON request and one JSON response with a success flag.
"""
from fastapi import APIRouter
from models.api_models import (
    PingRequest,
    ThinkingPathsRequest,
    ContinuationRequest,
    ExecutePathRequest,
    ExecuteStepsRequest,
    CsvAnalysisRequest,
    PingResponse,
    PathsResponse,
    ExecutePathResponse,
    ExecuteStepsResponse,
    CsvAnalysisResponse
)
from services.csv_analysis_service import CsvAnalysisService
from services.fallback_paths import fallback_paths, continuation_paths
from services.gateway import ModelGateway
from services.thinking_service import ThinkingService
from utils.constants import Messages
from utils.logger import app_logger

router = APIRouter(responses={200: {"description": "Command result; check the success flag"}})


def _error_message(e: Exception) -> str:
    return str(e) or Messages.UNKNOWN_ERROR


@router.post("/llm/ping", response_model=PingResponse, response_model_exclude_none=True)
async def ping(request: PingRequest):
    """Connectivity check used by the status pill."""
    try:
        return await ModelGateway.ping(request.message)
    except Exception as e:
        app_logger.error(f"Ping error: {e}")
        return PingResponse(success=False, error=_error_message(e))


@router.post("/thinking/paths", response_model=PathsResponse, response_model_exclude_none=True)
async def generate_thinking_paths(request: ThinkingPathsRequest):
    """Generate four thinking paths for a new query."""
    try:
        return await ThinkingService.generate_thinking_paths(request.query)
    except Exception as e:
        app_logger.error(f"Thinking paths error: {e}")
        return PathsResponse(success=False, paths=fallback_paths(request.query), error=_error_message(e))


@router.post("/thinking/paths/update", response_model=PathsResponse, response_model_exclude_none=True)
async def generate_updated_paths(request: ContinuationRequest):
    """Generate four paths continuing the previous exchange."""
    try:
        return await ThinkingService.generate_updated_paths(request)
    except Exception as e:
        app_logger.error(f"Continuation paths error: {e}")
        return PathsResponse(
            success=False,
            paths=continuation_paths(request.last_path_name, request.last_steps_executed),
            error=_error_message(e)
        )


@router.post("/thinking/execute", response_model=ExecutePathResponse, response_model_exclude_none=True)
async def execute_thinking_path(request: ExecutePathRequest):
    """Execute a path up to the requested step."""
    try:
        return await ThinkingService.execute_thinking_path(
            request.query,
            request.path_name,
            request.steps,
            request.execute_up_to_step
        )
    except Exception as e:
        app_logger.error(f"Path execution error: {e}")
        return ExecutePathResponse(success=False, error=_error_message(e))


@router.post("/thinking/steps", response_model=ExecuteStepsResponse, response_model_exclude_none=True)
async def execute_thinking_steps(request: ExecuteStepsRequest):
    """Execute an arbitrary selection of steps."""
    try:
        return await ThinkingService.execute_thinking_steps(
            request.query,
            request.path_name,
            request.steps,
            request.selected_steps
        )
    except Exception as e:
        app_logger.error(f"Selected steps execution error: {e}")
        return ExecuteStepsResponse(success=False, error=_error_message(e))


@router.post("/csv/analyze", response_model=CsvAnalysisResponse, response_model_exclude_none=True)
async def analyze_csv(request: CsvAnalysisRequest):
    """Analyze uploaded CSV text."""
    try:
        return await CsvAnalysisService.analyze_csv(request.file_name, request.csv_text)
    except Exception as e:
        app_logger.error(f"CSV analysis error: {e}")
        return CsvAnalysisResponse(success=False, error=_error_message(e))
