"""
Model gateway for the Gemini generateContent API.
Every outbound model call passes through ModelGateway.call_model, which
normalizes success and failure into a ModelResponse and never raises.
"""
from typing import Any, Optional
import httpx

from config import Config
from models.api_models import PingResponse
from models.thinking_models import ModelResponse, PromptKind, PromptRequest
from utils.constants import Messages
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


class ModelGateway:
    """Single chokepoint for calls to the model provider."""

    @staticmethod
    def build_payload(prompt_text: str, max_output_tokens: int) -> dict:
        """Build the generateContent request body."""
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": prompt_text}]
                }
            ],
            "generationConfig": {
                "maxOutputTokens": max_output_tokens,
                "temperature": Config.TEMPERATURE,
                "topP": Config.TOP_P
            }
        }

    @staticmethod
    def extract_text(data: Any) -> str:
        """Concatenate the text parts of the first candidate and trim it."""
        if not isinstance(data, dict):
            return ""

        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            return ""

        content = candidates[0].get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            return ""

        return "".join(
            str(part.get("text") or "") for part in parts if isinstance(part, dict)
        ).strip()

    @staticmethod
    def _provider_message(response: httpx.Response) -> Optional[str]:
        """Pull the provider's error message out of an error response body."""
        try:
            data = response.json()
        except ValueError:
            return None

        if not isinstance(data, dict):
            return None

        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])

        if data.get("message"):
            return str(data["message"])

        return None

    @staticmethod
    def _failure(status_code: Any, message: Optional[str]) -> ModelResponse:
        """Format a provider or transport failure."""
        error = f"Gemini API Error ({status_code}): {message or Messages.UNKNOWN_ERROR}"
        app_logger.error(error)
        return ModelResponse(ok=False, error=error)

    @staticmethod
    async def call_model(prompt_text: str, max_output_tokens: int = Config.DEFAULT_MAX_OUTPUT_TOKENS) -> ModelResponse:
        """
        Send one prompt to the model and return its text.

        Args:
            prompt_text: Prompt to send as a single user turn
            max_output_tokens: Output token budget for this call

        Returns:
            ModelResponse with the trimmed text, or a human-readable error
        """
        if not Config.has_api_key():
            app_logger.error("Model call skipped: API key not configured")
            return ModelResponse(ok=False, error=Messages.MISSING_API_KEY)

        payload = ModelGateway.build_payload(prompt_text, max_output_tokens)
        app_logger.info(f"Calling {Config.GEMINI_MODEL} ({len(prompt_text)} chars, max {max_output_tokens} tokens)")

        try:
            client = HTTPClientManager.get_model_client()
            response = await client.post(
                Config.get_model_url(),
                params={"key": Config.get_api_key()},
                json=payload,
                headers={"Content-Type": "application/json"}
            )
        except httpx.RequestError as e:
            return ModelGateway._failure("N/A", str(e))
        except Exception as e:
            app_logger.error(f"Unexpected model call error: {type(e).__name__}")
            return ModelGateway._failure("N/A", str(e))

        if not response.is_success:
            message = ModelGateway._provider_message(response)
            if message is None:
                message = f"Request failed with status code {response.status_code}"
            return ModelGateway._failure(response.status_code, message)

        try:
            data = response.json()
        except ValueError:
            data = None

        text = ModelGateway.extract_text(data)
        if not text:
            app_logger.warning("Model returned no text")
            return ModelResponse(ok=False, error=Messages.EMPTY_MODEL_OUTPUT)

        app_logger.info(f"Model call completed: {len(text)} characters")
        return ModelResponse(ok=True, text=text)

    @staticmethod
    async def send(prompt: PromptRequest) -> ModelResponse:
        """Send a rendered prompt with its own token budget."""
        app_logger.debug(f"Dispatching {prompt.kind.value} prompt")
        return await ModelGateway.call_model(prompt.text, prompt.max_output_tokens)

    @staticmethod
    async def ping(message: Optional[str] = None) -> PingResponse:
        """Connectivity check: send a short prompt and report the outcome."""
        prompt = PromptRequest(
            kind=PromptKind.PING,
            text=message or "ping",
            max_output_tokens=Config.PING_MAX_TOKENS
        )
        result = await ModelGateway.send(prompt)

        if not result.ok:
            return PingResponse(success=False, error=result.error)

        return PingResponse(success=True, response=result.text)
