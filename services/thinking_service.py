"""
Thinking path service.
Builds the path generation and execution prompts, calls the gateway, and
falls back to deterministic paths when the model output can't be used.
"""
import json
import re
from typing import Any, Callable, List

from config import Config
from models.api_models import ContinuationRequest, PathsResponse, ExecutePathResponse, ExecuteStepsResponse
from models.thinking_models import PromptKind, PromptRequest
from services.fallback_paths import fallback_paths, continuation_paths
from services.gateway import ModelGateway
from utils.constants import (
    THINKING_PATHS_PROMPT,
    CONTINUATION_PATHS_PROMPT,
    EXECUTE_PATH_HEADER,
    EXECUTE_PATH_STEP_LINE,
    EXECUTE_PATH_STEP_TWO,
    EXECUTE_PATH_STEP_THREE,
    EXECUTE_PATH_INSTRUCTIONS,
    DEFAULT_STEP_TITLES,
    EXECUTE_STEPS_PROMPT,
    EXECUTE_STEPS_BLOCK,
    Messages,
    Patterns
)
from utils.logger import app_logger


class ThinkingService:
    """Service for generating and executing thinking paths."""

    @staticmethod
    def extract_json_object(text: str) -> dict:
        """
        Parse the JSON object embedded in model output.
        Takes everything from the first "{" to the last "}".

        Raises:
            ValueError: No braces found, or the substring is not valid JSON
        """
        match = re.search(Patterns.JSON_OBJECT, text or "")
        if not match:
            raise ValueError(Messages.NO_JSON_FOUND)

        return json.loads(match.group(0))

    @staticmethod
    def parse_paths(text: str) -> List[Any]:
        """Extract the "paths" array from model output. Missing key gives []."""
        parsed = ThinkingService.extract_json_object(text)
        paths = parsed.get("paths") or []

        if not isinstance(paths, list):
            raise ValueError(f"Expected 'paths' to be a list, got {type(paths).__name__}")

        return paths

    @staticmethod
    def _step_title(steps: List[str], number: int, default: str) -> str:
        """Title of a 1-based step, or the default when it's missing or empty."""
        if 1 <= number <= len(steps) and steps[number - 1]:
            return steps[number - 1]
        return default

    @staticmethod
    def build_thinking_paths_prompt(query: str) -> PromptRequest:
        return PromptRequest(
            kind=PromptKind.THINKING_PATHS,
            text=THINKING_PATHS_PROMPT.format(query=query),
            max_output_tokens=Config.PATHS_MAX_TOKENS
        )

    @staticmethod
    def build_continuation_prompt(context: ContinuationRequest) -> PromptRequest:
        """The response preview is always followed by an ellipsis, truncated or not."""
        preview = (context.last_response or "")[:Config.LAST_RESPONSE_PREVIEW_CHARS]
        return PromptRequest(
            kind=PromptKind.CONTINUATION_PATHS,
            text=CONTINUATION_PATHS_PROMPT.format(
                original_query=context.original_query,
                last_path_name=context.last_path_name,
                last_steps_executed=context.last_steps_executed,
                last_response_preview=preview
            ),
            max_output_tokens=Config.CONTINUATION_MAX_TOKENS
        )

    @staticmethod
    def build_execute_path_prompt(query: str, path_name: str, steps: List[str], execute_up_to_step: int) -> PromptRequest:
        """
        Build the sequential execution prompt.

        Only the first execute_up_to_step steps are listed. The step 2 and
        step 3 template sections render as empty strings below their index.
        """
        step_lines = "".join(
            EXECUTE_PATH_STEP_LINE.format(number=index + 1, title=steps[index])
            for index in range(execute_up_to_step)
        )

        step_two_section = ""
        if execute_up_to_step > 1:
            step_two_section = EXECUTE_PATH_STEP_TWO.format(
                title=ThinkingService._step_title(steps, 2, DEFAULT_STEP_TITLES[1])
            )

        step_three_section = ""
        if execute_up_to_step > 2:
            step_three_section = EXECUTE_PATH_STEP_THREE.format(
                title=ThinkingService._step_title(steps, 3, DEFAULT_STEP_TITLES[2])
            )

        instructions = EXECUTE_PATH_INSTRUCTIONS.format(
            step_count=execute_up_to_step,
            plural="s" if execute_up_to_step > 1 else "",
            path_name=path_name,
            step_one_title=ThinkingService._step_title(steps, 1, DEFAULT_STEP_TITLES[0]),
            step_two_section=step_two_section,
            step_three_section=step_three_section
        )

        text = EXECUTE_PATH_HEADER.format(query=query, path_name=path_name) + step_lines + instructions
        return PromptRequest(
            kind=PromptKind.EXECUTE_PATH,
            text=text,
            max_output_tokens=Config.EXECUTION_MAX_TOKENS
        )

    @staticmethod
    def order_selected_steps(selected_steps: List[Any]) -> List[int]:
        """
        Deduplicate and sort step numbers ascending.

        Numeric strings such as "2" are accepted. Raises ValueError or TypeError
        for anything that is not a step number.
        """
        return sorted({int(number) for number in selected_steps})

    @staticmethod
    def build_execute_steps_prompt(query: str, path_name: str, steps: List[str], ordered_steps: List[int]) -> PromptRequest:
        step_blocks = "\n\n".join(
            EXECUTE_STEPS_BLOCK.format(
                number=number,
                title=ThinkingService._step_title(steps, number, f"Step {number}")
            )
            for number in ordered_steps
        )

        return PromptRequest(
            kind=PromptKind.EXECUTE_STEPS,
            text=EXECUTE_STEPS_PROMPT.format(query=query, path_name=path_name, step_blocks=step_blocks),
            max_output_tokens=Config.EXECUTION_MAX_TOKENS
        )

    @staticmethod
    async def _request_paths(prompt: PromptRequest, fallback: Callable[[], List[dict]], parse_error: str) -> PathsResponse:
        """Call the model for a paths batch, substituting fallback data on any failure."""
        result = await ModelGateway.send(prompt)

        if not result.ok:
            app_logger.warning(f"Using fallback paths: {result.error}")
            return PathsResponse(success=False, paths=fallback(), error=result.error)

        try:
            paths = ThinkingService.parse_paths(result.text)
        except (ValueError, RecursionError) as e:
            error = parse_error.format(reason=str(e))
            app_logger.warning(error)
            return PathsResponse(success=False, paths=fallback(), error=error)

        app_logger.info(f"Parsed {len(paths)} thinking paths")
        return PathsResponse(success=True, paths=paths)

    @staticmethod
    async def generate_thinking_paths(query: str) -> PathsResponse:
        """
        Ask the model for four distinct approaches to a query.

        Args:
            query: The user's question

        Returns:
            PathsResponse with parsed paths, or keyword-based fallback paths
        """
        return await ThinkingService._request_paths(
            ThinkingService.build_thinking_paths_prompt(query),
            lambda: fallback_paths(query),
            Messages.PATHS_PARSE_FAILED
        )

    @staticmethod
    async def generate_updated_paths(context: ContinuationRequest) -> PathsResponse:
        """Ask the model for four approaches continuing the last exchange."""
        return await ThinkingService._request_paths(
            ThinkingService.build_continuation_prompt(context),
            lambda: continuation_paths(context.last_path_name, context.last_steps_executed),
            Messages.CONTINUATION_PARSE_FAILED
        )

    @staticmethod
    async def execute_thinking_path(query: str, path_name: str, steps: List[str], execute_up_to_step: int) -> ExecutePathResponse:
        """
        Execute the first execute_up_to_step steps of a path.

        Returns:
            ExecutePathResponse with the model's text returned verbatim
        """
        if not 1 <= execute_up_to_step <= len(steps):
            app_logger.warning(f"Rejected execution of {execute_up_to_step} step(s) on a {len(steps)}-step path")
            return ExecutePathResponse(success=False, error=Messages.INVALID_STEP_COUNT)

        app_logger.info(f"Executing '{path_name}' up to step {execute_up_to_step}")
        prompt = ThinkingService.build_execute_path_prompt(query, path_name, steps, execute_up_to_step)
        result = await ModelGateway.send(prompt)

        if not result.ok:
            return ExecutePathResponse(success=False, error=result.error)

        return ExecutePathResponse(
            success=True,
            response=result.text,
            path_name=path_name,
            steps_executed=execute_up_to_step
        )

    @staticmethod
    async def execute_thinking_steps(query: str, path_name: str, steps: List[str], selected_steps: Any) -> ExecuteStepsResponse:
        """
        Execute an arbitrary selection of steps, in ascending order.

        Returns:
            ExecuteStepsResponse with the verbatim text and the sorted step list
        """
        if not isinstance(selected_steps, list) or not selected_steps:
            return ExecuteStepsResponse(success=False, error=Messages.NO_STEPS_SELECTED)

        try:
            ordered = ThinkingService.order_selected_steps(selected_steps)
        except (TypeError, ValueError):
            return ExecuteStepsResponse(success=False, error=Messages.NO_STEPS_SELECTED)

        app_logger.info(f"Executing steps {ordered} of '{path_name}'")

        prompt = ThinkingService.build_execute_steps_prompt(query, path_name, steps, ordered)
        result = await ModelGateway.send(prompt)

        if not result.ok:
            return ExecuteStepsResponse(success=False, error=result.error)

        return ExecuteStepsResponse(
            success=True,
            response=result.text,
            path_name=path_name,
            selected_steps=ordered
        )
