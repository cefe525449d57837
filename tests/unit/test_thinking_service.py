import json
import pytest

from models.api_models import ContinuationRequest
from models.thinking_models import ModelResponse, PromptKind
from services.fallback_paths import fallback_paths, continuation_paths
from services.thinking_service import ThinkingService
from tests.fixtures.responses import MODEL_PATHS, MODEL_PATHS_WITH_PROSE, MODEL_STEP_OUTPUT
from tests.helpers import assert_in_order, assert_path_batch
from utils.constants import Messages

STEPS = ["Size the market", "Map competitors", "Find gaps"]


def test_extract_json_object_ignores_surrounding_prose():
    """Given prose around a JSON object, extract_json_object should parse only the object."""
    assert ThinkingService.extract_json_object(MODEL_PATHS_WITH_PROSE) == MODEL_PATHS


def test_extract_json_object_without_braces_raises():
    with pytest.raises(ValueError, match="No JSON found in Gemini output."):
        ThinkingService.extract_json_object("I can't help with that.")


def test_extract_json_object_spans_first_to_last_brace():
    """Two separate objects are taken as one span, which is not valid JSON."""
    with pytest.raises(ValueError):
        ThinkingService.extract_json_object('First {"a": 1} then {"b": 2}')


def test_parse_paths_defaults_to_empty_list():
    assert ThinkingService.parse_paths('{"approaches": []}') == []


def test_parse_paths_rejects_non_list():
    with pytest.raises(ValueError, match="list"):
        ThinkingService.parse_paths('{"paths": "four of them"}')


@pytest.mark.anyio
async def test_generate_thinking_paths_parses_model_output(gateway_stub):
    """Given JSON wrapped in prose, generate_thinking_paths should return the parsed paths."""
    gateway_stub.respond_with(MODEL_PATHS_WITH_PROSE)

    result = await ThinkingService.generate_thinking_paths("Launch a budgeting app")

    assert result.success is True
    assert result.paths == MODEL_PATHS["paths"]
    assert result.error is None
    assert gateway_stub.call_history[0]["max_output_tokens"] == 2048
    assert 'For the following query: "Launch a budgeting app"' in gateway_stub.last_prompt
    assert '"paths": [' in gateway_stub.last_prompt


@pytest.mark.anyio
async def test_generate_thinking_paths_does_not_validate_path_shape(gateway_stub):
    gateway_stub.respond_with(json.dumps({"paths": [{"name": "Solo"}]}))

    result = await ThinkingService.generate_thinking_paths("anything")

    assert result.success is True
    assert result.paths == [{"name": "Solo"}]


@pytest.mark.anyio
async def test_generate_thinking_paths_falls_back_on_gateway_error(gateway_stub):
    """Given a gateway failure, generate_thinking_paths should return keyword fallback paths and the gateway error."""
    gateway_stub.fail_with("Gemini API Error (503): overloaded")

    result = await ThinkingService.generate_thinking_paths("refactor this code")

    assert result.success is False
    assert result.paths == fallback_paths("refactor this code")
    assert result.error == "Gemini API Error (503): overloaded"
    assert_path_batch(result.paths)


@pytest.mark.anyio
async def test_generate_thinking_paths_falls_back_when_no_json(gateway_stub):
    """Given output without braces, the parse error message should be returned with fallback data."""
    gateway_stub.respond_with("Here are some ideas: think harder.")

    result = await ThinkingService.generate_thinking_paths("what data should I collect")

    assert result.success is False
    assert result.paths == fallback_paths("what data should I collect")
    assert result.error == "Failed to parse thinking paths JSON: No JSON found in Gemini output."


@pytest.mark.anyio
async def test_generate_thinking_paths_falls_back_on_invalid_json(gateway_stub):
    gateway_stub.respond_with('{"paths": [{"name": "Broken",}]}')

    result = await ThinkingService.generate_thinking_paths("plan a trip")

    assert result.success is False
    assert result.error.startswith("Failed to parse thinking paths JSON: ")
    assert result.paths == fallback_paths("plan a trip")


@pytest.mark.anyio
async def test_generate_thinking_paths_falls_back_on_deeply_nested_json(gateway_stub):
    """Given a reply nested too deeply for the JSON decoder, the fallback batch should be returned."""
    depth = 200000
    gateway_stub.respond_with('{"paths": ' + "[" * depth + "]" * depth + "}")

    result = await ThinkingService.generate_thinking_paths("plan a trip")

    assert result.success is False
    assert result.error.startswith("Failed to parse thinking paths JSON: ")
    assert result.paths == fallback_paths("plan a trip")


def test_build_continuation_prompt_truncates_last_response():
    """The last response should be cut to 500 characters and always followed by an ellipsis."""
    context = ContinuationRequest(
        original_query="Grow newsletter",
        last_response="x" * 600,
        last_path_name="User First",
        last_steps_executed=2
    )

    prompt = ThinkingService.build_continuation_prompt(context)

    assert prompt.kind == PromptKind.CONTINUATION_PATHS
    assert prompt.max_output_tokens == 768
    assert 'Original Question: "Grow newsletter"' in prompt.text
    assert 'Last Approach Used: "User First" (executed 2 steps)' in prompt.text
    assert f'Latest Response (truncated): "{"x" * 500}..."' in prompt.text
    assert "x" * 501 not in prompt.text


@pytest.mark.parametrize("last_response, expected_preview", [
    ("Short answer.", '"Short answer...."'),
    (None, '"..."'),
    ("", '"..."'),
])
def test_build_continuation_prompt_appends_ellipsis_without_truncation(last_response, expected_preview):
    context = ContinuationRequest(original_query="q", last_response=last_response)

    prompt = ThinkingService.build_continuation_prompt(context)

    assert f"Latest Response (truncated): {expected_preview}" in prompt.text


@pytest.mark.anyio
async def test_generate_updated_paths_parses_model_output(gateway_stub):
    gateway_stub.respond_with(json.dumps(MODEL_PATHS))
    context = ContinuationRequest(original_query="q", last_path_name="Pilot", last_steps_executed=3)

    result = await ThinkingService.generate_updated_paths(context)

    assert result.success is True
    assert result.paths == MODEL_PATHS["paths"]


@pytest.mark.parametrize("response", [
    ModelResponse(ok=False, error="Gemini API Error (N/A): timeout"),
    ModelResponse(ok=True, text="no json here"),
])
@pytest.mark.anyio
async def test_generate_updated_paths_uses_fixed_continuation_fallback(gateway_stub, response):
    """Given any failure, generate_updated_paths should return the fixed continuation set."""
    gateway_stub.respond_with(response)
    context = ContinuationRequest(original_query="Fix my code", last_path_name="Root Cause", last_steps_executed=1)

    result = await ThinkingService.generate_updated_paths(context)

    assert result.success is False
    assert result.paths == continuation_paths()
    assert_path_batch(result.paths)


@pytest.mark.anyio
async def test_generate_updated_paths_parse_error_message(gateway_stub):
    gateway_stub.respond_with("Nothing structured")

    result = await ThinkingService.generate_updated_paths(ContinuationRequest(original_query="q"))

    assert result.error == "Failed to parse continuation paths JSON: No JSON found in Gemini output."


def test_build_execute_path_prompt_for_first_step_only():
    """Given one step, the prompt should list only step 1 and omit the step 2 and 3 sections."""
    prompt = ThinkingService.build_execute_path_prompt("Enter a new market", "Market Scan", STEPS, 1)

    assert prompt.kind == PromptKind.EXECUTE_PATH
    assert prompt.max_output_tokens == 4096
    assert prompt.text.startswith('Original question: "Enter a new market"')
    assert "Step 1: Size the market\n" in prompt.text
    assert "Step 2:" not in prompt.text
    assert "Step 3:" not in prompt.text
    assert "execute ONLY the 1 step listed above" in prompt.text
    assert "accomplished in these 1 step." in prompt.text
    assert '**Following "Market Scan" Approach:**' in prompt.text
    assert "**Step 1: Size the market**" in prompt.text


def test_build_execute_path_prompt_leaves_blank_sections():
    """Omitted step sections render as empty strings, keeping the blank lines around them."""
    prompt = ThinkingService.build_execute_path_prompt("q", "Market Scan", STEPS, 1)

    assert "this step's scope.]\n\n\n\n\n\n**Current Progress:**" in prompt.text


def test_build_execute_path_prompt_for_all_steps():
    prompt = ThinkingService.build_execute_path_prompt("Enter a new market", "Market Scan", STEPS, 3)

    assert_in_order(
        prompt.text,
        "Step 1: Size the market\n",
        "Step 2: Map competitors\n",
        "Step 3: Find gaps\n",
        "execute ONLY the 3 steps listed above",
        "**Step 1: Size the market**",
        "**Step 2: Map competitors**",
        "**Step 3: Find gaps**",
        "accomplished in these 3 steps.",
    )


def test_build_execute_path_prompt_uses_default_titles_for_empty_steps():
    prompt = ThinkingService.build_execute_path_prompt("q", "Sparse", ["", "", ""], 3)

    assert "**Step 1: First Step**" in prompt.text
    assert "**Step 2: Second Step**" in prompt.text
    assert "**Step 3: Third Step**" in prompt.text


@pytest.mark.anyio
async def test_execute_thinking_path_returns_verbatim_text(gateway_stub):
    gateway_stub.respond_with(MODEL_STEP_OUTPUT)

    result = await ThinkingService.execute_thinking_path("q", "Market Scan", STEPS, 2)

    assert result.success is True
    assert result.response == MODEL_STEP_OUTPUT
    assert result.path_name == "Market Scan"
    assert result.steps_executed == 2
    assert gateway_stub.call_history[0]["max_output_tokens"] == 4096


@pytest.mark.parametrize("execute_up_to_step", [0, -1, 4])
@pytest.mark.anyio
async def test_execute_thinking_path_rejects_out_of_range_step(gateway_stub, execute_up_to_step):
    """Given a step count outside 1..len(steps), no model call should be made."""
    result = await ThinkingService.execute_thinking_path("q", "Market Scan", STEPS, execute_up_to_step)

    assert result.success is False
    assert result.error == Messages.INVALID_STEP_COUNT
    assert gateway_stub.call_count == 0


@pytest.mark.anyio
async def test_execute_thinking_path_passes_gateway_error(gateway_stub):
    gateway_stub.fail_with("Gemini API Error (500): boom")

    result = await ThinkingService.execute_thinking_path("q", "Market Scan", STEPS, 1)

    assert result.success is False
    assert result.error == "Gemini API Error (500): boom"
    assert result.response is None


@pytest.mark.parametrize("selected, expected", [
    ([3, 1, 2, 1], [1, 2, 3]),
    ([2], [2]),
    ([10, 2, 1], [1, 2, 10]),
    (["3", 1, "1"], [1, 3]),
])
def test_order_selected_steps_dedupes_and_sorts_numerically(selected, expected):
    assert ThinkingService.order_selected_steps(selected) == expected


@pytest.mark.anyio
async def test_execute_thinking_steps_orders_selection(gateway_stub):
    """Given [3,1,2,1], the prompt and result should use steps 1, 2, 3 in ascending order."""
    gateway_stub.respond_with("Selected steps done.")

    result = await ThinkingService.execute_thinking_steps("Enter a new market", "Market Scan", STEPS, [3, 1, 2, 1])

    assert result.success is True
    assert result.selected_steps == [1, 2, 3]
    assert result.response == "Selected steps done."
    assert result.path_name == "Market Scan"
    assert_in_order(
        gateway_stub.last_prompt,
        'User Question: "Enter a new market"',
        'Approach Selected: "Market Scan"',
        "**Step 1: Size the market**",
        "**Step 2: Map competitors**",
        "**Step 3: Find gaps**",
    )
    assert gateway_stub.last_prompt.count("DO NOT execute unselected steps") == 3
    assert gateway_stub.call_history[0]["max_output_tokens"] == 4096


@pytest.mark.anyio
async def test_execute_thinking_steps_uses_generic_label_for_unknown_step(gateway_stub):
    await ThinkingService.execute_thinking_steps("q", "Market Scan", STEPS, [5, 3])

    assert_in_order(gateway_stub.last_prompt, "**Step 3: Find gaps**", "**Step 5: Step 5**")


@pytest.mark.parametrize("selected_steps", [None, [], "1", 2, {"1": True}, ["first"], [[1]]])
@pytest.mark.anyio
async def test_execute_thinking_steps_requires_selection(gateway_stub, selected_steps):
    """Given a missing, empty or non-numeric selection, no model call should be made."""
    result = await ThinkingService.execute_thinking_steps("q", "Market Scan", STEPS, selected_steps)

    assert result.success is False
    assert result.error == "No steps selected."
    assert gateway_stub.call_count == 0


@pytest.mark.anyio
async def test_execute_thinking_steps_passes_gateway_error(gateway_stub):
    gateway_stub.fail_with("Gemini API Error (N/A): Connection refused")

    result = await ThinkingService.execute_thinking_steps("q", "Market Scan", STEPS, [2])

    assert result.success is False
    assert result.error == "Gemini API Error (N/A): Connection refused"
    assert result.selected_steps is None
