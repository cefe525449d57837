"""
Deterministic fallback thinking paths.
Used when the model call fails or its output can't be parsed.
"""
from typing import List, Optional, Sequence, Tuple

from models.thinking_models import ThinkingPath


CODE_PATHS: Tuple[ThinkingPath, ...] = (
    ThinkingPath("Step by Step", ["Break down requirements", "Design the algorithm", "Implement and test"]),
    ThinkingPath("Best Practices", ["Research existing solutions", "Apply design patterns", "Optimize for performance"]),
    ThinkingPath("Quick Prototype", ["Create minimal version", "Test core functionality", "Iterate and improve"]),
    ThinkingPath("Comprehensive", ["Plan architecture", "Implement with documentation", "Add error handling"]),
)

ANALYSIS_PATHS: Tuple[ThinkingPath, ...] = (
    ThinkingPath("Data Driven", ["Gather relevant data", "Analyze patterns", "Draw conclusions"]),
    ThinkingPath("Comparative", ["Identify alternatives", "Compare pros and cons", "Recommend best option"]),
    ThinkingPath("Root Cause", ["Identify the problem", "Trace underlying causes", "Propose solutions"]),
    ThinkingPath("Strategic", ["Define objectives", "Evaluate resources", "Create action plan"]),
)

GENERIC_PATHS: Tuple[ThinkingPath, ...] = (
    ThinkingPath("Analytical", ["Break down the question", "Examine each component", "Synthesize insights"]),
    ThinkingPath("Creative", ["Brainstorm possibilities", "Explore unconventional ideas", "Refine the best concepts"]),
    ThinkingPath("Practical", ["Focus on implementation", "Consider real constraints", "Provide actionable steps"]),
    ThinkingPath("Comprehensive", ["Research thoroughly", "Consider multiple perspectives", "Provide detailed analysis"]),
)

CONTINUATION_PATHS: Tuple[ThinkingPath, ...] = (
    ThinkingPath("Continue Deep", ["Build on current insights", "Explore specific implications", "Develop concrete recommendations"]),
    ThinkingPath("New Angle", ["Approach from different perspective", "Challenge current assumptions", "Synthesize alternative view"]),
    ThinkingPath("Apply Practical", ["Focus on implementation", "Address real-world constraints", "Create actionable plan"]),
    ThinkingPath("Expand Context", ["Broaden the scope", "Connect to related domains", "Explore wider implications"]),
)

# Evaluated in order; the first rule with a matching keyword wins
FALLBACK_RULES: Tuple[Tuple[Tuple[str, ...], Tuple[ThinkingPath, ...]], ...] = (
    (("code", "program", "function"), CODE_PATHS),
    (("analyz", "data", "research"), ANALYSIS_PATHS),
)


def _copy_paths(paths: Sequence[ThinkingPath]) -> List[dict]:
    return [path.to_dict() for path in paths]


def select_fallback_set(query: Optional[str]) -> Tuple[ThinkingPath, ...]:
    """Pick the fallback data set whose keywords appear in the query."""
    query_lower = (query or "").lower()

    for keywords, paths in FALLBACK_RULES:
        if any(keyword in query_lower for keyword in keywords):
            return paths

    return GENERIC_PATHS


def fallback_paths(query: Optional[str]) -> List[dict]:
    """
    Keyword-based fallback paths for a query.

    Args:
        query: The user's original query

    Returns:
        Four paths with three steps each, as JSON-ready dicts
    """
    return _copy_paths(select_fallback_set(query))


def continuation_paths(last_path_name: Optional[str] = None, last_steps_executed: Optional[int] = None) -> List[dict]:
    """Fixed continuation paths. The arguments do not influence the result."""
    return _copy_paths(CONTINUATION_PATHS)
