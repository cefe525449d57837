"""
Data models for prompt construction and model calls.
Contains prompt requests, gateway results, and thinking path structures.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class PromptKind(Enum):
    """Templates a prompt can be built from."""
    PING = "ping"
    THINKING_PATHS = "thinking_paths"
    CONTINUATION_PATHS = "continuation_paths"
    EXECUTE_PATH = "execute_path"
    EXECUTE_STEPS = "execute_steps"
    CSV_ANALYSIS = "csv_analysis"


@dataclass
class PromptRequest:
    """A rendered prompt and the token budget to send it with."""
    kind: PromptKind
    text: str
    max_output_tokens: int


@dataclass
class ModelResponse:
    """
    Normalized result of a single model call.
    Exactly one of text (ok=True) or error (ok=False) is meaningful.
    """
    ok: bool
    text: str = ""
    error: Optional[str] = None


@dataclass
class ThinkingPath:
    """A named approach made of three ordered steps."""
    name: str
    steps: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Serialize to the JSON shape the model is asked to produce."""
        return {"name": self.name, "steps": list(self.steps)}
