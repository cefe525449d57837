"""
Pydantic data models for command requests and responses.
Fields are snake_case in Python and camelCase on the wire.
"""
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CommandModel(BaseModel):
    """Base model accepting both camelCase and snake_case field names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PingRequest(CommandModel):
    """Connectivity check request."""
    message: Optional[str] = None


class ThinkingPathsRequest(CommandModel):
    """Request for a fresh batch of thinking paths."""
    query: str = ""


class ContinuationRequest(CommandModel):
    """Request for continuation paths based on the previous exchange."""
    original_query: str = ""
    last_response: Optional[str] = None
    conversation_context: Optional[Any] = None
    last_path_name: str = ""
    last_steps_executed: int = 0


class ExecutePathRequest(CommandModel):
    """Request to execute a thinking path up to a given step."""
    query: str = ""
    path_name: str = ""
    steps: List[str] = Field(default_factory=list)
    execute_up_to_step: int = 1


class ExecuteStepsRequest(CommandModel):
    """Request to execute an arbitrary selection of steps."""
    query: str = ""
    path_name: str = ""
    steps: List[str] = Field(default_factory=list)
    selected_steps: Optional[Any] = None


class CsvAnalysisRequest(CommandModel):
    """Request to analyze raw CSV text."""
    file_name: Optional[str] = None
    csv_text: Optional[Any] = None


class PingResponse(CommandModel):
    """Connectivity check result."""
    success: bool
    response: Optional[str] = None
    error: Optional[str] = None


class PathsResponse(CommandModel):
    """Thinking paths, either parsed from the model or fallback data."""
    success: bool
    paths: List[Any] = Field(default_factory=list)
    error: Optional[str] = None


class ExecutePathResponse(CommandModel):
    """Result of executing a path up to a step."""
    success: bool
    response: Optional[str] = None
    path_name: Optional[str] = None
    steps_executed: Optional[int] = None
    error: Optional[str] = None


class ExecuteStepsResponse(CommandModel):
    """Result of executing selected steps."""
    success: bool
    response: Optional[str] = None
    path_name: Optional[str] = None
    selected_steps: Optional[List[int]] = None
    error: Optional[str] = None


class CsvAnalysisResponse(CommandModel):
    """Result of a CSV analysis."""
    success: bool
    text: Optional[str] = None
    error: Optional[str] = None
