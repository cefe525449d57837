"""
Models package exports.
"""
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
    CsvAnalysisResponse,
)
from models.thinking_models import PromptKind, PromptRequest, ModelResponse, ThinkingPath

__all__ = [
    'PingRequest',
    'ThinkingPathsRequest',
    'ContinuationRequest',
    'ExecutePathRequest',
    'ExecuteStepsRequest',
    'CsvAnalysisRequest',
    'PingResponse',
    'PathsResponse',
    'ExecutePathResponse',
    'ExecuteStepsResponse',
    'CsvAnalysisResponse',
    'PromptKind',
    'PromptRequest',
    'ModelResponse',
    'ThinkingPath',
]
