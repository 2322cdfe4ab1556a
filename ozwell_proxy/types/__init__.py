"""Type definitions for request and response shapes."""

from .chat import (
    AssistantMessage,
    BackendCompletionRequest,
    ChatCompletion,
    ChatCompletionChunk,
    ChatCompletionRequest,
    ChatMessage,
    Choice,
    ChunkChoice,
    ChunkDelta,
    ContentPart,
    ErrorDetail,
    ErrorResponse,
    JsonSchemaFormat,
    ResponseFormat,
    Usage,
)

__all__ = [
    "AssistantMessage",
    "BackendCompletionRequest",
    "ChatCompletion",
    "ChatCompletionChunk",
    "ChatCompletionRequest",
    "ChatMessage",
    "Choice",
    "ChunkChoice",
    "ChunkDelta",
    "ContentPart",
    "ErrorDetail",
    "ErrorResponse",
    "JsonSchemaFormat",
    "ResponseFormat",
    "Usage",
]
