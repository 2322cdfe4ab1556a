"""Types for the chat shapes exchanged with clients and the backend.

Types are separated into:
- OpenAI-compatible types: what clients send and receive
- Backend types: the single-turn completion call
"""

from typing import Any, Literal

from typing_extensions import NotRequired, TypedDict


# =============================================================================
# OpenAI-Compatible Request Types
# =============================================================================


class ContentPart(TypedDict, total=False):
    """A content part of a multi-part message.

    Attributes:
        type: Part type. Only "text" parts contribute to the prompt.
        text: Text of a "text" part.
    """
    type: str
    text: str


class ChatMessage(TypedDict):
    """A single message in an OpenAI-style conversation."""
    role: str
    content: str | list[ContentPart] | None


class JsonSchemaFormat(TypedDict, total=False):
    """The ``json_schema`` envelope used by the official OpenAI API."""
    name: str
    schema: dict[str, Any]
    strict: bool


class ResponseFormat(TypedDict, total=False):
    """Structured output request.

    Attributes:
        type: "json_schema", "json_object" or "text".
        schema: JSON schema with a ``properties`` mapping.
        json_schema: OpenAI spelling of the same schema.
    """
    type: str
    schema: dict[str, Any]
    json_schema: JsonSchemaFormat


class ChatCompletionRequest(TypedDict):
    """Body of ``POST /v1/chat/completions``."""
    messages: list[ChatMessage]
    model: NotRequired[str]
    stream: NotRequired[bool]
    response_format: NotRequired[ResponseFormat]
    max_tokens: NotRequired[int]


# =============================================================================
# OpenAI-Compatible Response Types
# =============================================================================


class Usage(TypedDict):
    """Approximate token usage."""
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class AssistantMessage(TypedDict):
    role: Literal["assistant"]
    content: str
    refusal: str | None


class Choice(TypedDict):
    index: int
    message: AssistantMessage
    finish_reason: str


class ChatCompletion(TypedDict):
    """Non-streaming response object (``object == "chat.completion"``)."""
    id: str
    object: Literal["chat.completion"]
    created: int
    model: str
    choices: list[Choice]
    usage: Usage


class ChunkDelta(TypedDict, total=False):
    content: str


class ChunkChoice(TypedDict):
    index: int
    delta: ChunkDelta
    finish_reason: str | None


class ChatCompletionChunk(TypedDict):
    """One streamed event (``object == "chat.completion.chunk"``)."""
    id: str
    object: Literal["chat.completion.chunk"]
    created: int
    model: str
    choices: list[ChunkChoice]


class ErrorDetail(TypedDict):
    message: str
    type: str
    code: int


class ErrorResponse(TypedDict):
    error: ErrorDetail


# =============================================================================
# Backend Types
# =============================================================================


class BackendCompletionRequest(TypedDict):
    """Body of the backend completion call."""
    prompt: str
    systemMessage: str
    maxTokens: NotRequired[int]
