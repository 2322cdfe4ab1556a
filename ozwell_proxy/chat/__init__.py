"""Translation between OpenAI chat completions and the Ozwell completion API."""

from .normalizer import (
    DEFAULT_SYSTEM_MESSAGE,
    ConversationContext,
    build_conversation_context,
    extract_message_text,
)
from .response import (
    DEFAULT_MODEL_LABEL,
    CompletionResult,
    build_completion_result,
    extract_reply_content,
    to_openai_response,
)
from .stream_adapter import split_stream_tokens, stream_completion
from .structured import (
    apply_response_format,
    extract_language_title,
    parse_structured_response,
    render_structured_content,
)
from .usage import estimate_tokens, estimate_usage

__all__ = [
    "CompletionResult",
    "ConversationContext",
    "DEFAULT_MODEL_LABEL",
    "DEFAULT_SYSTEM_MESSAGE",
    "apply_response_format",
    "build_completion_result",
    "build_conversation_context",
    "estimate_tokens",
    "estimate_usage",
    "extract_language_title",
    "extract_message_text",
    "extract_reply_content",
    "parse_structured_response",
    "render_structured_content",
    "split_stream_tokens",
    "stream_completion",
    "to_openai_response",
]
