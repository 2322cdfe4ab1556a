"""Backend reply -> OpenAI chat completion.

The backend reply has no fixed schema. Its text is recovered by running an
ordered list of decoders over the generic JSON value; the first one that
yields non-empty text wins.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from ..core.exceptions import EmptyUpstreamContentError, EmptyUpstreamReplyError
from .normalizer import extract_message_text
from ..types import ChatCompletion, Usage
from .usage import estimate_usage

logger = logging.getLogger("ozwell-proxy")

DEFAULT_MODEL_LABEL = "Ozwell"
FINISH_REASON_STOP = "stop"

ReplyDecoder = Callable[[Any], Optional[str]]


def _first_choice(reply: Any) -> Optional[Mapping[str, Any]]:
    if not isinstance(reply, Mapping):
        return None
    choices = reply.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    return choice if isinstance(choice, Mapping) else None


def _decode_openai_choice(reply: Any) -> Optional[str]:
    choice = _first_choice(reply)
    if choice is None:
        return None
    message = choice.get("message")
    if isinstance(message, Mapping):
        text = extract_message_text(message.get("content"))
        if text.strip():
            return text
    text = choice.get("text")
    return text if isinstance(text, str) else None


def _decode_field(name: str) -> ReplyDecoder:
    def decode(reply: Any) -> Optional[str]:
        if not isinstance(reply, Mapping):
            return None
        value = reply.get(name)
        return value if isinstance(value, str) else None

    decode.__name__ = f"_decode_{name}_field"
    return decode


def _decode_plain_text(reply: Any) -> Optional[str]:
    return reply if isinstance(reply, str) else None


REPLY_DECODERS: tuple[ReplyDecoder, ...] = (
    _decode_openai_choice,
    _decode_field("content"),
    _decode_field("text"),
    _decode_field("response"),
    _decode_plain_text,
)


def extract_reply_content(reply: Any) -> str:
    """Return the assistant text carried by a backend ``reply``.

    Raises:
        EmptyUpstreamReplyError: if the backend sent no body at all.
        EmptyUpstreamContentError: if no decoder found non-empty text.
    """
    if reply is None:
        raise EmptyUpstreamReplyError()

    for decoder in REPLY_DECODERS:
        text = decoder(reply)
        if text and text.strip():
            logger.debug("Backend reply decoded by %s", decoder.__name__)
            return text

    if isinstance(reply, Mapping):
        logger.error("No content in backend reply; fields: %s", list(reply.keys()))
    else:
        logger.error("No content in backend reply of type %s", type(reply).__name__)
    raise EmptyUpstreamContentError()


def extract_reply_id(reply: Any) -> Optional[str]:
    if not isinstance(reply, Mapping):
        return None
    for key in ("logId", "id"):
        value = reply.get(key)
        if isinstance(value, (str, int)) and str(value):
            return str(value)
    return None


def extract_refusal(reply: Any) -> Optional[str]:
    choice = _first_choice(reply)
    if choice is None:
        return None
    message = choice.get("message")
    if not isinstance(message, Mapping):
        return None
    refusal = message.get("refusal")
    return refusal if isinstance(refusal, str) and refusal else None


def generate_completion_id() -> str:
    return f"chatcmpl-{uuid.uuid4().hex}"


@dataclass
class CompletionResult:
    """A finished completion, ready to be sent whole or streamed."""

    id: str
    model: str
    content: str
    usage: Usage
    finish_reason: str = FINISH_REASON_STOP
    refusal: Optional[str] = None
    created: int = field(default_factory=lambda: int(time.time()))


def build_completion_result(
    reply: Any,
    content: str,
    prompt: str,
    model: Optional[str] = None,
    default_model: str = DEFAULT_MODEL_LABEL,
) -> CompletionResult:
    """Assemble a ``CompletionResult`` for ``content`` decoded from ``reply``."""
    return CompletionResult(
        id=extract_reply_id(reply) or generate_completion_id(),
        model=model or default_model,
        content=content,
        usage=estimate_usage(prompt, content),
        refusal=extract_refusal(reply),
    )


def to_openai_response(result: CompletionResult) -> ChatCompletion:
    """Render ``result`` as an OpenAI ``chat.completion`` object."""
    return {
        "id": result.id,
        "object": "chat.completion",
        "created": result.created,
        "model": result.model,
        "choices": [
            {
                "index": 0,
                "message": {
                    "role": "assistant",
                    "content": result.content,
                    "refusal": result.refusal,
                },
                "finish_reason": result.finish_reason,
            }
        ],
        "usage": result.usage,
    }
