"""OpenAI messages -> single-turn prompt flattening.

The backend accepts one prompt plus one system message, so a chat
conversation is collapsed into:
- prompt: the text of the last user message
- system message: the last system message (or a default), followed by the
  earlier turns as a "Conversation history:" block
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from ..core.exceptions import InvalidRequestError

logger = logging.getLogger("ozwell-proxy")

DEFAULT_SYSTEM_MESSAGE = "You are a helpful assistant."
HISTORY_HEADER = "Conversation history:"

_HISTORY_PREFIXES = {
    "user": "User: ",
    "assistant": "Assistant: ",
}


@dataclass(frozen=True)
class ConversationContext:
    """Flattened view of a chat request."""

    prompt: str
    system_message: str
    history: tuple[str, ...] = ()


def extract_message_text(content: Any) -> str:
    """Return the text of a message ``content`` field.

    Plain strings are returned verbatim. For a list of content parts the
    ``text`` of every ``{"type": "text"}`` part is joined with single spaces;
    images and other part types are dropped.
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = []
        for part in content:
            if not isinstance(part, Mapping) or part.get("type") != "text":
                continue
            text = part.get("text")
            if isinstance(text, str):
                texts.append(text)
        return " ".join(texts)
    logger.debug("Ignoring unsupported content type %s", type(content).__name__)
    return ""


def build_conversation_context(messages: Any) -> ConversationContext:
    """Flatten an OpenAI ``messages`` array into a ``ConversationContext``.

    Raises:
        InvalidRequestError: if ``messages`` is not a list, holds a
            non-object entry, or has no non-empty user message.
    """
    if not isinstance(messages, list):
        raise InvalidRequestError("Messages array is required")

    system_message = DEFAULT_SYSTEM_MESSAGE
    history: list[str] = []
    prompt = ""

    for index, message in enumerate(messages):
        if not isinstance(message, Mapping):
            raise InvalidRequestError(f"Message at index {index} must be an object")
        role = message.get("role")
        text = extract_message_text(message.get("content"))
        if role == "system":
            system_message = text
        elif role in _HISTORY_PREFIXES:
            history.append(f"{_HISTORY_PREFIXES[role]}{text}")
            if role == "user":
                prompt = text
        else:
            logger.debug("Skipping message with unsupported role %r", role)

    if not prompt.strip():
        raise InvalidRequestError("No user message found")

    if len(history) > 1:
        system_message = _append_history(system_message, history[:-1])

    return ConversationContext(
        prompt=prompt,
        system_message=system_message,
        history=tuple(history),
    )


def _append_history(system_message: str, lines: Sequence[str]) -> str:
    block = "\n".join(lines)
    return f"{system_message}\n\n{HISTORY_HEADER}\n{block}"
