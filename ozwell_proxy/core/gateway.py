"""Request pipeline: OpenAI chat request in, ``CompletionResult`` out."""

import logging
from typing import Any, AsyncIterator, Mapping, Optional

from ..chat import (
    build_completion_result,
    build_conversation_context,
    extract_reply_content,
    render_structured_content,
    stream_completion,
)
from ..chat.stream_adapter import DisconnectChecker
from ..chat.structured import apply_response_format
from .backend import BackendClient
from .exceptions import InvalidRequestError, MissingCredentialError

logger = logging.getLogger("ozwell-proxy")


def parse_max_tokens(payload: Mapping[str, Any]) -> Optional[int]:
    value = payload.get("max_tokens")
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidRequestError("max_tokens must be a positive integer")
    return value


class ChatGateway:
    """Runs one chat completion request against the backend.

    The gateway keeps no per-request state; it only holds the backend
    client and read-only settings, so one instance serves every request.
    """

    def __init__(
        self,
        client: BackendClient,
        default_model: str = "Ozwell",
        chunk_delay: float = 0.05,
    ) -> None:
        self.client = client
        self.default_model = default_model
        self.chunk_delay = chunk_delay

    async def complete(self, payload: Mapping[str, Any], credential: Optional[str]):
        """Translate ``payload``, call the backend and build the result.

        Raises:
            GatewayError: for every expected failure; nothing has been sent
                to the client when this raises.
        """
        context = build_conversation_context(payload.get("messages"))
        max_tokens = parse_max_tokens(payload)
        if not credential:
            raise MissingCredentialError()

        response_format = payload.get("response_format")
        if not isinstance(response_format, Mapping):
            response_format = None
        system_message = apply_response_format(context.system_message, response_format)

        requested_model = payload.get("model")
        if not isinstance(requested_model, str) or not requested_model.strip():
            requested_model = None

        logger.info(
            f"Forwarding prompt ({len(context.prompt)} chars, "
            f"{len(context.history)} history lines) to backend"
        )
        reply = await self.client.complete(
            context.prompt,
            system_message,
            credential,
            max_tokens=max_tokens,
        )

        text = extract_reply_content(reply)
        content = render_structured_content(text, response_format)
        result = build_completion_result(
            reply,
            content,
            context.prompt,
            model=requested_model,
            default_model=self.default_model,
        )
        logger.info(f"Completion {result.id} ready ({len(result.content)} chars)")
        return result

    def stream(
        self, result, disconnect_checker: Optional[DisconnectChecker] = None
    ) -> AsyncIterator[bytes]:
        return stream_completion(
            result,
            chunk_delay=self.chunk_delay,
            disconnect_checker=disconnect_checker,
        )
