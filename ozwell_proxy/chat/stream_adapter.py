"""Synthetic OpenAI streaming for a fully known completion.

The backend only returns whole replies. When a client asks for
``stream: true`` the finished content is replayed word by word as
``chat.completion.chunk`` events, with a short pause between words so
clients render it progressively. The pause is cosmetic.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, Optional

from ..core.sse import SSE_DONE, encode_sse_event
from ..types import ChatCompletionChunk, ChunkDelta
from .response import FINISH_REASON_STOP, CompletionResult

logger = logging.getLogger("ozwell-proxy")

DEFAULT_CHUNK_DELAY = 0.05

DisconnectChecker = Callable[[], Awaitable[bool]]


def split_stream_tokens(content: str) -> list[str]:
    """Split ``content`` into word tokens that concatenate back to ``content``.

    The text is split on single spaces and the separator is re-attached to
    every piece but the last, so runs of spaces survive as their own tokens.
    """
    pieces = content.split(" ")
    tokens = [f"{piece} " for piece in pieces[:-1]]
    tokens.append(pieces[-1])
    return [token for token in tokens if token]


def build_stream_chunk(
    result: CompletionResult,
    delta: ChunkDelta,
    finish_reason: Optional[str] = None,
) -> ChatCompletionChunk:
    return {
        "id": result.id,
        "object": "chat.completion.chunk",
        "created": result.created,
        "model": result.model,
        "choices": [
            {
                "index": 0,
                "delta": delta,
                "finish_reason": finish_reason,
            }
        ],
    }


async def stream_completion(
    result: CompletionResult,
    chunk_delay: float = DEFAULT_CHUNK_DELAY,
    disconnect_checker: Optional[DisconnectChecker] = None,
) -> AsyncIterator[bytes]:
    """Yield SSE frames replaying ``result``.

    One content chunk per token, then a ``finish_reason: "stop"`` chunk with
    an empty delta, then ``data: [DONE]``. Emission stops quietly once
    ``disconnect_checker`` reports the client has gone.
    """
    tokens = split_stream_tokens(result.content)
    logger.info(f"Streaming completion {result.id} as {len(tokens)} chunks")
    sent = 0
    try:
        for index, token in enumerate(tokens):
            if index and chunk_delay > 0:
                await asyncio.sleep(chunk_delay)
            if disconnect_checker and await disconnect_checker():
                logger.info(f"Client disconnected from stream {result.id} after {sent} chunks")
                return
            yield encode_sse_event(build_stream_chunk(result, {"content": token}))
            sent += 1

        if disconnect_checker and await disconnect_checker():
            logger.info(f"Client disconnected from stream {result.id} before stop event")
            return
        yield encode_sse_event(build_stream_chunk(result, {}, FINISH_REASON_STOP))
        yield SSE_DONE
        logger.debug(f"Stream {result.id} completed, total chunks: {sent}")
    except asyncio.CancelledError:
        logger.info(f"Stream {result.id} cancelled by client after {sent} chunks")
        raise
