"""OpenAI-compatible chat completions endpoint."""

import json
import logging
from typing import Mapping

from fastapi import Request, Response
from fastapi.responses import JSONResponse, StreamingResponse

from ...chat import to_openai_response
from ...core.exceptions import GatewayError, InternalError, InvalidRequestError

logger = logging.getLogger("ozwell-proxy")

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def error_response(error: GatewayError) -> JSONResponse:
    """Render a ``GatewayError`` as the standard OpenAI error body."""
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


async def chat_completions(request: Request) -> Response:
    """Chat completions endpoint - OpenAI compatible.

    POST /v1/chat/completions

    The whole backend reply is obtained before anything is written, so every
    failure is reported as a JSON error body. With ``stream: true`` the
    finished reply is then replayed as SSE chunks.
    """
    logger.info("Received chat completions request")
    body = await request.body()
    try:
        payload = json.loads(body or b"{}")
    except ValueError as exc:
        logger.error(f"Invalid JSON payload: {exc}")
        return error_response(InvalidRequestError("Invalid JSON payload"))

    if not isinstance(payload, Mapping):
        logger.error("Payload must be a JSON object")
        return error_response(InvalidRequestError("Request body must be a JSON object"))

    is_stream = bool(payload.get("stream"))
    credential = request.headers.get("authorization")
    gateway = request.app.state.gateway

    try:
        result = await gateway.complete(payload, credential)
    except GatewayError as exc:
        logger.error(f"Chat completion failed ({exc.status_code} {exc.error_type}): {exc.message}")
        return error_response(exc)
    except Exception:
        logger.exception("Unexpected error while processing chat completion")
        return error_response(InternalError())

    if is_stream:
        logger.info(f"Streaming completion {result.id} to client")
        return StreamingResponse(
            gateway.stream(result, disconnect_checker=request.is_disconnected),
            media_type="text/event-stream",
            headers=STREAM_HEADERS,
        )

    logger.info(f"Sending completion {result.id}")
    return JSONResponse(content=to_openai_response(result))
