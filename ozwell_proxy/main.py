"""Main FastAPI application for the Ozwell proxy."""

import logging
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.routes import chat_completions, error_response, health, list_models
from .config_loader import GatewaySettings, load_settings
from .core import Backend, BackendClient, ChatGateway
from .core.exceptions import GatewayError, InternalError, InvalidRequestError
from .logging import AccessLogMiddleware, setup_logging

logger = logging.getLogger("ozwell-proxy")

CORS_ALLOW_HEADERS = [
    "Origin",
    "X-Requested-With",
    "Content-Type",
    "Accept",
    "Authorization",
]
CORS_ALLOW_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


def build_gateway(
    settings: GatewaySettings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ChatGateway:
    backend = Backend(
        base_url=settings.backend_url,
        completion_path=settings.completion_path,
        timeout=settings.backend_timeout,
    )
    client = BackendClient(backend, transport=transport, log_payloads=settings.log_payloads)
    return ChatGateway(
        client,
        default_model=settings.default_model,
        chunk_delay=settings.stream_chunk_delay,
    )


def create_app(
    settings: Optional[GatewaySettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Factory function to create the FastAPI application.

    Args:
        settings: Resolved settings; loaded from the config file when omitted.
        transport: Optional httpx transport for the backend call (tests use
            it to reach an in-process fake backend).

    Returns:
        The configured FastAPI application instance.
    """
    if settings is None:
        settings = load_settings()
    setup_logging(settings.log_level)

    gateway = build_gateway(settings, transport)

    app = FastAPI(title="Ozwell Proxy")
    app.state.settings = settings
    app.state.gateway = gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
    )
    app.add_middleware(AccessLogMiddleware)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            error: GatewayError = InvalidRequestError("Not found", status_code=404)
        elif exc.status_code < 500:
            error = InvalidRequestError(str(exc.detail), status_code=exc.status_code)
        else:
            error = InternalError(str(exc.detail))
            error.status_code = exc.status_code
        return error_response(error)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return error_response(InternalError())

    app.post("/v1/chat/completions")(chat_completions)
    app.get("/v1/models")(list_models)
    app.get("/health")(health)

    logger.info(
        "Ozwell proxy configured: backend=%s, default model=%s, stream delay=%ss",
        gateway.client.backend.completion_url,
        settings.default_model,
        settings.stream_chunk_delay,
    )
    return app


app = create_app()


__all__ = ["app", "build_gateway", "create_app"]
