"""Core module initialization."""

from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    EmptyUpstreamContentError,
    EmptyUpstreamReplyError,
    GatewayError,
    InternalError,
    InvalidRequestError,
    MissingCredentialError,
    UpstreamApiError,
    UpstreamUnavailableError,
)
from .sse import SSE_DONE, decode_sse_payloads, encode_sse_event
from .backend import (
    Backend,
    BackendClient,
    build_backend_body,
    build_outbound_headers,
    format_httpx_error,
)
from .gateway import ChatGateway

__all__ = [
    "AuthenticationError",
    "Backend",
    "BackendClient",
    "ChatGateway",
    "ConfigurationError",
    "EmptyUpstreamContentError",
    "EmptyUpstreamReplyError",
    "GatewayError",
    "InternalError",
    "InvalidRequestError",
    "MissingCredentialError",
    "SSE_DONE",
    "UpstreamApiError",
    "UpstreamUnavailableError",
    "build_backend_body",
    "build_outbound_headers",
    "decode_sse_payloads",
    "encode_sse_event",
    "format_httpx_error",
]
