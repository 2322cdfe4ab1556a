"""Core exceptions for the gateway.

Every failure that reaches a client is a ``GatewayError`` carrying the HTTP
status and the OpenAI error ``type`` it should be reported with.
"""

from typing import Optional

from ..types import ErrorResponse

INVALID_REQUEST = "invalid_request_error"
AUTHENTICATION = "authentication_error"
API_ERROR = "api_error"


class GatewayError(Exception):
    """Base exception for gateway errors."""

    status_code = 500
    error_type = API_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_payload(self) -> ErrorResponse:
        """Render the OpenAI-style error body."""
        return {
            "error": {
                "message": self.message,
                "type": self.error_type,
                "code": self.status_code,
            }
        }


class InvalidRequestError(GatewayError):
    """Raised when an incoming request is malformed."""

    status_code = 400
    error_type = INVALID_REQUEST


class MissingCredentialError(GatewayError):
    """Raised when the caller did not send an Authorization header."""

    status_code = 401
    error_type = AUTHENTICATION

    def __init__(self, message: str = "Authorization header is required") -> None:
        super().__init__(message)


class AuthenticationError(GatewayError):
    """The backend rejected the forwarded credential."""

    status_code = 401
    error_type = AUTHENTICATION


class UpstreamApiError(GatewayError):
    """The backend answered with a non-401 HTTP error status."""

    error_type = API_ERROR


class UpstreamUnavailableError(GatewayError):
    """The backend could not be reached or did not answer in time."""

    error_type = API_ERROR


class EmptyUpstreamReplyError(GatewayError):
    """The backend answered without a body."""

    error_type = API_ERROR

    def __init__(self, message: str = "Empty response from backend") -> None:
        super().__init__(message)


class EmptyUpstreamContentError(GatewayError):
    """The backend reply contained no usable text."""

    error_type = API_ERROR

    def __init__(self, message: str = "Backend response contained no content") -> None:
        super().__init__(message)


class InternalError(GatewayError):
    """Any failure the gateway did not anticipate."""

    error_type = API_ERROR

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)


class ConfigurationError(GatewayError):
    """Raised when there's an issue with the configuration."""
    pass
