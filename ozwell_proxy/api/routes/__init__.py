"""API routes for the gateway."""

from .chat import chat_completions, error_response
from .health import health
from .models import list_models

__all__ = [
    "chat_completions",
    "error_response",
    "health",
    "list_models",
]
