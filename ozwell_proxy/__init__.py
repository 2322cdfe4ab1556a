"""Ozwell proxy

An OpenAI-compatible chat completions gateway in front of the Ozwell
single-turn completion API.

This module provides:
- Conversation flattening into the backend's prompt + system message call
- Structured output (JSON schema) negotiation
- OpenAI-style completion objects and synthetic SSE streaming

Example:
    >>> from ozwell_proxy import app
    >>> import uvicorn
    >>> uvicorn.run(app, host="0.0.0.0", port=3001)
"""

from .config_loader import GatewaySettings, load_config, load_settings
from .core import BackendClient, ChatGateway, GatewayError
from .logging import logger, setup_logging
from .main import app, create_app

__all__ = [
    "app",
    "BackendClient",
    "ChatGateway",
    "create_app",
    "GatewayError",
    "GatewaySettings",
    "load_config",
    "load_settings",
    "logger",
    "setup_logging",
]
