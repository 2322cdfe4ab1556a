"""Logging module for the gateway."""

from .access import AccessLogMiddleware
from .setup import LOGGER_NAME, logger, safe_headers_for_log, setup_logging

__all__ = [
    "AccessLogMiddleware",
    "LOGGER_NAME",
    "logger",
    "safe_headers_for_log",
    "setup_logging",
]
