"""Logging configuration for the gateway."""

import logging
import sys

LOGGER_NAME = "ozwell-proxy"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

REDACTED = "***"
SENSITIVE_HEADERS = {"authorization", "proxy-authorization", "cookie", "x-api-key"}


def setup_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Set up the gateway logger with a single stdout handler."""
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Clear any existing handlers so repeated app creation does not duplicate output
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(console_handler)

    logger.propagate = True
    return logger


def safe_headers_for_log(headers) -> dict[str, str]:
    """Return a copy of ``headers`` with credentials masked."""
    safe: dict[str, str] = {}
    for key, value in dict(headers).items():
        if str(key).lower() in SENSITIVE_HEADERS:
            safe[key] = REDACTED
        else:
            safe[key] = value
    return safe


# Global logger instance
logger = setup_logging()
