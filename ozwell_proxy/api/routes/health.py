"""Liveness endpoint."""

from datetime import datetime, timezone

SERVICE_NAME = "Ozwell Proxy"


async def health() -> dict:
    """GET /health"""
    return {
        "status": "OK",
        "service": SERVICE_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }
