"""Per-request access logging."""

import logging

logger = logging.getLogger("ozwell-proxy")


class AccessLogMiddleware:
    """Log the method and path of every HTTP request.

    Plain ASGI so that streaming responses and disconnect detection see the
    server's own receive channel.
    """

    def __init__(self, app) -> None:
        self.app = app

    async def __call__(self, scope, receive, send) -> None:
        if scope["type"] == "http":
            logger.info(f"{scope['method']} {scope['path']}")
        await self.app(scope, receive, send)
