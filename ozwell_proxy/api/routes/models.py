"""Models listing endpoint - OpenAI compatible."""

import logging
import time

from fastapi import Request

logger = logging.getLogger("ozwell-proxy")


async def list_models(request: Request) -> dict:
    """List the single model label the gateway answers as.

    GET /v1/models
    """
    logger.info("Received models list request")
    settings = request.app.state.settings
    return {
        "object": "list",
        "data": [
            {
                "id": settings.default_model,
                "object": "model",
                "created": int(time.time()),
                "owned_by": settings.model_owner,
            }
        ],
    }
