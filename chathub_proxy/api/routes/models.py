"""Models listing endpoint - OpenAI compatible."""

import logging
import time

from fastapi import Request

logger = logging.getLogger("chathub-proxy")

# Stable "created" value for every listed model
_STARTED_AT = int(time.time())


async def list_models(request: Request) -> dict:
    """List the model names that have an upstream mapping.

    GET /v1/models

    Unmapped names are still accepted by the completions endpoint and
    forwarded as-is; they just are not advertised here.
    """
    logger.info("Received models list request")

    mapper = request.app.state.session_handler.mapper
    models = [
        {
            "id": name,
            "object": "model",
            "created": _STARTED_AT,
            "owned_by": "chathub-proxy",
        }
        for name in mapper.names()
    ]
    return {
        "object": "list",
        "data": models,
    }
