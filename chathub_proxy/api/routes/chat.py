"""OpenAI-compatible chat completions endpoint."""

import json
import logging

from fastapi import Request
from fastapi.responses import StreamingResponse

from ...core.exceptions import InvalidRequestBodyError, StreamingUnsupportedError
from ...core.session import ChatSessionHandler, supports_streaming
from ...core.sse import SSE_HEADERS
from ...types.chat import ChatRequest

logger = logging.getLogger("chathub-proxy")


def get_session_handler(request: Request) -> ChatSessionHandler:
    return request.app.state.session_handler


async def chat_completions(request: Request) -> StreamingResponse:
    """Chat completions endpoint - OpenAI compatible, always streamed.

    POST /v1/chat/completions

    Structural problems are rejected before the stream starts (400 for a
    bad body, 500 when the connection cannot stream). After that the
    status is committed to 200 and failures arrive as an SSE error frame.
    """
    body = await request.body()
    try:
        chat_request = ChatRequest.from_json(body)
    except ValueError as exc:
        logger.error(f"Invalid request body: {exc}")
        raise InvalidRequestBodyError("Invalid request body") from exc

    if not supports_streaming(request.scope):
        logger.error(f"Streaming unsupported for HTTP/{request.scope.get('http_version')}")
        raise StreamingUnsupportedError("Streaming unsupported")

    logger.info(f"Received request: {json.dumps(chat_request.to_dict(), ensure_ascii=False)}")

    handler = get_session_handler(request)
    return StreamingResponse(
        handler.stream(chat_request),
        status_code=200,
        headers=dict(SSE_HEADERS),
    )
