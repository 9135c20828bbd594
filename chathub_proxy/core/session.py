"""Session handling: one inbound request, one upstream call, one SSE stream."""

import logging
from typing import Any, AsyncIterator, Mapping

from ..types.chat import ChatRequest
from .exceptions import ProxyError
from .model_mapper import ModelMapper
from .sse import DONE_FRAME, encode_chunk, encode_error
from .translator import StreamTranslator, new_chunk_id
from .upstream import UpstreamClient

logger = logging.getLogger("chathub-proxy")


def supports_streaming(scope: Mapping[str, Any]) -> bool:
    """Whether the caller's connection can receive incrementally flushed frames.

    HTTP/1.0 has no chunked transfer encoding, so frames of unknown total
    length cannot be flushed one by one on that connection.
    """
    if scope.get("type") != "http":
        return False
    return scope.get("http_version", "1.1") != "1.0"


class ChatSessionHandler:
    """Runs the mapping, upstream call and translation for each session.

    The handler itself is stateless across sessions: the mapper is
    read-only and every call to ``stream`` builds its own translator and
    upstream connection.
    """

    def __init__(self, mapper: ModelMapper, upstream: UpstreamClient) -> None:
        self.mapper = mapper
        self.upstream = upstream

    async def stream(self, chat_request: ChatRequest) -> AsyncIterator[bytes]:
        """Yield SSE frames for one session.

        Every chunk becomes its own frame. The stream always ends with
        exactly one terminal frame: ``[DONE]`` on success or an error frame
        for the first fatal error. Malformed upstream lines are logged and
        skipped.
        """
        model = self.mapper.resolve(chat_request.model)
        if model != chat_request.model:
            logger.info(f"Mapped model {chat_request.model} to {model}")
        translator = StreamTranslator(model, chunk_id=new_chunk_id())

        try:
            async with self.upstream.open(model, chat_request.messages) as response:
                async for result in translator.translate(response):
                    if result.error is None:
                        yield encode_chunk(result.chunk)
                        continue
                    if not result.error.fatal:
                        logger.warning(f"Skipping upstream line: {result.error.message}")
                        continue
                    logger.error(f"Error in request: {result.error.message}")
                    yield encode_error(result.error.message)
                    return
        except ProxyError as exc:
            logger.error(f"Error in request: {exc.message}")
            yield encode_error(exc.message)
            return

        logger.info(f"Stream completed for model {model}")
        yield DONE_FRAME
