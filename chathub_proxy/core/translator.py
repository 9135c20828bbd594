"""Translation of ChatHub responses into OpenAI completion chunks.

The translator turns one upstream body into an ordered sequence of
``StreamResult`` items. Each item carries either a chunk or an error, so
success and failure travel through the same ordered stream and the
consumer never has to poll two sources.

Event-stream bodies look like::

    data: {"type":"text-delta","textDelta":"Hel"}
    data: {"type":"text-delta","textDelta":"lo"}
    data: {"type":"done"}

Lines without the ``data: `` prefix are keep-alives or comments and are
skipped.
"""

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Optional

import httpx

from ..types.chat import EVENT_DONE, EVENT_TEXT_DELTA, CompletionChunk, UpstreamEvent
from .classifier import ResponseMode, classify
from .exceptions import ProxyError, UpstreamDecodeError, UpstreamLineError, UpstreamReadError

logger = logging.getLogger("chathub-proxy")

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def new_chunk_id() -> str:
    return f"chatcmpl-{uuid.uuid4().hex[:24]}"


@dataclass(frozen=True)
class StreamResult:
    """Either a chunk or an error, never both."""

    chunk: Optional[CompletionChunk] = None
    error: Optional[ProxyError] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


class StreamTranslator:
    """Stateful translator for a single session.

    Args:
        model: The resolved upstream model, stamped on synthesized chunks.
        chunk_id: Id shared by every chunk of the session.
        clock: Returns the current unix time; replaced in tests.
    """

    def __init__(
        self,
        model: str,
        *,
        chunk_id: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.model = model
        self.chunk_id = chunk_id or new_chunk_id()
        self._clock = clock

    async def translate(self, response: httpx.Response) -> AsyncIterator[StreamResult]:
        """Translate a streamed upstream response, choosing the decoder by content type."""
        mode = classify(response.headers.get("content-type"))
        logger.debug(f"Decoding upstream body as {mode.value}")

        if mode is ResponseMode.SINGLE_JSON:
            try:
                body = await response.aread()
            except httpx.HTTPError as exc:
                logger.error(f"Error reading response: {exc}")
                yield StreamResult(error=UpstreamReadError(f"error reading response: {exc}"))
                return
            async for result in self.translate_json(body):
                yield result
            return

        async for result in self.translate_lines(response.aiter_lines()):
            yield result

    async def translate_json(self, body: bytes) -> AsyncIterator[StreamResult]:
        """Decode a whole body as one completion chunk and emit it once."""
        try:
            chunk = CompletionChunk.from_dict(json.loads(body))
        except (ValueError, RecursionError) as exc:
            logger.error(f"Failed to decode JSON response: {exc}")
            yield StreamResult(error=UpstreamDecodeError(f"failed to decode JSON response: {exc}"))
            return
        yield StreamResult(chunk=chunk)

    async def translate_lines(self, lines: AsyncIterator[str]) -> AsyncIterator[StreamResult]:
        """Translate ``data: `` lines until ``done``, end of stream or a read error.

        Cancellation raised while waiting for the next line is logged and
        re-raised; closing the upstream is left to whoever opened it.
        """
        iterator = lines.__aiter__()
        while True:
            try:
                line = await iterator.__anext__()
            except StopAsyncIteration:
                logger.debug("Upstream stream ended without a done event")
                return
            except asyncio.CancelledError:
                logger.info("Context canceled, stopping stream processing")
                raise
            except httpx.HTTPError as exc:
                logger.error(f"Error reading response: {exc}")
                yield StreamResult(error=UpstreamReadError(f"error reading response: {exc}"))
                return

            if not line.startswith(DATA_PREFIX):
                continue
            data = line[len(DATA_PREFIX):].strip()

            if data == DONE_SENTINEL:
                return

            # Deeply nested JSON exhausts the decoder's recursion limit
            try:
                event = UpstreamEvent.from_json(data)
            except (ValueError, RecursionError) as exc:
                logger.warning(f"Error unmarshaling message: {exc}")
                yield StreamResult(
                    error=UpstreamLineError(f"error unmarshaling message: {exc}", line=data)
                )
                continue

            if event.type == EVENT_TEXT_DELTA:
                yield StreamResult(chunk=self._text_chunk(event.text_delta))
            elif event.type == EVENT_DONE:
                return

    def _text_chunk(self, text: str) -> CompletionChunk:
        return CompletionChunk.for_text(
            chunk_id=self.chunk_id,
            model=self.model,
            text=text,
            created=int(self._clock()),
        )
