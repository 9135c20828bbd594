"""SSE (Server-Sent Events) framing for the caller-facing stream."""

import json
from typing import Any

from ..types.chat import CompletionChunk

SSE_HEADERS = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}

DONE_FRAME = b"data: [DONE]\n\n"


def encode_data(data: str) -> bytes:
    """Frame one payload as ``data: <payload>\\n\\n``."""
    return f"data: {data}\n\n".encode("utf-8")


def encode_json(payload: Any) -> bytes:
    return encode_data(json.dumps(payload, ensure_ascii=False))


def encode_chunk(chunk: CompletionChunk) -> bytes:
    return encode_json(chunk.to_dict())


def encode_error(message: str) -> bytes:
    """Terminal error frame: ``data: {"error": "<message>"}``."""
    return encode_json({"error": message})
