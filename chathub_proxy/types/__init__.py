"""Type definitions for the proxy."""

from .chat import (
    EVENT_DONE,
    EVENT_TEXT_DELTA,
    ChatRequest,
    Choice,
    CompletionChunk,
    Delta,
    Message,
    UpstreamEvent,
)

__all__ = [
    "EVENT_DONE",
    "EVENT_TEXT_DELTA",
    "ChatRequest",
    "Choice",
    "CompletionChunk",
    "Delta",
    "Message",
    "UpstreamEvent",
]
