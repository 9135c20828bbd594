"""Decide how an upstream response body should be decoded."""

from enum import Enum

JSON_CONTENT_TYPE = "application/json"


class ResponseMode(str, Enum):
    SINGLE_JSON = "single_json"
    EVENT_STREAM = "event_stream"


def classify(content_type: str | None) -> ResponseMode:
    """Map a ``Content-Type`` header value onto a decoding mode.

    Only the exact value ``application/json`` selects single-document
    decoding. Everything else, including missing or unexpected types, is
    read as a line-oriented event stream.
    """
    if content_type == JSON_CONTENT_TYPE:
        return ResponseMode.SINGLE_JSON
    return ResponseMode.EVENT_STREAM
