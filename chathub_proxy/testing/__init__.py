"""Testing utilities for in-process proxy simulations."""

from .fake_upstream import (
    CHATHUB_ROUTE,
    FAKE_UPSTREAM_URL,
    FakeUpstream,
    UpstreamResponse,
    done_event,
    text_delta,
)

__all__ = [
    "CHATHUB_ROUTE",
    "FAKE_UPSTREAM_URL",
    "FakeUpstream",
    "UpstreamResponse",
    "done_event",
    "text_delta",
]
