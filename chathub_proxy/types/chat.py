"""Types for the chat payloads that cross the proxy.

This module defines the shapes on both sides of the translation:
- OpenAI-compatible types: the inbound request and the streamed chunks
- ChatHub types: the events the upstream sends on its event stream

Parsing helpers raise ``ValueError`` on a wrong JSON shape; callers map
that onto the proxy error that fits the direction of travel.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


def _expect_str(payload: Mapping[str, Any], key: str, default: str = "") -> str:
    value = payload.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"field '{key}' must be a string, got {type(value).__name__}")
    return value


def _expect_int(payload: Mapping[str, Any], key: str, default: int = 0) -> int:
    value = payload.get(key)
    if value is None:
        return default
    # bool is an int subclass but never a valid timestamp or index
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field '{key}' must be an integer, got {type(value).__name__}")
    return value


# =============================================================================
# OpenAI-Compatible Types
# =============================================================================


@dataclass(frozen=True)
class Message:
    """A message in a chat conversation.

    Attributes:
        role: Role of the author ("system", "user", "assistant", ...).
        content: Text content, forwarded to the upstream untouched.
    """

    role: str
    content: str

    @classmethod
    def from_dict(cls, payload: Any) -> "Message":
        if not isinstance(payload, Mapping):
            raise ValueError("message must be a JSON object")
        return cls(
            role=_expect_str(payload, "role"),
            content=_expect_str(payload, "content"),
        )

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ChatRequest:
    """An inbound chat completions request.

    Only ``model`` and ``messages`` are read; any other field (``stream``,
    ``temperature``...) is ignored.
    """

    model: str
    messages: tuple[Message, ...] = ()

    @classmethod
    def from_payload(cls, payload: Any) -> "ChatRequest":
        if not isinstance(payload, Mapping):
            raise ValueError("request body must be a JSON object")
        raw_messages = payload.get("messages")
        if raw_messages is None:
            raw_messages = []
        if not isinstance(raw_messages, list):
            raise ValueError("field 'messages' must be an array")
        return cls(
            model=_expect_str(payload, "model"),
            messages=tuple(Message.from_dict(item) for item in raw_messages),
        )

    @classmethod
    def from_json(cls, body: bytes) -> "ChatRequest":
        """Parse a raw request body.

        Raises:
            ValueError: If the body is not valid JSON or does not have the
                shape of a chat request.
        """
        return cls.from_payload(json.loads(body or b"null"))

    def to_dict(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [message.to_dict() for message in self.messages],
        }


@dataclass
class Delta:
    """Incremental message content carried by one chunk.

    Empty fields are left out of the JSON, mirroring how OpenAI streams
    only the parts of the message that changed.
    """

    role: str = ""
    content: str = ""

    @classmethod
    def from_dict(cls, payload: Any) -> "Delta":
        if payload is None:
            return cls()
        if not isinstance(payload, Mapping):
            raise ValueError("field 'delta' must be a JSON object")
        return cls(
            role=_expect_str(payload, "role"),
            content=_expect_str(payload, "content"),
        )

    def to_dict(self) -> dict[str, str]:
        data: dict[str, str] = {}
        if self.role:
            data["role"] = self.role
        if self.content:
            data["content"] = self.content
        return data


@dataclass
class Choice:
    index: int = 0
    delta: Delta = field(default_factory=Delta)
    logprobs: Optional[Any] = None
    finish_reason: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Any) -> "Choice":
        if not isinstance(payload, Mapping):
            raise ValueError("choice must be a JSON object")
        finish_reason = payload.get("finish_reason")
        if finish_reason is not None and not isinstance(finish_reason, str):
            raise ValueError("field 'finish_reason' must be a string")
        return cls(
            index=_expect_int(payload, "index"),
            delta=Delta.from_dict(payload.get("delta")),
            logprobs=payload.get("logprobs"),
            finish_reason=finish_reason,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "delta": self.delta.to_dict(),
            "logprobs": self.logprobs,
            "finish_reason": self.finish_reason,
        }


@dataclass
class CompletionChunk:
    """One ``chat.completion.chunk`` object as streamed to the caller."""

    id: str
    object: str
    created: int
    model: str
    system_fingerprint: str = ""
    choices: list[Choice] = field(default_factory=list)

    @classmethod
    def for_text(cls, chunk_id: str, model: str, text: str, created: int) -> "CompletionChunk":
        """Wrap a text delta in a single-choice chunk."""
        return cls(
            id=chunk_id,
            object="chat.completion.chunk",
            created=created,
            model=model,
            choices=[Choice(index=0, delta=Delta(content=text))],
        )

    @classmethod
    def from_dict(cls, payload: Any) -> "CompletionChunk":
        if not isinstance(payload, Mapping):
            raise ValueError("completion must be a JSON object")
        raw_choices = payload.get("choices")
        if raw_choices is None:
            raw_choices = []
        if not isinstance(raw_choices, list):
            raise ValueError("field 'choices' must be an array")
        return cls(
            id=_expect_str(payload, "id"),
            object=_expect_str(payload, "object"),
            created=_expect_int(payload, "created"),
            model=_expect_str(payload, "model"),
            system_fingerprint=_expect_str(payload, "system_fingerprint"),
            choices=[Choice.from_dict(item) for item in raw_choices],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "object": self.object,
            "created": self.created,
            "model": self.model,
            "system_fingerprint": self.system_fingerprint,
            "choices": [choice.to_dict() for choice in self.choices],
        }


# =============================================================================
# ChatHub Types
# =============================================================================

EVENT_TEXT_DELTA = "text-delta"
EVENT_DONE = "done"


@dataclass(frozen=True)
class UpstreamEvent:
    """One event from the upstream stream, e.g. ``{"type": "text-delta", "textDelta": "hi"}``."""

    type: str
    text_delta: str = ""

    @classmethod
    def from_json(cls, data: str) -> "UpstreamEvent":
        payload = json.loads(data)
        if not isinstance(payload, Mapping):
            raise ValueError("event must be a JSON object")
        return cls(
            type=_expect_str(payload, "type"),
            text_delta=_expect_str(payload, "textDelta"),
        )
