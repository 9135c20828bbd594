"""Core module initialization."""

from .classifier import ResponseMode, classify
from .credentials import CookieFileCredentialStore, CredentialStore, StaticCredentialStore
from .exceptions import (
    ConfigurationError,
    CredentialUnavailableError,
    InvalidRequestBodyError,
    ProxyError,
    StreamingUnsupportedError,
    UpstreamDecodeError,
    UpstreamLineError,
    UpstreamReadError,
    UpstreamRequestError,
)
from .model_mapper import DEFAULT_MODEL_MAPPING, ModelMapper
from .session import ChatSessionHandler, supports_streaming
from .translator import StreamResult, StreamTranslator
from .upstream import UpstreamClient

__all__ = [
    "ChatSessionHandler",
    "ConfigurationError",
    "CookieFileCredentialStore",
    "CredentialStore",
    "CredentialUnavailableError",
    "DEFAULT_MODEL_MAPPING",
    "InvalidRequestBodyError",
    "ModelMapper",
    "ProxyError",
    "ResponseMode",
    "StaticCredentialStore",
    "StreamResult",
    "StreamTranslator",
    "StreamingUnsupportedError",
    "UpstreamClient",
    "UpstreamDecodeError",
    "UpstreamLineError",
    "UpstreamReadError",
    "UpstreamRequestError",
    "classify",
    "supports_streaming",
]
