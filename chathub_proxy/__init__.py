"""chathub-proxy - an OpenAI-compatible front for ChatHub

Accepts OpenAI chat completion requests, forwards each one to the ChatHub
completions API and streams the answer back as OpenAI-shaped SSE chunks.

This module provides:
- create_app: FastAPI application factory
- ChatSessionHandler: model mapping, upstream call and stream translation
- load_config / ProxySettings: YAML configuration

Example:
    >>> from chathub_proxy import create_app, load_config
    >>> import uvicorn
    >>> uvicorn.run(create_app(load_config()), host="0.0.0.0", port=8080)
"""

from .app import create_app
from .config_loader import load_config
from .core import ChatSessionHandler, ModelMapper, ProxyError, StreamTranslator, UpstreamClient
from .logging import setup_logging
from .settings import ProxySettings

__version__ = "0.1.0"

__all__ = [
    "ChatSessionHandler",
    "ModelMapper",
    "ProxyError",
    "ProxySettings",
    "StreamTranslator",
    "UpstreamClient",
    "create_app",
    "load_config",
    "setup_logging",
]
