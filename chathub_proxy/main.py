"""Module-level application for ``uvicorn chathub_proxy.main:app``.

Configuration is loaded at import time from CHATHUB_PROXY_CONFIG (or
configs/config.yaml).
"""

from .app import create_app
from .config_loader import load_config
from .logging import setup_logging
from .settings import ProxySettings

config = load_config()
settings = ProxySettings.from_config(config)

logger = setup_logging(settings.log_level)

app = create_app(settings)
logger.info("FastAPI application created")

SERVER_HOST = settings.server.host
SERVER_PORT = settings.server.port

__all__ = ["app", "config", "settings", "SERVER_HOST", "SERVER_PORT"]
