"""FastAPI application factory."""

import logging
from typing import Any, Mapping, Optional, Union

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.routes import chat_completions, health, list_models
from .core.credentials import CookieFileCredentialStore, CredentialStore, StaticCredentialStore
from .core.exceptions import ProxyError
from .core.model_mapper import ModelMapper
from .core.session import ChatSessionHandler
from .core.upstream import UpstreamClient
from .settings import ProxySettings, UpstreamSettings

logger = logging.getLogger("chathub-proxy")


def build_credential_store(settings: UpstreamSettings) -> CredentialStore:
    if settings.cookie:
        return StaticCredentialStore(settings.cookie)
    return CookieFileCredentialStore(settings.cookie_file)


def build_session_handler(
    settings: ProxySettings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ChatSessionHandler:
    upstream_settings = settings.upstream
    upstream = UpstreamClient(
        upstream_settings.url,
        build_credential_store(upstream_settings),
        device_id=upstream_settings.device_id,
        extra_headers=upstream_settings.headers,
        connect_timeout=upstream_settings.connect_timeout,
        transport=transport,
    )
    return ChatSessionHandler(ModelMapper(settings.model_mapping), upstream)


async def proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def create_app(
    config: Union[Mapping[str, Any], ProxySettings],
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the proxy application.

    Args:
        config: Raw configuration dict (as returned by ``load_config``) or
            already parsed settings.
        transport: Optional httpx transport for the upstream call.

    Returns:
        The configured FastAPI application instance.
    """
    settings = config if isinstance(config, ProxySettings) else ProxySettings.from_config(config)

    app = FastAPI(title="ChatHub Proxy")
    app.state.settings = settings
    app.state.session_handler = build_session_handler(settings, transport)
    app.add_exception_handler(ProxyError, proxy_error_handler)

    @app.on_event("startup")
    async def startup_event():
        logger.info("ChatHub proxy starting up...")
        logger.info(f"Upstream: {settings.upstream.url}")
        if settings.upstream.cookie_file is not None:
            logger.info(f"Session cookie file: {settings.upstream.cookie_file}")
        for name, target in settings.model_mapping.items():
            logger.info(f"  - {name} -> {target}")
        logger.info("ChatHub proxy ready to handle requests")

    app.get("/")(health)
    app.get("/v1/models")(list_models)
    app.post("/v1/chat/completions")(chat_completions)
    return app
