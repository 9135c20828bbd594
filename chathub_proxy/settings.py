"""Typed settings built from the loaded YAML configuration."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from .core.exceptions import ConfigurationError
from .core.model_mapper import DEFAULT_MODEL_MAPPING

logger = logging.getLogger("chathub-proxy")

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_UPSTREAM_URL = "https://app.chathub.gg/api/v3/chat/completions"
DEFAULT_COOKIE_FILE = "data/cookie.txt"
DEFAULT_DEVICE_ID = "db043b73-ee1b-49f0-a0f1-5f709d87c06d"
PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _section(config: Mapping[str, Any], *keys: str) -> Mapping[str, Any]:
    current: Any = config
    for key in keys:
        if not isinstance(current, Mapping):
            return {}
        current = current.get(key)
    return current if isinstance(current, Mapping) else {}


def _parse_port(value: Any, source: str) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"invalid port in {source}: {value!r}") from exc
    if not 0 < port < 65536:
        raise ConfigurationError(f"port out of range in {source}: {port}")
    return port


def _parse_optional_float(value: Any, name: str) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"invalid value for {name}: {value!r}") from exc


def _parse_str_mapping(value: Any, name: str) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"{name} must be a mapping")
    return {str(key): str(item) for key, item in value.items()}


@dataclass(frozen=True)
class ServerSettings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ServerSettings":
        """Read server settings; CHATHUB_PROXY_HOST / CHATHUB_PROXY_PORT take priority."""
        server_cfg = _section(config, "proxy_settings", "server")

        host = os.getenv("CHATHUB_PROXY_HOST")
        if host is None:
            host = str(server_cfg.get("host", DEFAULT_HOST))

        port_env = os.getenv("CHATHUB_PROXY_PORT")
        if port_env is not None:
            port = _parse_port(port_env, "CHATHUB_PROXY_PORT")
        else:
            port = _parse_port(server_cfg.get("port", DEFAULT_PORT), "proxy_settings.server.port")
        return cls(host=host, port=port)


@dataclass(frozen=True)
class UpstreamSettings:
    """Where and how the upstream is called."""

    url: str = DEFAULT_UPSTREAM_URL
    cookie_file: Optional[Path] = None
    cookie: Optional[str] = None
    device_id: str = DEFAULT_DEVICE_ID
    connect_timeout: Optional[float] = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "UpstreamSettings":
        upstream_cfg = _section(config, "upstream")

        url = str(upstream_cfg.get("url") or DEFAULT_UPSTREAM_URL)
        if not url.startswith(("http://", "https://")):
            raise ConfigurationError(f"upstream.url must be an http(s) URL: {url!r}")

        cookie = upstream_cfg.get("cookie")
        cookie_file = None
        if not cookie:
            raw_path = Path(str(upstream_cfg.get("cookie_file") or DEFAULT_COOKIE_FILE))
            cookie_file = raw_path if raw_path.is_absolute() else PROJECT_ROOT / raw_path

        return cls(
            url=url,
            cookie_file=cookie_file,
            cookie=str(cookie) if cookie else None,
            device_id=str(upstream_cfg.get("device_id") or DEFAULT_DEVICE_ID),
            connect_timeout=_parse_optional_float(
                upstream_cfg.get("connect_timeout"), "upstream.connect_timeout"
            ),
            headers=_parse_str_mapping(upstream_cfg.get("headers"), "upstream.headers"),
        )


@dataclass(frozen=True)
class ProxySettings:
    server: ServerSettings = field(default_factory=ServerSettings)
    upstream: UpstreamSettings = field(default_factory=UpstreamSettings)
    model_mapping: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_MODEL_MAPPING))
    log_level: str = "INFO"

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ProxySettings":
        if not isinstance(config, Mapping):
            raise ConfigurationError("configuration root must be a mapping")

        if "model_mapping" in config:
            model_mapping = _parse_str_mapping(config.get("model_mapping"), "model_mapping")
        else:
            model_mapping = dict(DEFAULT_MODEL_MAPPING)

        logging_cfg = _section(config, "proxy_settings", "logging")
        log_level = str(logging_cfg.get("level", "INFO")).upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigurationError(f"unknown log level: {log_level}")

        return cls(
            server=ServerSettings.from_config(config),
            upstream=UpstreamSettings.from_config(config),
            model_mapping=model_mapping,
            log_level=log_level,
        )
