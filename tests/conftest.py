"""Pytest configuration and fixtures for testing."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient

# Make the package importable without an install
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from chathub_proxy.testing import FAKE_UPSTREAM_URL, FakeUpstream


@pytest.fixture(autouse=True)
def clear_server_env(monkeypatch):
    """Keep host/port overrides from the developer's shell out of the tests."""
    monkeypatch.delenv("CHATHUB_PROXY_HOST", raising=False)
    monkeypatch.delenv("CHATHUB_PROXY_PORT", raising=False)
    monkeypatch.delenv("CHATHUB_PROXY_CONFIG", raising=False)


# =============================================================================
# Config Builders
# =============================================================================


def build_proxy_config(
    cookie_file: Path | None,
    *,
    url: str = FAKE_UPSTREAM_URL,
    model_mapping: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Build a config pointing the proxy at the fake upstream.

    Args:
        cookie_file: Where the session cookie lives (may not exist)
        url: Upstream completions URL
        model_mapping: Optional replacement for the default mapping

    Returns:
        Config dict accepted by ``create_app``
    """
    config: dict[str, Any] = {
        "proxy_settings": {"logging": {"level": "DEBUG"}},
        "upstream": {
            "url": url,
            "cookie_file": str(cookie_file) if cookie_file else None,
            "device_id": "test-device",
        },
    }
    if model_mapping is not None:
        config["model_mapping"] = model_mapping
    return config


def parse_sse_frames(text: str) -> list[str]:
    """Split an SSE body into the payloads of its ``data: `` frames."""
    frames = []
    for raw in text.split("\n\n"):
        if not raw:
            continue
        assert raw.startswith("data: "), f"unexpected frame: {raw!r}"
        frames.append(raw[len("data: "):])
    return frames


def parse_sse_chunks(text: str) -> list[dict[str, Any]]:
    """The JSON payloads of every frame except the terminal ``[DONE]``."""
    return [json.loads(frame) for frame in parse_sse_frames(text) if frame != "[DONE]"]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def cookie_file(tmp_path: Path) -> Path:
    path = tmp_path / "cookie.txt"
    path.write_text("  session=abc123; theme=dark\n", encoding="utf-8")
    return path


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def proxy_config(cookie_file: Path) -> dict[str, Any]:
    return build_proxy_config(cookie_file)


@pytest.fixture
def proxy_app(proxy_config: dict[str, Any], fake_upstream: FakeUpstream):
    from chathub_proxy import create_app

    return create_app(proxy_config, transport=fake_upstream.transport())


@pytest.fixture
def client(proxy_app) -> Generator[TestClient, None, None]:
    with TestClient(proxy_app) as test_client:
        yield test_client
