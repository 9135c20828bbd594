"""Outbound calls to the ChatHub completions endpoint."""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Optional, Sequence

import httpx

from ..logging import mask_headers
from ..types.chat import Message
from .credentials import CredentialStore
from .exceptions import UpstreamRequestError

logger = logging.getLogger("chathub-proxy")

# Announces capability to the upstream; not caller-configurable.
UPSTREAM_TOOLS = ("image_generation",)

BROWSER_HEADERS: Mapping[str, str] = {
    "Content-Type": "application/json",
    "Accept": "*/*",
    "Accept-Language": "zh-CN,zh;q=0.9",
    "Priority": "u=1, i",
    "Sec-CH-UA": "\"Chromium\";v=\"129\", \"Not=A?Brand\";v=\"8\"",
    "Sec-CH-UA-Mobile": "?0",
    "Sec-CH-UA-Platform": "\"macOS\"",
    "Sec-Fetch-Dest": "empty",
    "Sec-Fetch-Mode": "cors",
    "Sec-Fetch-Site": "same-origin",
    "X-App-ID": "web",
}

# Upper bound on how much of an upstream error body ends up in a message
ERROR_BODY_PREVIEW = 512


def build_upstream_payload(model: str, messages: Sequence[Message]) -> dict[str, Any]:
    return {
        "model": model,
        "messages": [message.to_dict() for message in messages],
        "tools": list(UPSTREAM_TOOLS),
    }


def build_upstream_headers(
    cookie: str,
    device_id: str,
    extra_headers: Optional[Mapping[str, str]] = None,
) -> dict[str, str]:
    """Browser-emulation headers plus the session cookie."""
    headers = dict(BROWSER_HEADERS)
    headers["X-Device-ID"] = device_id
    if extra_headers:
        headers.update(extra_headers)
    headers["Cookie"] = cookie
    return headers


def format_httpx_error(exc: Exception, url: Optional[str] = None) -> str:
    """Produce a detailed, user-facing description of an httpx error."""
    parts = [exc.__class__.__name__]
    message = str(exc).strip()
    if message:
        parts.append(message)

    request = None
    if isinstance(exc, httpx.RequestError):
        try:
            request = exc.request
        except RuntimeError:
            request = None
    if request is not None:
        parts.append(f"request={request.method} {request.url}")
    elif url:
        parts.append(f"url={url}")

    return "; ".join(parts)


class UpstreamClient:
    """Issues exactly one POST per session against the upstream.

    Args:
        url: The upstream completions URL.
        credentials: Source of the session cookie.
        device_id: Value for the ``X-Device-ID`` header.
        extra_headers: Headers merged over the browser defaults.
        connect_timeout: Optional connect timeout in seconds. Reads never
            time out; the caller's cancellation is the only deadline.
        transport: Optional httpx transport (in-process upstreams in tests).
    """

    def __init__(
        self,
        url: str,
        credentials: CredentialStore,
        *,
        device_id: str,
        extra_headers: Optional[Mapping[str, str]] = None,
        connect_timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.credentials = credentials
        self.device_id = device_id
        self.extra_headers = dict(extra_headers or {})
        self.timeout = httpx.Timeout(None, connect=connect_timeout)
        self.transport = transport

    @asynccontextmanager
    async def open(self, model: str, messages: Sequence[Message]) -> AsyncIterator[httpx.Response]:
        """Send the request and yield the streamed response.

        The credential is loaded before anything touches the network, so a
        missing cookie fails without a connection attempt. The response and
        the client are closed when the block exits, including on
        cancellation.

        Raises:
            CredentialUnavailableError: No session cookie is available.
            UpstreamRequestError: The request failed or the upstream
                answered with an error status.
        """
        cookie = self.credentials.load()
        headers = build_upstream_headers(cookie, self.device_id, self.extra_headers)
        payload = build_upstream_payload(model, messages)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            request = client.build_request("POST", self.url, headers=headers, json=payload)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(f"Upstream request headers: {mask_headers(request.headers)}")
            logger.info(f"Sending upstream request to {self.url} for model {model}")
            try:
                response = await client.send(request, stream=True)
            except httpx.HTTPError as exc:
                detail = format_httpx_error(exc, self.url)
                logger.error(f"Failed to request upstream: {detail}")
                raise UpstreamRequestError(f"failed to request: {detail}") from exc

            try:
                content_type = response.headers.get("content-type", "no content-type")
                logger.info(f"Upstream responded with status {response.status_code} ({content_type})")
                if response.status_code >= 400:
                    await self._raise_for_status(response)
                yield response
            finally:
                await response.aclose()

    @staticmethod
    async def _raise_for_status(response: httpx.Response) -> None:
        try:
            body = await response.aread()
        except httpx.HTTPError as exc:
            body = f"<unreadable body: {exc.__class__.__name__}>".encode("utf-8")
        preview = body[:ERROR_BODY_PREVIEW].decode("utf-8", errors="replace").strip()
        logger.error(f"Upstream returned error status {response.status_code}: {preview}")
        message = f"upstream returned status {response.status_code}"
        if preview:
            message = f"{message}: {preview}"
        raise UpstreamRequestError(message, status_code=response.status_code)
