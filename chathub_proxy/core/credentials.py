"""Session credential sources for the upstream.

The upstream authenticates with a browser session cookie. The cookie is
opaque to the proxy: it is read, trimmed and attached as-is.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from .exceptions import CredentialUnavailableError

logger = logging.getLogger("chathub-proxy")


class CredentialStore(ABC):
    """Abstract base class for anything that can hand out the session cookie."""

    @abstractmethod
    def load(self) -> str:
        """Return the cookie value.

        Raises:
            CredentialUnavailableError: No usable cookie is available.
        """
        pass


class StaticCredentialStore(CredentialStore):
    """A cookie configured directly (e.g. substituted from the environment)."""

    def __init__(self, cookie: str) -> None:
        self._cookie = (cookie or "").strip()

    def load(self) -> str:
        if not self._cookie:
            raise CredentialUnavailableError("session cookie is not configured")
        return self._cookie


class CookieFileCredentialStore(CredentialStore):
    """Reads the cookie from a file on every call so rotations apply without a restart."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self) -> str:
        try:
            content = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error(f"Failed to read cookie file {self.path}: {exc}")
            raise CredentialUnavailableError(f"failed to read cookie file: {exc}") from exc
        cookie = content.strip()
        if not cookie:
            logger.error(f"Cookie file {self.path} is empty")
            raise CredentialUnavailableError(f"cookie file is empty: {self.path}")
        return cookie
