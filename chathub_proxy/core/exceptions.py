"""Core exceptions for the proxy."""


class ProxyError(Exception):
    """Base exception for proxy errors.

    ``fatal`` errors end the SSE session with an error frame; non-fatal
    ones are logged and the stream keeps going.
    """

    status_code = 500
    fatal = True

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(ProxyError):
    """Raised when there's an issue with the configuration."""
    pass


class InvalidRequestBodyError(ProxyError):
    """Raised when the inbound body cannot be parsed into a chat request."""

    status_code = 400


class StreamingUnsupportedError(ProxyError):
    """Raised when the caller's transport cannot flush incrementally."""

    status_code = 500


class CredentialUnavailableError(ProxyError):
    """Raised when the upstream session cookie is missing or unreadable."""
    pass


class UpstreamRequestError(ProxyError):
    """Raised when the upstream call fails or returns an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = status_code


class UpstreamReadError(ProxyError):
    """Raised when reading the upstream body fails mid-stream."""
    pass


class UpstreamDecodeError(ProxyError):
    """Raised when a single-JSON upstream body does not decode."""
    pass


class UpstreamLineError(ProxyError):
    """A single event-stream line failed to parse."""

    fatal = False

    def __init__(self, message: str, line: str = "") -> None:
        super().__init__(message)
        self.line = line
