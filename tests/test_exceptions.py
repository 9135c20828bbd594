"""Tests for the exceptions module."""

import pytest

from chathub_proxy.core.exceptions import (
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


class TestProxyError:
    """Tests for the base ProxyError exception."""

    def test_creates_error_with_message(self):
        """Test that error is created with message."""
        error = ProxyError("test error message")
        assert error.message == "test error message"
        assert str(error) == "test error message"

    def test_defaults_to_fatal_server_error(self):
        error = ProxyError("boom")
        assert error.fatal is True
        assert error.status_code == 500


class TestRequestErrors:
    def test_invalid_body_maps_to_400(self):
        assert InvalidRequestBodyError("Invalid request body").status_code == 400

    def test_streaming_unsupported_maps_to_500(self):
        assert StreamingUnsupportedError("Streaming unsupported").status_code == 500


class TestUpstreamErrors:
    """Tests for errors raised while talking to the upstream."""

    @pytest.mark.parametrize(
        "error_class",
        [CredentialUnavailableError, UpstreamRequestError, UpstreamReadError, UpstreamDecodeError, ConfigurationError],
    )
    def test_are_fatal_proxy_errors(self, error_class):
        error = error_class("failed")
        assert isinstance(error, ProxyError)
        assert error.fatal is True

    def test_request_error_keeps_upstream_status(self):
        error = UpstreamRequestError("upstream returned status 502", status_code=502)
        assert error.upstream_status == 502
        assert error.status_code == 500

    def test_request_error_without_status(self):
        assert UpstreamRequestError("failed to request").upstream_status is None

    def test_line_error_is_not_fatal(self):
        error = UpstreamLineError("error unmarshaling message: bad", line="{bad")
        assert error.fatal is False
        assert error.line == "{bad"
