"""Tests for Pydantic models."""

import pytest
from pydantic import ValidationError

from matomo_tracker._internal.dispatch.models import (
    CONTENT_TYPE_JSON,
    DEFAULT_TIMEOUT,
    DispatcherConfig,
    DispatchFailure,
    DispatchRequest,
    DispatchSuccess,
)
from matomo_tracker.exceptions import TransportError


class TestDispatcherConfig:
    """Tests for DispatcherConfig model."""

    def test_defaults(self):
        """Should apply default timeout, workers and flags."""
        config = DispatcherConfig(base_url="https://matomo.example.com/matomo.php")
        assert config.timeout == DEFAULT_TIMEOUT == 5.0
        assert config.user_agent is None
        assert config.max_workers == 8
        assert config.debug is False

    def test_is_frozen(self):
        """Should reject mutation after construction."""
        config = DispatcherConfig(base_url="https://matomo.example.com/matomo.php")
        with pytest.raises(ValidationError):
            config.timeout = 1.0  # type: ignore[misc]

    def test_timeout_must_be_positive(self):
        """Should reject a negative timeout."""
        with pytest.raises(ValidationError):
            DispatcherConfig(base_url="https://matomo.example.com/matomo.php", timeout=-1)

    def test_base_url_required(self):
        """Should reject an empty base URL."""
        with pytest.raises(ValidationError):
            DispatcherConfig(base_url="")

    def test_base_url_must_be_http(self):
        """Should reject a base URL without an http(s) scheme."""
        with pytest.raises(ValidationError) as exc_info:
            DispatcherConfig(base_url="matomo.example.com/matomo.php")
        assert "http(s)" in str(exc_info.value)

    def test_max_workers_at_least_one(self):
        """Should require at least one worker."""
        with pytest.raises(ValidationError):
            DispatcherConfig(base_url="https://matomo.example.com/matomo.php", max_workers=0)


class TestDispatchRequest:
    """Tests for DispatchRequest model."""

    def test_method_is_post(self):
        """Should default the method to POST."""
        request = DispatchRequest(url="http://test/matomo.php")
        assert request.method == "POST"

    def test_other_methods_rejected(self):
        """Should reject methods other than POST."""
        with pytest.raises(ValidationError):
            DispatchRequest(url="http://test/matomo.php", method="GET")  # type: ignore[arg-type]

    def test_headers_with_user_agent(self):
        """Should include the user agent header when set."""
        request = DispatchRequest(
            url="http://test/matomo.php",
            content_type=CONTENT_TYPE_JSON,
            body=b"{}",
            user_agent="agent/1.0",
        )
        assert request.headers() == {
            "Content-Type": "application/json; charset=utf-8",
            "User-Agent": "agent/1.0",
        }

    def test_headers_without_user_agent(self):
        """Should omit the user agent header when unset."""
        request = DispatchRequest(url="http://test/matomo.php", content_type=CONTENT_TYPE_JSON)
        assert request.headers() == {"Content-Type": "application/json; charset=utf-8"}


class TestDispatchResult:
    """Tests for the two result variants."""

    def test_success(self):
        """Success should report ok."""
        assert DispatchSuccess().ok is True

    def test_failure_keeps_error(self):
        """Failure should keep the original error."""
        error = TransportError("refused")
        failure = DispatchFailure(error=error)
        assert failure.ok is False
        assert failure.error is error

    def test_failure_requires_exception(self):
        """Failure should require an exception."""
        with pytest.raises(ValidationError):
            DispatchFailure(error="not an exception")  # type: ignore[arg-type]
