"""Pydantic models for the event dispatcher."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from matomo_tracker._internal.http import DEFAULT_DISPATCH_TIMEOUT, DEFAULT_MAX_CONNECTIONS

# =============================================================================
# Constants
# =============================================================================

DEFAULT_TIMEOUT = DEFAULT_DISPATCH_TIMEOUT
DEFAULT_MAX_WORKERS = DEFAULT_MAX_CONNECTIONS
CONTENT_TYPE_JSON = "application/json; charset=utf-8"

# =============================================================================
# Configuration
# =============================================================================


class DispatcherConfig(BaseModel):
    """Immutable dispatcher configuration.

    Fields:
        base_url: Full submission URL of the Matomo server (e.g. ending in
            ``matomo.php``). Used as-is for every request.
        timeout: Per-request timeout in seconds.
        user_agent: Explicit user agent. Skips the browser probe when set.
        max_workers: Number of requests that can be in flight at once.
        debug: Attach a stderr handler to the package logger.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(min_length=1)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    user_agent: str | None = None
    max_workers: int = Field(default=DEFAULT_MAX_WORKERS, ge=1)
    debug: bool = False

    @field_validator("base_url")
    @classmethod
    def base_url_is_http(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must be an http(s) URL")
        return v


# =============================================================================
# Request
# =============================================================================


class DispatchRequest(BaseModel):
    """A single outbound request. Built per dispatch and never retained."""

    model_config = ConfigDict(frozen=True)

    url: str
    method: Literal["POST"] = "POST"
    content_type: str | None = None
    body: bytes | None = None
    user_agent: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    def headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.content_type is not None:
            headers["Content-Type"] = self.content_type
        if self.user_agent is not None:
            headers["User-Agent"] = self.user_agent
        return headers


# =============================================================================
# Result
# =============================================================================


class DispatchSuccess(BaseModel):
    """The request reached the server. The response status is not inspected."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True


class DispatchFailure(BaseModel):
    """Serialization or transport failed."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ok: Literal[False] = False
    error: Exception


DispatchResult = DispatchSuccess | DispatchFailure
