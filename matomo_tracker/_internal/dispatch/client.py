"""HTTP event dispatcher for the Matomo tracker."""

import os
from collections.abc import Callable, Sequence
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from matomo_tracker._internal.dispatch.models import (
    CONTENT_TYPE_JSON,
    DEFAULT_MAX_WORKERS,
    DEFAULT_TIMEOUT,
    DispatcherConfig,
    DispatchFailure,
    DispatchRequest,
    DispatchResult,
    DispatchSuccess,
)
from matomo_tracker._internal.dispatch.serializer import EventSerializer, JSONEventSerializer
from matomo_tracker._internal.http import create_http_client
from matomo_tracker._internal.log import VERBOSE, enable_debug_logging, get_logger, verbose
from matomo_tracker._internal.user_agent import (
    IdentifierResolver,
    ProbeFactory,
    current_platform_token,
)
from matomo_tracker.exceptions import (
    DispatcherClosedError,
    MatomoConfigError,
    SerializationError,
    TransportError,
)

logger = get_logger(__name__)

ResultCallback = Callable[[DispatchResult], None]


class Dispatcher(Protocol):
    """Delivers batches of events to a Matomo server."""

    @property
    def base_url(self) -> str: ...

    @property
    def user_agent(self) -> str | None: ...

    def dispatch(
        self,
        events: Sequence[Any],
        callback: ResultCallback | None = None,
    ) -> "Future[DispatchResult]": ...


class EventDispatcher:
    """Sends event batches to a Matomo server over HTTP.

    Every call to `dispatch` serializes the events, issues exactly one POST
    request on a worker thread and produces exactly one `DispatchResult`.
    A request that reaches the server counts as a success whatever its HTTP
    status; only serialization and transport errors are failures.

    The user agent is resolved in the background when not given explicitly.
    Requests built before it is known are sent without a ``User-Agent``.

    Use `EventDispatcher.from_env()` to create a dispatcher from environment
    variables.
    """

    def __init__(
        self,
        base_url: str,
        *,
        user_agent: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_workers: int = DEFAULT_MAX_WORKERS,
        debug: bool = False,
        serializer: EventSerializer | None = None,
        http_client: httpx.Client | None = None,
        probe_factory: ProbeFactory | None = None,
        platform_token: Callable[[], str] = current_platform_token,
        ui_executor: Executor | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            base_url: Full submission URL of the Matomo server.
            user_agent: Explicit user agent. Disables the browser probe.
            timeout: Per-request timeout in seconds.
            max_workers: Maximum number of requests in flight.
            debug: Enable debug logging to stderr.
            serializer: Event serializer. Defaults to the bulk JSON format.
            http_client: Shared httpx client. Created (and owned) when omitted.
            probe_factory: Creates the browser view used to read the user agent.
                Leave unset on platforms without an embedded browser.
            platform_token: Returns the hardware platform token substituted
                into the probed user agent.
            ui_executor: Executor bound to the UI thread the probe must run on.

        Raises:
            MatomoConfigError: If the configuration is invalid.
        """
        try:
            self._config = DispatcherConfig(
                base_url=base_url,
                timeout=timeout,
                user_agent=user_agent,
                max_workers=max_workers,
                debug=debug,
            )
        except ValidationError as e:
            raise MatomoConfigError(f"Invalid dispatcher configuration: {e}") from e

        if self._config.debug:
            enable_debug_logging(VERBOSE)

        self._serializer = serializer or JSONEventSerializer()
        self._owns_client = http_client is None
        self._client = http_client or create_http_client(
            timeout=self._config.timeout,
            max_connections=self._config.max_workers,
        )
        self._executor = ThreadPoolExecutor(
            max_workers=self._config.max_workers,
            thread_name_prefix="matomo-dispatch",
        )
        self._resolver = IdentifierResolver(
            self._config.user_agent,
            probe_factory=probe_factory,
            platform_token=platform_token,
            ui_executor=ui_executor,
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> "EventDispatcher":
        """Create a dispatcher from environment variables.

        Required environment variables:
            MATOMO_BASE_URL: Full submission URL of the Matomo server.

        Optional environment variables:
            MATOMO_USER_AGENT: Explicit user agent.
            MATOMO_DISPATCH_TIMEOUT_MS: Request timeout in milliseconds.
            MATOMO_DISPATCH_MAX_WORKERS: Maximum number of requests in flight.
            MATOMO_DISPATCH_DEBUG: Set to "1" to enable debug logging.

        Args:
            **kwargs: Collaborators passed through to the constructor
                (serializer, http_client, probe_factory, ...).

        Raises:
            MatomoConfigError: If MATOMO_BASE_URL is missing or invalid.
            ValueError: If a numeric variable is not a valid integer.
        """
        base_url = os.environ.get("MATOMO_BASE_URL")
        if not base_url:
            raise MatomoConfigError("MATOMO_BASE_URL is not set")

        user_agent = os.environ.get("MATOMO_USER_AGENT") or None
        debug = os.environ.get("MATOMO_DISPATCH_DEBUG", "") == "1"
        timeout_ms = int(
            os.environ.get("MATOMO_DISPATCH_TIMEOUT_MS", str(int(DEFAULT_TIMEOUT * 1000)))
        )
        max_workers = int(
            os.environ.get("MATOMO_DISPATCH_MAX_WORKERS", str(DEFAULT_MAX_WORKERS))
        )

        return cls(
            base_url,
            user_agent=user_agent,
            timeout=timeout_ms / 1000,
            max_workers=max_workers,
            debug=debug,
            **kwargs,
        )

    @property
    def config(self) -> DispatcherConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def user_agent(self) -> str | None:
        """The resolved user agent, or None while it is still being resolved."""
        return self._resolver.value

    def dispatch(
        self,
        events: Sequence[Any],
        callback: ResultCallback | None = None,
    ) -> "Future[DispatchResult]":
        """Send a batch of events in one request.

        A serialization failure, or a call after `close`, is reported before
        this method returns and no request is made. Otherwise the request runs
        on a worker thread.

        Args:
            events: Events to send. An empty batch is sent as-is.
            callback: Called exactly once with the result.

        Returns:
            A future holding the DispatchResult. It never raises.
        """
        future: Future[DispatchResult]
        try:
            body = self._serialize(events)
        except SerializationError as e:
            logger.debug("Serialization failed: %s", e)
            future = _completed(DispatchFailure(error=e))
        else:
            request = self._build_request(body)
            verbose(
                logger,
                "Sending events %r to %s with headers %r",
                events,
                request.url,
                request.headers(),
            )
            try:
                future = self._executor.submit(self._send, request)
            except RuntimeError as e:
                logger.debug("Dispatch after close: %s", e)
                closed = DispatcherClosedError("Dispatcher is closed")
                closed.__cause__ = e
                future = _completed(DispatchFailure(error=closed))

        if callback is not None:
            future.add_done_callback(lambda done: _notify(callback, _result_of(done)))
        return future

    def send(self, events: Sequence[Any]) -> DispatchResult:
        """Send a batch of events and wait for the result."""
        return _result_of(self.dispatch(events))

    def _serialize(self, events: Sequence[Any]) -> bytes:
        try:
            return self._serializer.serialize(events)
        except SerializationError:
            raise
        except Exception as e:
            raise SerializationError(f"Failed to serialize events: {e}") from e

    def _build_request(self, body: bytes) -> DispatchRequest:
        return DispatchRequest(
            url=self._config.base_url,
            content_type=CONTENT_TYPE_JSON,
            body=body,
            user_agent=self._resolver.value,
            timeout=self._config.timeout,
        )

    def _send(self, request: DispatchRequest) -> DispatchResult:
        try:
            http_request = self._client.build_request(
                request.method,
                request.url,
                content=request.body,
                headers=request.headers(),
                timeout=request.timeout,
            )
            if request.user_agent is None:
                # Never fall back to the transport's own User-Agent.
                http_request.headers.pop("User-Agent", None)
            response = self._client.send(http_request)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug("Dispatch failed: %r", e)
            return DispatchFailure(error=_transport_error(e))
        except Exception as e:
            logger.warning("Dispatch error: %r", e)
            return DispatchFailure(error=_transport_error(e))

        # Any response counts as delivered, whatever its status.
        logger.debug("Dispatch completed with status %d", response.status_code)
        return DispatchSuccess()

    def close(self) -> None:
        """Wait for in-flight requests, then release the worker pool and client."""
        self._executor.shutdown(wait=True)
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "EventDispatcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _transport_error(error: BaseException) -> TransportError:
    transport_error = TransportError(str(error) or type(error).__name__, cause=error)
    transport_error.__cause__ = error
    return transport_error


def _notify(callback: ResultCallback, result: DispatchResult) -> None:
    try:
        callback(result)
    except Exception:
        logger.warning("Dispatch callback raised", exc_info=True)


def _completed(result: DispatchResult) -> "Future[DispatchResult]":
    future: Future[DispatchResult] = Future()
    future.set_result(result)
    return future


def _result_of(future: "Future[DispatchResult]") -> DispatchResult:
    error = future.exception()
    if error is None:
        return future.result()
    return DispatchFailure(error=_transport_error(error))
