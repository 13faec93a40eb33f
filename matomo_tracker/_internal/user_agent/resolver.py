"""One-time resolution of the client user agent."""

import re
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Generic, TypeVar

from matomo_tracker._internal.log import get_logger
from matomo_tracker._internal.user_agent.probe import (
    USER_AGENT_SCRIPT,
    BrowserProbe,
    PlatformToken,
    ProbeFactory,
    current_platform_token,
)

USER_AGENT_SUFFIX = " MatomoTracker SDK EventDispatcher"

_DEVICE_MODEL = re.compile(r"\((iPad|iPhone);", re.IGNORECASE)

logger = get_logger(__name__)

T = TypeVar("T")


class ResolveOnce(Generic[T]):
    """A value that can be set exactly once and read without blocking.

    The first ``set`` wins; later calls are ignored. Readers see either
    ``None`` or the final value.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: T | None = None
        self._is_set = False

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def is_set(self) -> bool:
        return self._is_set

    def set(self, value: T) -> bool:
        """Store ``value`` if nothing was stored yet.

        Returns:
            True if this call stored the value, False if it was already set.
        """
        with self._lock:
            if self._is_set:
                return False
            self._value = value
            self._is_set = True
            return True


def build_user_agent(result: object, platform_token: PlatformToken) -> str:
    """Turn a probe result into the user agent sent to the server.

    A string result has its ``(iPad;``/``(iPhone;`` model token replaced by
    the current platform token. Anything else falls back to an empty base.
    The library suffix is always appended.
    """
    if not isinstance(result, str):
        logger.debug("Failed to parse user agent from %r", result)
        return USER_AGENT_SUFFIX

    token = platform_token()
    user_agent = _DEVICE_MODEL.sub(lambda _match: f"({token};", result)
    logger.debug("Successfully parsed user agent: %s", user_agent)
    return user_agent + USER_AGENT_SUFFIX


class IdentifierResolver:
    """Resolves the user agent once per dispatcher, without blocking callers.

    An explicit ``user_agent`` is stored immediately and no probe ever runs.
    Otherwise a single probe is scheduled on ``ui_executor`` (the UI thread of
    the host application). Without a ``probe_factory`` (headless platforms)
    the user agent resolves to the library suffix alone.

    Probe failures never propagate; they degrade to the suffix.
    """

    def __init__(
        self,
        user_agent: str | None = None,
        *,
        probe_factory: ProbeFactory | None = None,
        platform_token: PlatformToken = current_platform_token,
        ui_executor: Executor | None = None,
    ) -> None:
        self._cell: ResolveOnce[str] = ResolveOnce()
        self._probe_factory = probe_factory
        self._platform_token = platform_token

        if user_agent is not None:
            logger.debug("Using defined user agent: %s", user_agent)
            self._cell.set(user_agent)
            return

        logger.debug("Generating user agent")
        if ui_executor is None:
            executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="matomo-ui")
            executor.submit(self._resolve)
            # Already submitted work still runs after shutdown.
            executor.shutdown(wait=False)
        else:
            ui_executor.submit(self._resolve)

    @property
    def value(self) -> str | None:
        """The resolved user agent, or None while resolution is pending."""
        return self._cell.value

    @property
    def resolved(self) -> bool:
        return self._cell.is_set

    def _resolve(self) -> None:
        user_agent = self._generate()
        if self._cell.set(user_agent):
            logger.debug("User agent generated: %s", user_agent)

    def _generate(self) -> str:
        if self._probe_factory is None:
            return USER_AGENT_SUFFIX

        try:
            result = self._evaluate(self._probe_factory)
            logger.debug("Fetched user agent from browser probe: %r", result)
            return build_user_agent(result, self._platform_token)
        except Exception:
            logger.warning("Failed to generate user agent", exc_info=True)
            return USER_AGENT_SUFFIX

    def _evaluate(self, probe_factory: ProbeFactory) -> object:
        probe = probe_factory()
        logger.debug("Generating user agent using %r", probe)
        try:
            return probe.evaluate(USER_AGENT_SCRIPT)
        finally:
            _close_probe(probe)


def _close_probe(probe: BrowserProbe) -> None:
    try:
        probe.close()
    except Exception:
        logger.warning("Failed to close browser probe", exc_info=True)
