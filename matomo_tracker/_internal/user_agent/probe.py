"""Collaborator interfaces for the user agent probe."""

import platform
from collections.abc import Callable
from typing import Protocol, runtime_checkable

USER_AGENT_SCRIPT = "navigator.userAgent"


@runtime_checkable
class BrowserProbe(Protocol):
    """A one-shot, invisible embedded browser view.

    Instances are created by a probe factory on the UI thread, asked to
    evaluate a single script, then closed and dropped.
    """

    def evaluate(self, script: str) -> object:
        """Evaluate ``script`` and return its result.

        The result is whatever the engine hands back and is not guaranteed
        to be a string. May raise on engine errors.
        """
        ...

    def close(self) -> None:
        """Release the underlying view."""
        ...


ProbeFactory = Callable[[], BrowserProbe]
PlatformToken = Callable[[], str]


def current_platform_token() -> str:
    """Return the hardware platform token of the running machine."""
    return platform.machine() or "unknown"
