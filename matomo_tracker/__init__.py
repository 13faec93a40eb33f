"""Matomo tracker event dispatch for Python.

Public API:
    EventDispatcher - Sends event batches to a Matomo server
    DispatchSuccess / DispatchFailure - Result of one dispatch
    BrowserProbe - Interface of the browser view used to read the user agent
"""

import logging

from matomo_tracker._internal.dispatch import (
    Dispatcher,
    DispatcherConfig,
    DispatchFailure,
    DispatchResult,
    DispatchSuccess,
    EventDispatcher,
    EventSerializer,
    JSONEventSerializer,
)
from matomo_tracker._internal.log import VERBOSE, enable_debug_logging
from matomo_tracker._internal.user_agent import USER_AGENT_SUFFIX, BrowserProbe
from matomo_tracker._version import __version__
from matomo_tracker.exceptions import (
    DispatcherClosedError,
    MatomoConfigError,
    MatomoError,
    SerializationError,
    TransportError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "Dispatcher",
    "DispatcherConfig",
    "DispatchFailure",
    "DispatchResult",
    "DispatchSuccess",
    "EventDispatcher",
    "EventSerializer",
    "JSONEventSerializer",
    "BrowserProbe",
    "USER_AGENT_SUFFIX",
    "VERBOSE",
    "enable_debug_logging",
    "MatomoError",
    "DispatcherClosedError",
    "MatomoConfigError",
    "SerializationError",
    "TransportError",
]
