"""Event dispatch over HTTP.

WARNING: Import the public names from ``matomo_tracker`` instead.
"""

from matomo_tracker._internal.dispatch.client import (
    Dispatcher,
    EventDispatcher,
    ResultCallback,
)
from matomo_tracker._internal.dispatch.models import (
    DispatcherConfig,
    DispatchFailure,
    DispatchRequest,
    DispatchResult,
    DispatchSuccess,
)
from matomo_tracker._internal.dispatch.serializer import EventSerializer, JSONEventSerializer

__all__ = [
    "Dispatcher",
    "EventDispatcher",
    "ResultCallback",
    "DispatcherConfig",
    "DispatchFailure",
    "DispatchRequest",
    "DispatchResult",
    "DispatchSuccess",
    "EventSerializer",
    "JSONEventSerializer",
]
