"""User agent resolution for the event dispatcher."""

from matomo_tracker._internal.user_agent.probe import (
    BrowserProbe,
    ProbeFactory,
    current_platform_token,
)
from matomo_tracker._internal.user_agent.resolver import (
    USER_AGENT_SUFFIX,
    IdentifierResolver,
    ResolveOnce,
    build_user_agent,
)

__all__ = [
    "BrowserProbe",
    "ProbeFactory",
    "current_platform_token",
    "USER_AGENT_SUFFIX",
    "IdentifierResolver",
    "ResolveOnce",
    "build_user_agent",
]
