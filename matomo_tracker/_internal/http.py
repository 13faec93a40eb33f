"""Shared HTTP client configuration."""

import httpx

DEFAULT_DISPATCH_TIMEOUT = 5.0
DEFAULT_MAX_CONNECTIONS = 8


def create_http_client(
    *,
    timeout: float = DEFAULT_DISPATCH_TIMEOUT,
    max_connections: int = DEFAULT_MAX_CONNECTIONS,
) -> httpx.Client:
    """Create the HTTP client shared by all dispatches of one dispatcher.

    Args:
        timeout: Request timeout in seconds.
        max_connections: Connection pool size, matched to the dispatch workers.

    Returns:
        Configured httpx.Client instance.
    """
    return httpx.Client(
        timeout=timeout,
        limits=httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_connections,
        ),
    )
