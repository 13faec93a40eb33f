"""Public exceptions for the Matomo tracker."""


class MatomoError(Exception):
    """Base exception for all Matomo tracker errors."""


class MatomoConfigError(MatomoError):
    """Configuration error (missing env vars, invalid config)."""


class SerializationError(MatomoError):
    """Events could not be turned into a request payload."""


class TransportError(MatomoError):
    """Network, DNS or timeout failure while delivering a request."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class DispatcherClosedError(MatomoError):
    """Events were dispatched after the dispatcher was closed."""
