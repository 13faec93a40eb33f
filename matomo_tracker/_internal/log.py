"""Logging helpers for the Matomo tracker.

All loggers live under the ``matomo_tracker`` namespace. The package installs a
``NullHandler`` so nothing is printed unless the application configures
logging or debug output is requested explicitly.
"""

import logging
import sys

LOGGER_NAME = "matomo_tracker"

# Below DEBUG: request dumps that are too noisy even for debug output.
VERBOSE = 5
logging.addLevelName(VERBOSE, "VERBOSE")

_DEBUG_FORMAT = "[matomo-tracker] %(levelname)s %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace."""
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def verbose(logger: logging.Logger, message: str, *args: object) -> None:
    """Log a message at VERBOSE level."""
    if logger.isEnabledFor(VERBOSE):
        logger.log(VERBOSE, message, *args)


def enable_debug_logging(level: int = logging.DEBUG) -> logging.Handler:
    """Attach a stderr handler to the package logger.

    Calling this more than once reuses the handler installed by the first call.

    Args:
        level: Minimum level to emit. Pass ``VERBOSE`` to include request dumps.

    Returns:
        The stderr handler attached to the package logger.
    """
    root = logging.getLogger(LOGGER_NAME)
    handler = next(
        (h for h in root.handlers if getattr(h, "_matomo_debug", False)), None
    )
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_DEBUG_FORMAT))
        handler._matomo_debug = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    handler.setLevel(level)
    if root.level == logging.NOTSET or root.level > level:
        root.setLevel(level)
    return handler
