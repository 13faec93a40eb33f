"""Shared fixtures for the test suite."""

import logging
from collections.abc import Callable
from concurrent.futures import Executor, Future
from typing import Any

import pytest


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class DeferredExecutor(Executor):
    """Holds submitted work until `run_pending` is called."""

    def __init__(self) -> None:
        self._pending: list[tuple[Future, Callable[[], Any]]] = []

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future:
        future: Future = Future()
        self._pending.append((future, lambda: fn(*args, **kwargs)))
        return future

    def run_pending(self) -> None:
        pending, self._pending = self._pending, []
        for future, work in pending:
            future.set_result(work())


class FakeProbe:
    """Browser probe returning a canned result."""

    def __init__(self, result: object = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.scripts: list[str] = []
        self.closed = False

    def evaluate(self, script: str) -> object:
        self.scripts.append(script)
        if self.error is not None:
            raise self.error
        return self.result

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def inline_executor() -> InlineExecutor:
    return InlineExecutor()


@pytest.fixture
def deferred_executor() -> DeferredExecutor:
    return DeferredExecutor()


@pytest.fixture
def package_logger():
    """The package logger, stripped of debug handlers and restored afterwards."""
    logger = logging.getLogger("matomo_tracker")
    handlers, level = list(logger.handlers), logger.level
    logger.handlers[:] = [h for h in handlers if not getattr(h, "_matomo_debug", False)]
    logger.setLevel(logging.NOTSET)
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
