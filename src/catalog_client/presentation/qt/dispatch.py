"""Run gateway calls off the GUI thread and hand results back to it."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot

from catalog_client.application.catalog import RequestDispatcher

LOGGER = logging.getLogger(__name__)

TResult = TypeVar("TResult")


class _CallCompletion(QObject):
    """Lives on the GUI thread; signals emitted by workers arrive queued."""

    succeeded = Signal(object)
    failed = Signal(object)

    def __init__(
        self,
        on_success: Callable[[Any], None],
        on_failure: Callable[[Exception], None],
        on_finished: Callable[[_CallCompletion], None],
    ) -> None:
        super().__init__()
        self._on_success = on_success
        self._on_failure = on_failure
        self._on_finished = on_finished
        self.succeeded.connect(self._deliver_success)
        self.failed.connect(self._deliver_failure)

    @Slot(object)
    def _deliver_success(self, result: object) -> None:
        self._on_finished(self)
        self._on_success(result)

    @Slot(object)
    def _deliver_failure(self, error: object) -> None:
        self._on_finished(self)
        if isinstance(error, Exception):
            self._on_failure(error)
            return
        self._on_failure(RuntimeError(str(error)))


class _CallRunnable(QRunnable):
    def __init__(self, call: Callable[[], object], completion: _CallCompletion) -> None:
        super().__init__()
        self._call = call
        self._completion = completion

    def run(self) -> None:
        try:
            result = self._call()
        except Exception as exc:
            self._completion.failed.emit(exc)
            return
        self._completion.succeeded.emit(result)


class QtRequestDispatcher(RequestDispatcher):
    """Dispatch calls to a QThreadPool; callbacks run on the thread that submitted."""

    def __init__(self, thread_pool: QThreadPool | None = None) -> None:
        self._thread_pool = thread_pool or QThreadPool.globalInstance()
        self._pending: set[_CallCompletion] = set()

    @property
    def pending_count(self) -> int:
        """Return number of calls whose callbacks have not been delivered yet."""
        return len(self._pending)

    def submit(
        self,
        call: Callable[[], TResult],
        on_success: Callable[[TResult], None],
        on_failure: Callable[[Exception], None],
    ) -> None:
        completion = _CallCompletion(
            on_success=on_success,
            on_failure=on_failure,
            on_finished=self._pending.discard,
        )
        self._pending.add(completion)
        self._thread_pool.start(_CallRunnable(call, completion))

    def wait_for_done(self, timeout_ms: int = -1) -> bool:
        """Block until queued calls finished running; callbacks still need the event loop."""
        finished = self._thread_pool.waitForDone(timeout_ms)
        if not finished:
            LOGGER.warning(
                "event=dispatcher_wait_timeout pending=%s timeout_ms=%s",
                len(self._pending),
                timeout_ms,
            )
        return finished
