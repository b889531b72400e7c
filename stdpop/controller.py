from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable

from .models import FetchOutcome, Task

SLOT_POLL_SECS = 0.5


class ThreadPoolController:
    """Runs fetch tasks on a thread pool with at most ``limit`` in flight.

    Each running task holds one slot of a bounded semaphore; submit() waits
    for a free slot, so a task does not start until another one finishes.
    stop() is the batch's cancellation scope: a submit that has not obtained
    a slot yet, or comes later, resolves to a ``ControllerStopped`` outcome
    without running. A failing task never stops the controller.
    """

    def __init__(self, limit: int) -> None:
        self._limit = max(1, int(limit))
        self._executor = ThreadPoolExecutor(max_workers=self._limit, thread_name_prefix="fetch")
        self._slots = threading.BoundedSemaphore(self._limit)
        self._stopped = threading.Event()
        self._stopped.set()
        self._count_lock = threading.Lock()
        self._active = 0

    def start(self) -> None:
        self._stopped.clear()

    def stop(self, wait: bool = True) -> None:
        self._stopped.set()
        self._executor.shutdown(wait=wait, cancel_futures=False)

    def submit(self, fn: Callable[[Task], FetchOutcome], task: Task) -> Future:
        """Run ``fn(task)`` once a slot is free; never blocks past stop()."""
        if not self._take_slot():
            return self._resolved(self._stopped_outcome(task))

        try:
            future = self._executor.submit(fn, task)
        except RuntimeError:
            # executor shut down between taking the slot and submitting
            self._give_back_slot()
            return self._resolved(self._stopped_outcome(task))

        future.add_done_callback(lambda _: self._give_back_slot())
        return future

    def _take_slot(self) -> bool:
        while not self._stopped.is_set():
            if self._slots.acquire(timeout=SLOT_POLL_SECS):
                if self._stopped.is_set():
                    self._slots.release()
                    return False
                with self._count_lock:
                    self._active += 1
                return True
        return False

    def _give_back_slot(self) -> None:
        with self._count_lock:
            self._active -= 1
        self._slots.release()

    @staticmethod
    def _resolved(outcome: FetchOutcome) -> Future:
        future: Future = Future()
        future.set_result(outcome)
        return future

    @staticmethod
    def _stopped_outcome(task: Task) -> FetchOutcome:
        return FetchOutcome(
            target=task.target,
            source_id=task.source_id,
            url=task.url,
            success=False,
            status_code=None,
            latency_ms=0,
            count=None,
            error_type="ControllerStopped",
            error="batch cancelled before the task started",
        )

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def active(self) -> int:
        with self._count_lock:
            return self._active
