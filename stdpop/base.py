from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

from .metrics import MetricsCollector
from .models import FetchOutcome, Task

logger = logging.getLogger(__name__)


class BaseScraper(ABC):
    """Abstract base class defining the per-target fetch-and-extract pipeline.

    - Any 2xx status is success; anything else is an ``HTTP_<code>`` failure
      and the body is never handed to ``extract``.
    - Transport and extraction errors are captured in the outcome, never
      raised, so one target cannot disturb the rest of the batch.
    """

    def __init__(self, metrics: Optional[MetricsCollector] = None, timeout: float = 20.0) -> None:
        self._metrics = metrics
        self._timeout = timeout

    def run(self, task: Task) -> FetchOutcome:
        start_ms = self._now_ms()
        status_code = None

        logger.info("start request about package %s", task.target)
        try:
            self.validate(task)
            response = self.fetch(task)
            status_code = getattr(response, "status_code", None)

            if status_code is None or not 200 <= int(status_code) < 300:
                error_type = f"HTTP_{status_code}"
                logger.error("package %s: %s returned %s", task.target, task.url, status_code)
                return self._record(task, start_ms, status_code, None, error_type, f"status {status_code}")

            count = self.extract(getattr(response, "content", b""))

        except Exception as exc:  # noqa: BLE001
            logger.error("package %s: %s: %s", task.target, type(exc).__name__, exc)
            return self._record(task, start_ms, status_code, None, type(exc).__name__, str(exc))

        finally:
            logger.info("finish request about package %s", task.target)

        return self._record(task, start_ms, status_code, count, None, None)

    def validate(self, task: Task) -> None:
        if not task.target:
            raise ValueError("task.target is required")
        if not task.url:
            raise ValueError("task.url is required")

    @abstractmethod
    def fetch(self, task: Task) -> Any:
        ...

    @abstractmethod
    def extract(self, body: bytes) -> int:
        ...

    def _record(
        self,
        task: Task,
        start_ms: int,
        status_code: Optional[int],
        count: Optional[int],
        error_type: Optional[str],
        error: Optional[str],
    ) -> FetchOutcome:
        outcome = FetchOutcome(
            target=task.target,
            source_id=task.source_id,
            url=task.url,
            success=error_type is None,
            status_code=status_code,
            latency_ms=self._now_ms() - start_ms,
            count=count,
            error_type=error_type,
            error=error,
        )
        if self._metrics:
            self._metrics.record_outcome(outcome)
        return outcome

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)
