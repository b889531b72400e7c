from __future__ import annotations

from threading import Lock
from typing import List

from .models import FetchOutcome, RunSummary


class MetricsCollector:
    """Thread-safe collector for per-target fetch outcomes.

    Scrapers record every outcome as it completes; the run summary is
    computed from the recorded events once the batch has joined."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._events: List[FetchOutcome] = []

    def record_outcome(self, outcome: FetchOutcome) -> None:
        """Record one fetch outcome."""
        with self._lock:
            self._events.append(outcome)

    def summary(self) -> RunSummary:
        """Return aggregated counts over every recorded outcome."""
        with self._lock:
            events = list(self._events)
        total = len(events)
        success_count = sum(1 for e in events if e.success)
        http_error_count = sum(1 for e in events if (e.error_type or "").startswith("HTTP_"))
        extract_error_count = sum(1 for e in events if e.error_type == "ExtractionError")
        failure_count = total - success_count
        transport_error_count = failure_count - http_error_count - extract_error_count
        avg_latency_ms = (sum(e.latency_ms for e in events) / total) if total else 0.0

        return RunSummary(
            total=total,
            success_count=success_count,
            failure_count=failure_count,
            http_error_count=http_error_count,
            transport_error_count=transport_error_count,
            extract_error_count=extract_error_count,
            avg_latency_ms=avg_latency_ms,
        )
