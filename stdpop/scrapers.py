from __future__ import annotations

from typing import Any, Optional

from curl_cffi import requests as curl_requests
import requests

from .base import BaseScraper
from .extractors import count_results, extract_imported_by
from .metrics import MetricsCollector
from .models import Task


class PkgsiteScraper(BaseScraper):
    """Reads the imported-by count from a pkg.go.dev package page.

    Requests go through a curl_cffi session impersonating Chrome. A session is
    opened per task; sessions are not shared between worker threads.
    """

    def __init__(
        self,
        metrics: Optional[MetricsCollector] = None,
        timeout: float = 20.0,
        impersonate: str = "chrome120",
    ) -> None:
        super().__init__(metrics=metrics, timeout=timeout)
        self._impersonate = impersonate

    def fetch(self, task: Task) -> Any:
        with curl_requests.Session() as session:
            return session.get(
                task.url,
                impersonate=self._impersonate,
                timeout=self._timeout,
            )

    def extract(self, body: bytes) -> int:
        return extract_imported_by(body)


class ImportersApiScraper(BaseScraper):
    """Counts the importers listed by a JSON ``{"results": [...]}`` API."""

    def fetch(self, task: Task) -> Any:
        return requests.get(
            task.url,
            headers={"Accept": "application/json"},
            timeout=self._timeout,
        )

    def extract(self, body: bytes) -> int:
        return count_results(body)
