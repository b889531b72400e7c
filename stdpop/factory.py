from __future__ import annotations

from typing import Dict, Optional

from .base import BaseScraper
from .metrics import MetricsCollector
from .models import Task
from .scrapers import ImportersApiScraper, PkgsiteScraper


class ScraperFactory:
    """Factory for creating scraper instances based on a task's source.

    - ImportersApiScraper holds no per-request state and is cached per source.
    - PkgsiteScraper opens its own session per fetch, so sharing the instance
      is also safe. Pass cache=False to get a fresh instance per task.
    """

    def __init__(
        self,
        metrics: Optional[MetricsCollector] = None,
        timeout: float = 20.0,
        cache: bool = True,
    ) -> None:
        self._metrics = metrics
        self._timeout = timeout
        self._cache_enabled = cache
        self._cache: Dict[str, BaseScraper] = {}

    def create_scraper(self, task: Task) -> BaseScraper:
        source = task.source_id

        if self._cache_enabled and source in self._cache:
            return self._cache[source]

        if source == "pkgsite":
            scraper: BaseScraper = PkgsiteScraper(metrics=self._metrics, timeout=self._timeout)
        elif source == "importers":
            scraper = ImportersApiScraper(metrics=self._metrics, timeout=self._timeout)
        else:
            raise ValueError(f"Unknown source_id: {source}")

        if self._cache_enabled:
            self._cache[source] = scraper
        return scraper
