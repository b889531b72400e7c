"""Batch orchestration: availability check, fan-out under a concurrency cap,
single-threaded merge of per-task outcomes, and the final artifact write."""
from __future__ import annotations

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import requests

from .config import CollectorConfig, SourceConfig
from .controller import ThreadPoolController
from .errors import ServiceUnavailableError
from .factory import ScraperFactory
from .metrics import MetricsCollector
from .models import BatchResult, FetchOutcome, ResultEntry, RunSummary, Task
from .storage import JsonResultStorage, ResultSet
from .targets import list_std_packages, load_targets, remove_internal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunReport:
    results: ResultSet
    summary: RunSummary
    output_path: str


def check_service(url: str, timeout: float = 20.0) -> None:
    """Probe the service root once; raise ServiceUnavailableError unless it answers 2xx."""
    try:
        resp = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise ServiceUnavailableError(f"{url} is unreachable: {exc}") from exc
    if not 200 <= resp.status_code < 300:
        raise ServiceUnavailableError(f"{url} returns {resp.status_code}")


def build_tasks(targets: Iterable[str], source: SourceConfig) -> List[Task]:
    return [
        Task(target=target, source_id=source.source_id, url=source.base_url + target)
        for target in targets
    ]


def run_batch(tasks: Sequence[Task], factory: ScraperFactory, limit: int) -> BatchResult:
    """Run every task with at most ``limit`` in flight and merge the outcomes.

    Each task returns its own outcome through its future; entries are
    assembled here after all futures are joined, so no collection is shared
    between worker threads.
    """
    controller = ThreadPoolController(limit=limit)
    controller.start()

    futures: List[Future] = []
    try:
        for task in tasks:
            scraper = factory.create_scraper(task)
            futures.append(controller.submit(scraper.run, task))
        outcomes: List[FetchOutcome] = [fut.result() for fut in futures]
    except BaseException:
        controller.stop(wait=False)
        raise
    controller.stop(wait=True)

    entries: List[ResultEntry] = []
    failures: List[FetchOutcome] = []
    for outcome in outcomes:
        if outcome.success and outcome.count is not None:
            entries.append(ResultEntry(lib_path=outcome.target, num=outcome.count))
        else:
            failures.append(outcome)

    if failures:
        first = failures[0]
        logger.warning(
            "%d of %d packages failed; first failure: %s (%s: %s)",
            len(failures),
            len(outcomes),
            first.target,
            first.error_type,
            first.error,
        )
    return BatchResult(entries=entries, failures=failures)


def resolve_targets(config: CollectorConfig) -> List[str]:
    if config.targets_path:
        libs = load_targets(config.targets_path)
    else:
        libs = list_std_packages(config.go)
    targets = remove_internal(libs)
    logger.info("%d packages to query (%d internal skipped)", len(targets), len(libs) - len(targets))
    return targets


def collect(
    config: CollectorConfig,
    targets: Optional[Sequence[str]] = None,
    factory: Optional[ScraperFactory] = None,
    metrics: Optional[MetricsCollector] = None,
) -> RunReport:
    """Run one full collection and write the artifact.

    ``targets`` bypasses the target source when given; internal packages are
    still removed. Raises ServiceUnavailableError, TargetSourceError or
    StorageError for run-fatal failures.
    """
    source = config.source
    check_service(source.root_url, timeout=config.timeout)

    if targets is None:
        target_list = resolve_targets(config)
    else:
        target_list = remove_internal(targets)

    metrics = metrics or MetricsCollector()
    factory = factory or ScraperFactory(metrics=metrics, timeout=config.timeout)

    logger.info("querying %s with concurrency %d", source.base_url, config.limit)
    batch = run_batch(build_tasks(target_list, source), factory, config.limit)

    results = ResultSet(batch.entries)
    storage = JsonResultStorage(config.output_path, output_format=config.output_format)
    storage.save(results)
    return RunReport(results=results, summary=metrics.summary(), output_path=storage.path)
