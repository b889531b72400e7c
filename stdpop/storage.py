from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List

from .errors import StorageError
from .models import ResultEntry

logger = logging.getLogger(__name__)


class ResultSet:
    """Read-only collection of successful results for one run.

    Entry order carries no meaning; sorted_entries() gives the published
    order (descending count, ties kept in insertion order).
    """

    def __init__(self, entries: Iterable[ResultEntry]) -> None:
        self._entries = tuple(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def sorted_entries(self) -> List[ResultEntry]:
        return sorted(self._entries, key=lambda e: e.num, reverse=True)

    def as_list(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self.sorted_entries()]

    def as_mapping(self) -> Dict[str, int]:
        return {e.lib_path: e.num for e in self._entries}


class StorageBase(ABC):
    """Abstract base class for result artifact backends."""

    @abstractmethod
    def save(self, results: ResultSet) -> None:
        """Persist the whole result set in one go."""


class JsonResultStorage(StorageBase):
    """Writes the result set as one JSON document, replacing the file atomically.

    ``list`` writes ``[{"libPath": ..., "num": ...}, ...]`` sorted by
    descending ``num``; ``map`` writes ``{libPath: num}``.
    """

    def __init__(self, path: str, output_format: str = "list") -> None:
        if output_format not in ("list", "map"):
            raise ValueError(f"Unknown output format: {output_format}")
        self._path = path
        self._format = output_format

    @property
    def path(self) -> str:
        return self._path

    def serialize(self, results: ResultSet) -> str:
        payload: Any = results.as_list() if self._format == "list" else results.as_mapping()
        try:
            return json.dumps(payload, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"failed to marshal: {exc}") from exc

    def save(self, results: ResultSet) -> None:
        data = self.serialize(results)
        directory = os.path.dirname(os.path.abspath(self._path))
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(prefix=".result-", suffix=".json.tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, self._path)
            tmp_path = None
        except OSError as exc:
            raise StorageError(f"failed to write file: {exc}") from exc
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
        logger.info("wrote %d results to %s", len(results), self._path)
