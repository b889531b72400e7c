from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Task:
    target: str
    source_id: str
    url: str


@dataclass(frozen=True)
class FetchOutcome:
    target: str
    source_id: str
    url: str
    success: bool
    status_code: Optional[int]
    latency_ms: int
    count: Optional[int]
    error_type: Optional[str]
    error: Optional[str] = None


@dataclass(frozen=True)
class ResultEntry:
    lib_path: str
    num: int

    def to_dict(self) -> Dict[str, Any]:
        return {"libPath": self.lib_path, "num": self.num}


@dataclass(frozen=True)
class BatchResult:
    entries: List[ResultEntry]
    failures: List[FetchOutcome]


@dataclass(frozen=True)
class RunSummary:
    total: int
    success_count: int
    failure_count: int
    http_error_count: int
    transport_error_count: int
    extract_error_count: int
    avg_latency_ms: float
