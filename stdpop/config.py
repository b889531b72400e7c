from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urlsplit, urlunsplit

DEFAULT_OUTPUT_PATH = "result.json"
DEFAULT_TIMEOUT = 20.0
OUTPUT_FORMATS = ("list", "map")


@dataclass(frozen=True)
class SourceConfig:
    """Where a backend lives and how hard to hit it.

    ``root_url`` is probed once before the batch; each target is fetched from
    ``base_url + target``.
    """

    source_id: str
    root_url: str
    base_url: str
    default_limit: int


SOURCES: Dict[str, SourceConfig] = {
    "pkgsite": SourceConfig(
        source_id="pkgsite",
        root_url="https://pkg.go.dev/",
        base_url="https://pkg.go.dev/",
        default_limit=1,
    ),
    "importers": SourceConfig(
        source_id="importers",
        root_url="https://api.godoc.org/",
        base_url="https://api.godoc.org/importers/",
        default_limit=20,
    ),
}


@dataclass(frozen=True)
class CollectorConfig:
    source: SourceConfig
    limit: int
    output_path: str = DEFAULT_OUTPUT_PATH
    output_format: str = "list"
    timeout: float = DEFAULT_TIMEOUT
    targets_path: Optional[str] = None
    go: str = "go"

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError("limit must be at least 1")
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format: {self.output_format}")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")


def _root_of(url: str) -> str:
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"base URL must be absolute: {url}")
    return urlunsplit((parts.scheme, parts.netloc, "/", "", ""))


def get_source(
    source_id: str,
    base_url: Optional[str] = None,
    root_url: Optional[str] = None,
) -> SourceConfig:
    """Look up a source, optionally pointed at another host.

    Overriding ``base_url`` moves the availability check to the scheme and
    host of the new base unless ``root_url`` is given as well.
    """
    try:
        source = SOURCES[source_id]
    except KeyError:
        raise ValueError(f"Unknown source_id: {source_id}") from None
    if base_url or root_url:
        new_base = base_url or source.base_url
        if root_url:
            new_root = root_url
        elif base_url:
            new_root = _root_of(base_url)
        else:
            new_root = source.root_url
        source = SourceConfig(
            source_id=source.source_id,
            root_url=new_root,
            base_url=new_base,
            default_limit=source.default_limit,
        )
    return source
