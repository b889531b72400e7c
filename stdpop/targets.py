from __future__ import annotations

import logging
import subprocess
from typing import Iterable, List

from .errors import TargetSourceError

logger = logging.getLogger(__name__)

INTERNAL_SEGMENT = "internal"
PATH_SEPARATOR = "/"


def is_internal(lib: str) -> bool:
    return INTERNAL_SEGMENT in lib.split(PATH_SEPARATOR)


def remove_internal(libs: Iterable[str]) -> List[str]:
    """Return the public identifiers of ``libs`` once each, in first-seen order.

    An identifier is internal when any of its ``/``-separated segments is
    exactly ``internal`` (``internal/abi``, ``net/http/internal``); segments
    that merely contain the word, such as ``internals``, are kept.
    """
    seen = set()
    public: List[str] = []
    for lib in libs:
        if not lib or lib in seen or is_internal(lib):
            continue
        seen.add(lib)
        public.append(lib)
    return public


def load_targets(path: str) -> List[str]:
    """Read one package path per line, skipping blanks and ``#`` comments."""
    targets: List[str] = []
    try:
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                lib = line.strip()
                if not lib or lib.startswith("#"):
                    continue
                targets.append(lib)
    except OSError as exc:
        raise TargetSourceError(f"failed to read targets from {path}: {exc}") from exc
    return targets


def list_std_packages(go: str = "go") -> List[str]:
    """List the standard library with ``go list std``."""
    try:
        proc = subprocess.run(
            [go, "list", "std"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise TargetSourceError(f"failed to run {go}: {exc}") from exc

    if proc.returncode != 0:
        raise TargetSourceError(f"{go} list std exited with {proc.returncode}: {proc.stderr.strip()}")

    libs = [line.strip() for line in proc.stdout.splitlines() if line.strip()]
    logger.info("loaded %d standard library packages", len(libs))
    return libs
