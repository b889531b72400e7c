from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from stdpop.config import DEFAULT_OUTPUT_PATH, DEFAULT_TIMEOUT, OUTPUT_FORMATS, SOURCES, CollectorConfig, get_source
from stdpop.errors import ServiceUnavailableError, StorageError, TargetSourceError
from stdpop.pipeline import collect


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Collect imported-by counts for the Go standard library",
    )
    parser.add_argument("--source", choices=sorted(SOURCES), default="pkgsite", help="Package index to query")
    parser.add_argument("--base-url", default=None, help="Override the per-package base URL of the source")
    parser.add_argument("--root-url", default=None, help="URL probed before the batch (default: host of --base-url)")
    parser.add_argument("--limit", type=int, default=None, help="Max concurrent requests (default: per source)")
    parser.add_argument("--targets", default=None, help="Read package paths from this file instead of `go list std`")
    parser.add_argument("--go", default="go", help="go binary used to list the standard library")
    parser.add_argument("--output", default=DEFAULT_OUTPUT_PATH, help="Output JSON file path")
    parser.add_argument("--format", choices=OUTPUT_FORMATS, default="list", help="list (sorted) or map")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Per-request timeout in seconds")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        source = get_source(args.source, base_url=args.base_url, root_url=args.root_url)
        config = CollectorConfig(
            source=source,
            limit=args.limit if args.limit is not None else source.default_limit,
            output_path=args.output,
            output_format=args.format,
            timeout=args.timeout,
            targets_path=args.targets,
            go=args.go,
        )
    except ValueError as exc:
        print(f"invalid configuration: {exc}")
        return 2

    try:
        report = collect(config)
    except ServiceUnavailableError as exc:
        print(f"availability check failed: {exc}")
        return 1
    except TargetSourceError as exc:
        print(f"listing packages failed: {exc}")
        return 1
    except StorageError as exc:
        print(f"saving results failed: {exc}")
        return 1
    except KeyboardInterrupt:
        print("fetching packages interrupted: no results written")
        return 130

    s = report.summary
    print(
        f"success={s.success_count} fail={s.failure_count} total={s.total} "
        f"http_errors={s.http_error_count} transport_errors={s.transport_error_count} "
        f"extract_errors={s.extract_error_count} avg_latency_ms={s.avg_latency_ms:.0f} "
        f"output={report.output_path}"
    )
    print("DONE!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
