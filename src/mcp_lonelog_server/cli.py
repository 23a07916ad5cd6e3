from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from mcp_lonelog_server.core.config import SessionLogConfig
from mcp_lonelog_server.core.deltas import accumulate_deltas
from mcp_lonelog_server.core.overview import build_session_overview, format_overview
from mcp_lonelog_server.core.serialization import entry_to_dict, session_log_to_dict
from mcp_lonelog_server.core.session_log import SessionLogData, load_session_logs


def _positive_int(s: str) -> int:
    try:
        value = int(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError("must be an integer") from e
    if value < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return value


def _print_text(logs: list[SessionLogData], paths: list[Path], *, show_entries: bool) -> None:
    if show_entries:
        for path, log in zip(paths, logs):
            print(f"# {path}")
            for e in log.entries:
                fields = {k: v for k, v in entry_to_dict(e).items() if k != "type"}
                print(f"[{e.type}] {json.dumps(fields, ensure_ascii=False)}")
            print()

    accumulated = accumulate_deltas(d for log in logs for d in log.entity_deltas)
    overview = build_session_overview(
        accumulated.values(),
        [p for log in logs for p in log.progress_changes],
        [t for log in logs for t in log.thread_changes],
    )
    if overview.is_empty:
        print("No state changes found.")
        return
    for line in format_overview(overview):
        print(line)


def main(argv: Sequence[str] | None = None) -> None:
    p = argparse.ArgumentParser(description="Decode Lonelog session logs and summarize state changes.")
    p.add_argument("log_paths", nargs="+", help="Session log files (.md, .txt, .log, optionally .gz)")
    p.add_argument("--json", dest="as_json", action="store_true", help="Print decoded logs as JSON")
    p.add_argument("--entries", action="store_true", help="Also print the parsed entries")
    p.add_argument(
        "--encoding",
        default=None,
        help="Text encoding (default: $LONELOG_ENCODING, else utf-8 with optional BOM)",
    )
    p.add_argument("--max-workers", type=_positive_int, default=None, help="Concurrent decodes")

    args = p.parse_args(argv)
    paths = [Path(s) for s in args.log_paths]
    cfg = SessionLogConfig(encoding=args.encoding, max_workers=args.max_workers)

    try:
        logs = asyncio.run(load_session_logs(paths, cfg=cfg))
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    if args.as_json:
        out = [
            {"path": str(path), **session_log_to_dict(log, include_entries=args.entries)}
            for path, log in zip(paths, logs)
        ]
        print(json.dumps(out, indent=2, ensure_ascii=False))
        return

    _print_text(logs, paths, show_entries=args.entries)


if __name__ == "__main__":
    main()
