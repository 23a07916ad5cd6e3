"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from mcp_lonelog_server.core.deltas import accumulate_deltas
from mcp_lonelog_server.core.models import ProgressChange, ThreadChange
from mcp_lonelog_server.core.notation import extract_tags
from mcp_lonelog_server.core.overview import build_session_overview, format_overview
from mcp_lonelog_server.core.serialization import (
    entity_delta_to_dict,
    session_log_to_dict,
    tag_to_dict,
)
from mcp_lonelog_server.core.session_log import (
    SessionLogData,
    decode_session_log,
    load_session_log,
    load_session_logs,
)

HARD_LIMIT = 5000
MAX_LOG_PATHS = 64


def _resolve_limit(limit: int | None) -> int:
    if limit is None:
        return HARD_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    return min(limit, HARD_LIMIT)


async def decode_session_log_impl(
    *,
    log_path: str | None = None,
    text: str | None = None,
    include_entries: bool = True,
    limit: int | None = None,
) -> dict[str, Any]:
    """Implementation for the `decode_session_log` MCP tool.

    Exactly one of ``log_path`` and ``text`` must be given. ``limit`` caps the
    number of entries returned (deltas always cover the whole log).
    """
    if (log_path is None) == (text is None):
        raise ValueError("Provide exactly one of log_path or text.")
    limit_eff = _resolve_limit(limit)

    if log_path is not None:
        data = await load_session_log(log_path)
    else:
        data = decode_session_log(text or "")

    out = session_log_to_dict(data, include_entries=include_entries)
    out["count"] = len(data.entries)
    if include_entries and len(out["entries"]) > limit_eff:
        out["entries"] = out["entries"][:limit_eff]
        out["truncated"] = True
    return out


def _overview_payload(logs: Sequence[SessionLogData]) -> dict[str, Any]:
    accumulated = accumulate_deltas(d for log in logs for d in log.entity_deltas)
    progress: list[ProgressChange] = [p for log in logs for p in log.progress_changes]
    threads: list[ThreadChange] = [t for log in logs for t in log.thread_changes]

    overview = build_session_overview(accumulated.values(), progress, threads)
    return {
        "overview": overview.model_dump(),
        "text": "\n".join(format_overview(overview)),
        "entityDeltas": {key: entity_delta_to_dict(d) for key, d in accumulated.items()},
    }


async def summarize_session_logs_impl(*, log_paths: Sequence[str]) -> dict[str, Any]:
    """Implementation for the `summarize_session_logs` MCP tool.

    Decodes every file and accumulates entity deltas across all of them.
    """
    paths = [p for p in log_paths if p.strip()]
    if not paths:
        raise ValueError("log_paths must contain at least one path.")
    if len(paths) > MAX_LOG_PATHS:
        raise ValueError(f"At most {MAX_LOG_PATHS} session logs can be summarized at once.")

    logs = await load_session_logs(paths)
    out = _overview_payload(logs)
    out["count"] = len(logs)
    return out


def extract_persistent_tags_impl(*, text: str) -> dict[str, Any]:
    """Implementation for the `extract_persistent_tags` MCP tool."""
    tags = extract_tags(text)
    return {"count": len(tags), "tags": [tag_to_dict(t) for t in tags]}
