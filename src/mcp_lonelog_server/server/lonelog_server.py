"""Lonelog MCP server (stdio transport).

Tools decode session logs and summarize state across them; resources serve
the notation cheat sheet, a sample log and session-log files; prompts build
recap and continuation workflows on top of the tools.

Run locally:
    python -m mcp_lonelog_server
"""

from __future__ import annotations

import logging
import os
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_lonelog_server.prompts.registry import register_prompts
from mcp_lonelog_server.resources.registry import register_resources
from mcp_lonelog_server.tools.session_log import (
    decode_session_log_impl,
    extract_persistent_tags_impl,
    summarize_session_logs_impl,
)

LOG_LEVEL_ENV = "LONELOG_LOG_LEVEL"

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Send log records to stderr at the level named by LONELOG_LOG_LEVEL.

    stdout carries the MCP protocol, so nothing may be logged there.
    """
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("lonelog", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
async def decode_session_log(
    log_path: str | None = None,
    text: str | None = None,
    include_entries: bool = True,
    limit: int | None = None,
) -> dict[str, Any]:
    """Decode a Lonelog session log into typed entries and state deltas.

    Parameters
    ----------
    log_path:
        Path to a local session log (.md, .txt, .log; optionally .gz).
    text:
        Session log text to decode directly. Use instead of log_path.
        An optional header (state_key/scene/entities) may precede a '---' line.
    include_entries:
        Whether to return the per-line entries, or only the deltas.
    limit:
        Cap on returned entries (at most 5000). Deltas always cover the whole log.

    Returns
    -------
    dict:
        {"count": int, "entries": list[dict], "entityDeltas": list[dict],
         "progressChanges": list[dict], "threadChanges": list[dict], ...}
    """
    return await decode_session_log_impl(
        log_path=log_path,
        text=text,
        include_entries=include_entries,
        limit=limit,
    )


@mcp.tool()
async def summarize_session_logs(log_paths: list[str]) -> dict[str, Any]:
    """Summarize one or more session logs into a combined overview.

    Entity changes are accumulated across all files (in the given order):
    net HP, final status and active tags per PC/NPC, plus every progress
    tracker and thread mention.
    """
    return await summarize_session_logs_impl(log_paths=log_paths)


@mcp.tool()
def extract_persistent_tags(text: str) -> dict[str, Any]:
    """Extract bracketed persistent tags ([N:...], [PC:...], [Clock:...] ...) from text."""
    return extract_persistent_tags_impl(text=text)


def main() -> None:
    _configure_logging()
    logger.info("Starting lonelog MCP server on stdio")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
