"""MCP resource registry.

Static resources describe the notation; the templated ``file://`` and
``lonelog://`` resources expose session logs under LONELOG_BASE_DIR.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_lonelog_server.core.notation import STATUS_KEYWORDS
from mcp_lonelog_server.core.overview import SessionOverview
from mcp_lonelog_server.core.serialization import session_log_to_dict
from mcp_lonelog_server.core.session_log import decode_session_log, read_session_log

ALLOWED_FILE_SUFFIXES = {".md", ".txt", ".log"}
BASE_DIR_ENV = "LONELOG_BASE_DIR"


SAMPLE_LOG = (
    "state_key: goblin-ambush\n"
    "scene: \"Forest road\"\n"
    "---\n"
    "S1 *Goblin ambush*\n"
    "@ Elara attacks Goblin Lookout\n"
    "d: d20+7=19 vs AC 15 -> Hit\n"
    "=> [N:Goblin Lookout|HP-9|dead]\n"
    "? Do the other goblins flee?\n"
    "-> No, and... (d6=2)\n"
    "=> They call for reinforcements. [Clock:Reinforcements 1/4]\n"
    "@ Thorne casts Healing Word on Elara\n"
    "=> [PC:Elara|HP+7] [Thread:Find the Chieftain|Open]\n"
    "(note: Used 1st level spell slot)\n"
)


def log_base_dir() -> Path:
    return Path(os.getenv(BASE_DIR_ENV) or os.getcwd()).resolve()


def resolve_log_path(path: str) -> Path:
    """Map a resource path onto an existing session log under the base dir.

    Relative paths are taken from the base dir. ``.gz`` files are judged by
    their inner suffix (``session.md.gz`` counts as ``.md``).
    """
    base = log_base_dir()
    candidate = Path(path).expanduser()
    resolved = (candidate if candidate.is_absolute() else base / candidate).resolve()
    if resolved != base and base not in resolved.parents:
        raise ValueError(f"Session log path escapes {BASE_DIR_ENV}: {path}")

    name = resolved.name.lower()
    inner = Path(name[:-3]) if name.endswith(".gz") else Path(name)
    if inner.suffix not in ALLOWED_FILE_SUFFIXES:
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        raise ValueError(f"Session log type not allowed: {resolved.name} (use {allowed})")

    if not resolved.is_file():
        raise FileNotFoundError(f"Session log not found: {resolved}")
    return resolved


def notation_reference() -> str:
    """Return the Lonelog cheat sheet served by the notation resource."""
    statuses = ", ".join(sorted(STATUS_KEYWORDS))
    return (
        "Lonelog line shapes (first match wins):\n"
        "  S1 context | S1a | S1.2 | T1-S3   scene marker (*context* allowed)\n"
        "  @ text                            action\n"
        "  ? text                            oracle question\n"
        "  -> answer (d6=3)                  oracle answer, optional roll\n"
        "  d: roll -> outcome                roll (Success/Hit, Fail/Miss)\n"
        "  => text [tags]                    consequence with persistent tags\n"
        "  N (Name): \"text\" | PC: \"text\"     dialogue\n"
        "  tbl: source roll result           table roll\n"
        "  gen: source result                generator\n"
        "  (note: text)                      meta note\n"
        "  anything else                     narrative\n"
        "\n"
        "Persistent tags:\n"
        "  [N:Name|tag|...]  [#N:Name]  [L:Name|tag|...]  [PC:Name|change|...]\n"
        "  [E:Name 2/6]  [Clock:Name 1/4]  [Clock:4/12]  [Track:Name 3/8]\n"
        "  [Timer:Name 2]  [Timer:5]  [Thread:Name|State]\n"
        "\n"
        "Change tokens: HP-9, Stress+2, alert→unconscious, +tag, -tag, status word\n"
        f"Status words: {statuses}\n"
    )


def register_resources(mcp: FastMCP) -> None:
    """Attach the Lonelog resources to ``mcp``."""

    @mcp.resource("app://lonelog/help")
    def help_resource() -> str:
        """List the Lonelog resources and the session-log directory."""
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        return (
            "Lonelog resources:\n"
            "- app://lonelog/help\n"
            "- app://lonelog/notation\n"
            "- app://lonelog/schemas/session-overview\n"
            "- app://lonelog/examples/sample-log\n"
            f"- file://{{path}}     raw session log ({allowed}, optionally .gz)\n"
            "- lonelog://{path}  decoded session log, same path rules\n"
            f"\nSession logs are read from {BASE_DIR_ENV}={log_base_dir()}\n"
        )

    @mcp.resource("app://lonelog/notation")
    def notation() -> str:
        """Lonelog notation cheat sheet."""
        return notation_reference()

    @mcp.resource("app://lonelog/examples/sample-log")
    def sample_log() -> str:
        """A short combat session with a header block."""
        return SAMPLE_LOG

    @mcp.resource("app://lonelog/schemas/session-overview")
    def overview_schema() -> dict[str, Any]:
        """JSON schema of the summarize_session_logs overview."""
        return SessionOverview.model_json_schema()

    @mcp.resource("file://{path}")
    async def raw_log(path: str) -> str:
        """Raw text of a session log under LONELOG_BASE_DIR."""
        return await read_session_log(resolve_log_path(path))

    @mcp.resource("lonelog://{path}")
    async def decoded_log(path: str) -> dict[str, Any]:
        """Decoded entries and deltas of a session log under LONELOG_BASE_DIR."""
        source = await read_session_log(resolve_log_path(path))
        return session_log_to_dict(decode_session_log(source))
