"""Lonelog prompt templates.

Each prompt returns a message list the client can send as-is; the workflows
lean on the decode and summarize tools rather than on raw log text.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP


def register_prompts(mcp: FastMCP) -> None:
    @mcp.prompt()
    def summarize_resource(uri: str) -> list[dict[str, Any]]:
        """Summarize a Lonelog resource (a session log, the notation sheet, ...)."""
        return [
            {
                "role": "system",
                "content": (
                    "You read solo-RPG session logs written in Lonelog notation. "
                    "Summarize only what the resource states: scenes, decisive rolls, "
                    "consequences and any tracker or thread changes."
                ),
            },
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "Summarize this Lonelog resource:"},
                    {"type": "resource", "uri": uri},
                ],
            },
        ]

    @mcp.prompt()
    def recap_session(log_path: str, include_entries: bool = True) -> list[dict[str, Any]]:
        """Build a prompt for a "previously on..." session recap."""
        flag = "true" if include_entries else "false"
        return [
            {
                "role": "system",
                "content": (
                    "You are a game master's assistant for solo tabletop RPG play. "
                    "Write recaps grounded only in the decoded session log. "
                    "Do not invent events, rolls, or outcomes."
                ),
            },
            {
                "role": "user",
                "content": (
                    "Recap the session using decode_session_log. Follow this workflow:\n"
                    f"- Call decode_session_log with log_path: {log_path} and "
                    f"include_entries: {flag}.\n"
                    "- Use scene entries to structure the recap; quote dialogue verbatim.\n"
                    "- Report entity changes from entityDeltas (HP, status, tags), "
                    "progress trackers from progressChanges, and threads from threadChanges.\n"
                    "- If the log has no entries, say so clearly.\n\n"
                    "Answer in four parts:\n"
                    "1) Previously on... (3-6 sentences)\n"
                    "2) Character status (one bullet per PC/NPC with changes)\n"
                    "3) Clocks and tracks (name: current/max)\n"
                    "4) Open threads\n"
                ),
            },
            {
                "role": "user",
                "content": [
                    {
                        "type": "text",
                        "text": "Optional: the notation reference is available via:",
                    },
                    {"type": "resource", "uri": "app://lonelog/notation"},
                ],
            },
        ]

    @mcp.prompt()
    def continue_scene(log_path: str, ideas: int = 3) -> list[dict[str, Any]]:
        """Build a prompt that proposes next beats written in Lonelog notation."""
        return [
            {
                "role": "system",
                "content": (
                    "You help a solo player continue their session. Answer in Lonelog "
                    "notation only (actions '@', oracle questions '?', consequences '=>' "
                    "with persistent tags). Never resolve rolls for the player."
                ),
            },
            {
                "role": "user",
                "content": (
                    f"Read the current state with summarize_session_logs on [{log_path!r}], "
                    f"then propose {ideas} possible next beats for the latest scene. "
                    "Keep entity names and tracker names exactly as they appear in the log."
                ),
            },
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "Raw log for reference:"},
                    {"type": "resource", "uri": f"file://{log_path}"},
                ],
            },
        ]
