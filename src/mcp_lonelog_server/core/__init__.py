"""Lonelog decoding core."""

from __future__ import annotations

from .deltas import accumulate_deltas, extract_deltas
from .notation import extract_tags, parse_change
from .overview import SessionOverview, build_session_overview
from .queries import calculate_total_hp_change, get_active_tags, get_final_status
from .session_log import (
    SessionLogBlock,
    SessionLogData,
    decode_session_log,
    load_session_log,
    load_session_logs,
    parse_lonelog,
    parse_session_log_block,
    process_session_log,
)

__all__ = [
    "SessionLogBlock",
    "SessionLogData",
    "SessionOverview",
    "accumulate_deltas",
    "build_session_overview",
    "calculate_total_hp_change",
    "decode_session_log",
    "extract_deltas",
    "extract_tags",
    "get_active_tags",
    "get_final_status",
    "load_session_log",
    "load_session_logs",
    "parse_change",
    "parse_lonelog",
    "parse_session_log_block",
    "process_session_log",
]
