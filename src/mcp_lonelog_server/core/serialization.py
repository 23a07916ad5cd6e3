"""JSON-ready views of decoded session logs.

Keys follow the notation's own wire names (``entityType``, ``from``,
``entityDeltas``). Optional fields that are None are omitted.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any

from .models import (
    ConsequenceEntry,
    EntityDelta,
    LogEntry,
    PersistentTag,
    ProgressChange,
    StateChange,
    StatusChange,
    ThreadChange,
)
from .session_log import SessionLogData


def _omit_none(d: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


def tag_to_dict(tag: PersistentTag) -> dict[str, Any]:
    """Convert a persistent tag into a JSON-serializable dict."""
    d: dict[str, Any] = {"kind": tag.kind}
    for f in fields(tag):
        value = getattr(tag, f.name)
        d[f.name] = list(value) if isinstance(value, list) else value
    return d


def entry_to_dict(entry: LogEntry) -> dict[str, Any]:
    """Convert a log entry into a JSON-serializable dict."""
    if isinstance(entry, ConsequenceEntry):
        return {
            "type": entry.type,
            "text": entry.text,
            "tags": [tag_to_dict(t) for t in entry.tags],
        }
    d: dict[str, Any] = {"type": entry.type}
    for f in fields(entry):
        d[f.name] = getattr(entry, f.name)
    return _omit_none(d)


def change_to_dict(change: StateChange) -> dict[str, Any]:
    """Convert a state change into a JSON-serializable dict."""
    if isinstance(change, StatusChange):
        return {"type": change.type, "from": change.from_, "to": change.to}
    d: dict[str, Any] = {"type": change.type}
    for f in fields(change):
        d[f.name] = getattr(change, f.name)
    return d


def entity_delta_to_dict(delta: EntityDelta) -> dict[str, Any]:
    return {
        "entity": delta.entity,
        "entityType": delta.entity_type.value,
        "changes": [change_to_dict(c) for c in delta.changes],
    }


def progress_change_to_dict(progress: ProgressChange) -> dict[str, Any]:
    # Timers have no max; the key is left out rather than set to null.
    return _omit_none(
        {
            "name": progress.name,
            "kind": progress.kind.value,
            "current": progress.current,
            "max": progress.max,
        }
    )


def thread_change_to_dict(thread: ThreadChange) -> dict[str, Any]:
    return {"name": thread.name, "from": thread.from_, "to": thread.to}


def session_log_to_dict(data: SessionLogData, *, include_entries: bool = True) -> dict[str, Any]:
    """Convert decoded session log data into a JSON-serializable dict."""
    d: dict[str, Any] = {
        "stateKey": data.state_key,
        "entityDeltas": [entity_delta_to_dict(x) for x in data.entity_deltas],
        "progressChanges": [progress_change_to_dict(x) for x in data.progress_changes],
        "threadChanges": [thread_change_to_dict(x) for x in data.thread_changes],
    }
    if data.scene is not None:
        d["scene"] = data.scene
    if data.entities:
        d["entities"] = [{"file": e.file} for e in data.entities]
    if include_entries:
        d["entries"] = [entry_to_dict(e) for e in data.entries]
    return d
