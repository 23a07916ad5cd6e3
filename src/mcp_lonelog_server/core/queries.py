"""Reducers over ordered state change sequences."""

from __future__ import annotations

from collections.abc import Iterable

from .models import HPChange, StateChange, StatusChange, TagAddition, TagRemoval


def calculate_total_hp_change(changes: Iterable[StateChange]) -> int:
    """Sum every HP delta; other change types are ignored."""
    return sum(c.delta for c in changes if isinstance(c, HPChange))


def get_final_status(changes: Iterable[StateChange]) -> str | None:
    """Return the target of the last status change, or None if there is none."""
    status: str | None = None
    for c in changes:
        if isinstance(c, StatusChange):
            status = c.to
    return status


def get_active_tags(changes: Iterable[StateChange]) -> set[str]:
    """Replay tag additions and removals in order."""
    tags: set[str] = set()
    for c in changes:
        if isinstance(c, TagAddition):
            tags.add(c.tag)
        elif isinstance(c, TagRemoval):
            tags.discard(c.tag)
    return tags
