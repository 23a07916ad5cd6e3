"""State delta extraction and accumulation.

Consequence entries carry persistent tags; this module turns those tags into
per-entity state changes, progress tracker snapshots and thread changes.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import (
    ClockTag,
    ConsequenceEntry,
    EntityDelta,
    EntityType,
    EventTag,
    ExtractedDeltas,
    LogEntry,
    NpcTag,
    PcTag,
    PersistentTag,
    ProgressChange,
    ProgressKind,
    ThreadChange,
    ThreadTag,
    TimerTag,
    TrackTag,
    delta_key,
)
from .notation.changes import parse_change


def _entity_delta(
    deltas: dict[str, EntityDelta], entity_type: EntityType, name: str
) -> EntityDelta:
    """Find or create the delta for an entity in a call-local mapping."""
    key = delta_key(entity_type, name)
    delta = deltas.get(key)
    if delta is None:
        delta = EntityDelta(entity=name, entity_type=entity_type)
        deltas[key] = delta
    return delta


def _apply_tag(
    tag: PersistentTag,
    *,
    entity_deltas: dict[str, EntityDelta],
    progress_changes: list[ProgressChange],
    thread_changes: list[ThreadChange],
) -> None:
    """Route one tag into the matching output collection."""
    if isinstance(tag, (PcTag, NpcTag)):
        if isinstance(tag, PcTag):
            entity_type, tokens = EntityType.PC, tag.changes
        else:
            entity_type, tokens = EntityType.NPC, tag.tags

        delta = _entity_delta(entity_deltas, entity_type, tag.name)
        for token in tokens:
            change = parse_change(token)
            if change is not None:
                delta.changes.append(change)
    elif isinstance(tag, (ClockTag, TrackTag, EventTag)):
        progress_changes.append(
            ProgressChange(
                name=tag.name,
                kind=ProgressKind(tag.kind),
                current=tag.current,
                max=tag.max,
            )
        )
    elif isinstance(tag, TimerTag):
        progress_changes.append(
            ProgressChange(name=tag.name, kind=ProgressKind.TIMER, current=tag.value)
        )
    elif isinstance(tag, ThreadTag):
        thread_changes.append(ThreadChange(name=tag.name, to=tag.state))
    # Location tags describe scenery and carry no state.


def extract_deltas(entries: Iterable[LogEntry]) -> ExtractedDeltas:
    """Extract entity, progress and thread changes from parsed entries."""
    entity_deltas: dict[str, EntityDelta] = {}
    progress_changes: list[ProgressChange] = []
    thread_changes: list[ThreadChange] = []

    for entry in entries:
        if not isinstance(entry, ConsequenceEntry):
            continue
        for tag in entry.tags:
            _apply_tag(
                tag,
                entity_deltas=entity_deltas,
                progress_changes=progress_changes,
                thread_changes=thread_changes,
            )

    return ExtractedDeltas(
        entity_deltas=list(entity_deltas.values()),
        progress_changes=progress_changes,
        thread_changes=thread_changes,
    )


def accumulate_deltas(deltas: Iterable[EntityDelta]) -> dict[str, EntityDelta]:
    """Merge entity deltas by ``"{entity_type}:{entity}"``.

    Changes for repeated keys are concatenated in input order. The input
    deltas are left untouched.
    """
    accumulated: dict[str, EntityDelta] = {}
    for delta in deltas:
        acc = _entity_delta(accumulated, delta.entity_type, delta.entity)
        acc.changes.extend(delta.changes)
    return accumulated
