"""Session overview models.

Summarizes accumulated deltas the way a session recap reads them: net HP,
final status and active tags per entity, plus tracker and thread states.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from pydantic import BaseModel, Field

from .models import EntityDelta, ProgressChange, ThreadChange
from .queries import calculate_total_hp_change, get_active_tags, get_final_status


class EntitySummary(BaseModel):
    entity: str = Field(description="Entity name as written in the tag.")
    entity_type: Literal["pc", "npc"] = Field(description="Whether the entity is a PC or an NPC.")
    hp_change: int = Field(default=0, description="Net HP change (positive heals).")
    final_status: str | None = Field(default=None, description="Status after the last change.")
    active_tags: list[str] = Field(
        default_factory=list, description="Tags still applied after replaying +tag/-tag."
    )


class ProgressSummary(BaseModel):
    name: str = Field(description="Tracker name.")
    kind: Literal["event", "clock", "track", "timer"]
    current: int
    max: int | None = Field(default=None, description="Tracker size; always null for timers.")


class ThreadSummary(BaseModel):
    name: str
    state: str = Field(description="Thread state as of this mention (e.g. Open, Closed).")


class SessionOverview(BaseModel):
    entities: list[EntitySummary] = Field(default_factory=list)
    progress: list[ProgressSummary] = Field(default_factory=list)
    threads: list[ThreadSummary] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.entities or self.progress or self.threads)


def summarize_entity(delta: EntityDelta) -> EntitySummary:
    """Reduce one entity delta with the derived queries."""
    return EntitySummary(
        entity=delta.entity,
        entity_type=delta.entity_type.value,
        hp_change=calculate_total_hp_change(delta.changes),
        final_status=get_final_status(delta.changes),
        active_tags=sorted(get_active_tags(delta.changes)),
    )


def build_session_overview(
    entity_deltas: Iterable[EntityDelta],
    progress_changes: Iterable[ProgressChange] = (),
    thread_changes: Iterable[ThreadChange] = (),
) -> SessionOverview:
    """Build an overview; progress and thread changes are listed in source order."""
    return SessionOverview(
        entities=[summarize_entity(d) for d in entity_deltas],
        progress=[
            ProgressSummary(name=p.name, kind=p.kind.value, current=p.current, max=p.max)
            for p in progress_changes
        ],
        threads=[ThreadSummary(name=t.name, state=t.to) for t in thread_changes],
    )


def _fmt_hp(hp: int) -> str:
    return f"+{hp}" if hp > 0 else str(hp)


def format_overview(overview: SessionOverview) -> list[str]:
    """Render the overview as plain text lines."""
    lines: list[str] = []
    for e in overview.entities:
        parts = [f"{e.entity_type.upper()}: {e.entity}"]
        if e.hp_change != 0:
            parts.append(f"HP {_fmt_hp(e.hp_change)}")
        if e.final_status:
            parts.append(f"Status: {e.final_status}")
        if e.active_tags:
            parts.append(f"Tags: {', '.join(e.active_tags)}")
        lines.append(" ".join(parts))

    for p in overview.progress:
        value = f"{p.current}/{p.max}" if p.max is not None else str(p.current)
        lines.append(f"{p.kind.capitalize()} {p.name}: {value}")

    for t in overview.threads:
        lines.append(f"Thread {t.name}: {t.state}")

    return lines
