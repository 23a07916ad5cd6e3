"""Core data models for Lonelog session logs.

Every tagged union (log entries, persistent tags, state changes) is a set of
frozen dataclasses. Each variant carries its notation keyword as a class-level
discriminator (``type`` or ``kind``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar


class EntityType(str, Enum):
    """Kinds of entities that accumulate state changes."""

    PC = "pc"
    NPC = "npc"


class ProgressKind(str, Enum):
    """Progress tracker kinds."""

    EVENT = "event"
    CLOCK = "clock"
    TRACK = "track"
    TIMER = "timer"


# --- Persistent tags -------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NpcTag:
    """``[N:Name|tag|tag]`` or the reference form ``[#N:Name]``."""

    name: str
    tags: list[str] = field(default_factory=list)
    ref: bool = False

    kind: ClassVar[str] = "npc"


@dataclass(frozen=True, slots=True)
class LocationTag:
    """``[L:Name|tag|tag]``."""

    name: str
    tags: list[str] = field(default_factory=list)

    kind: ClassVar[str] = "location"


@dataclass(frozen=True, slots=True)
class EventTag:
    """``[E:Name current/max]``."""

    name: str
    current: int
    max: int

    kind: ClassVar[str] = "event"


@dataclass(frozen=True, slots=True)
class ClockTag:
    """``[Clock:Name current/max]`` or the bare ``[Clock:current/max]``."""

    name: str
    current: int
    max: int

    kind: ClassVar[str] = "clock"


@dataclass(frozen=True, slots=True)
class TrackTag:
    """``[Track:Name current/max]``."""

    name: str
    current: int
    max: int

    kind: ClassVar[str] = "track"


@dataclass(frozen=True, slots=True)
class TimerTag:
    """``[Timer:Name value]`` or the bare ``[Timer:value]``."""

    name: str
    value: int

    kind: ClassVar[str] = "timer"


@dataclass(frozen=True, slots=True)
class ThreadTag:
    """``[Thread:Name|State]``."""

    name: str
    state: str = "Open"

    kind: ClassVar[str] = "thread"


@dataclass(frozen=True, slots=True)
class PcTag:
    """``[PC:Name|change|change]``."""

    name: str
    changes: list[str] = field(default_factory=list)

    kind: ClassVar[str] = "pc"


PersistentTag = (
    NpcTag | LocationTag | EventTag | ClockTag | TrackTag | TimerTag | ThreadTag | PcTag
)


# --- Log entries -----------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SceneEntry:
    number: str  # "S1", "S1a", "S1.1", "T1-S2"
    context: str

    type: ClassVar[str] = "scene"


@dataclass(frozen=True, slots=True)
class ActionEntry:
    text: str

    type: ClassVar[str] = "action"


@dataclass(frozen=True, slots=True)
class OracleQuestionEntry:
    text: str

    type: ClassVar[str] = "oracle_question"


@dataclass(frozen=True, slots=True)
class OracleAnswerEntry:
    text: str
    roll: str | None = None  # e.g. "d6=3"

    type: ClassVar[str] = "oracle_answer"


@dataclass(frozen=True, slots=True)
class RollEntry:
    roll: str
    result: str
    success: bool | None = None  # None when the outcome wording is not recognized

    type: ClassVar[str] = "roll"


@dataclass(frozen=True, slots=True)
class ConsequenceEntry:
    text: str
    tags: list[PersistentTag] = field(default_factory=list)

    type: ClassVar[str] = "consequence"


@dataclass(frozen=True, slots=True)
class DialogueEntry:
    speaker: str  # NPC name or "PC"
    text: str

    type: ClassVar[str] = "dialogue"


@dataclass(frozen=True, slots=True)
class TableRollEntry:
    source: str
    roll: str
    result: str

    type: ClassVar[str] = "table_roll"


@dataclass(frozen=True, slots=True)
class GeneratorEntry:
    source: str
    result: str

    type: ClassVar[str] = "generator"


@dataclass(frozen=True, slots=True)
class MetaNoteEntry:
    text: str

    type: ClassVar[str] = "meta_note"


@dataclass(frozen=True, slots=True)
class NarrativeEntry:
    text: str

    type: ClassVar[str] = "narrative"


LogEntry = (
    SceneEntry
    | ActionEntry
    | OracleQuestionEntry
    | OracleAnswerEntry
    | RollEntry
    | ConsequenceEntry
    | DialogueEntry
    | TableRollEntry
    | GeneratorEntry
    | MetaNoteEntry
    | NarrativeEntry
)


# --- State changes ---------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HPChange:
    delta: int  # positive heals, negative damages

    type: ClassVar[str] = "hp"


@dataclass(frozen=True, slots=True)
class StatChange:
    stat: str
    delta: int

    type: ClassVar[str] = "stat"


@dataclass(frozen=True, slots=True)
class StatusChange:
    from_: str | None
    to: str

    type: ClassVar[str] = "status"


@dataclass(frozen=True, slots=True)
class TagAddition:
    tag: str

    type: ClassVar[str] = "tag_add"


@dataclass(frozen=True, slots=True)
class TagRemoval:
    tag: str

    type: ClassVar[str] = "tag_remove"


StateChange = HPChange | StatChange | StatusChange | TagAddition | TagRemoval


# --- Deltas ----------------------------------------------------------------


def delta_key(entity_type: EntityType, entity: str) -> str:
    """Return the accumulation key for an entity (``"pc:Elara"``)."""
    return f"{entity_type.value}:{entity}"


@dataclass(slots=True)
class EntityDelta:
    """Ordered state changes attributed to one PC or NPC."""

    entity: str
    entity_type: EntityType
    changes: list[StateChange] = field(default_factory=list)

    @property
    def key(self) -> str:
        return delta_key(self.entity_type, self.entity)


@dataclass(frozen=True, slots=True)
class ProgressChange:
    """Progress tracker snapshot; ``max`` is always None for timers."""

    name: str
    kind: ProgressKind
    current: int
    max: int | None = None


@dataclass(frozen=True, slots=True)
class ThreadChange:
    """Thread state change. No prior state is tracked, so ``from_`` is None."""

    name: str
    to: str
    from_: str | None = None


@dataclass(frozen=True, slots=True)
class ExtractedDeltas:
    """Deltas extracted from one entry sequence."""

    entity_deltas: list[EntityDelta]
    progress_changes: list[ProgressChange]
    thread_changes: list[ThreadChange]
