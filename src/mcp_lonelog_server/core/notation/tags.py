"""Persistent tag extraction.

Tags are bracketed markers embedded in consequence text:

    [N:Goblin Lookout|wounded]   [#N:Goblin Lookout]   [L:Camp|dark]
    [E:Alarm 2/6]   [Clock:Reinforcements 1/4]   [Clock:4/12]
    [Track:Escape 3/8]   [Timer:Dawn 2]   [Timer:5]
    [Thread:Find Sister|Open]   [PC:Elara|HP-9|Stress+1]

Progress tags without a usable numeric suffix are dropped, not reported.
"""

from __future__ import annotations

import logging
import re

from ..models import (
    ClockTag,
    EventTag,
    LocationTag,
    NpcTag,
    PcTag,
    PersistentTag,
    ThreadTag,
    TimerTag,
    TrackTag,
)

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(
    r"\[(?P<ref>#)?(?P<kind>N|L|E|Clock|Track|Timer|Thread|PC):(?P<name>[^\]|]+)(?:\|(?P<data>[^\]]*))?\]"
)
_PROGRESS_RE = re.compile(r"(?P<name>.+?)\s+(?P<current>[0-9]+)/(?P<max>[0-9]+)")
_BARE_PROGRESS_RE = re.compile(r"(?P<current>[0-9]+)/(?P<max>[0-9]+)")
_TIMER_RE = re.compile(r"(?P<name>.+?)\s+(?P<value>[0-9]+)")
_BARE_TIMER_RE = re.compile(r"[0-9]+")

_PROGRESS_TAGS: dict[str, type[EventTag | ClockTag | TrackTag]] = {
    "E": EventTag,
    "Clock": ClockTag,
    "Track": TrackTag,
}


def _split_list(data: str) -> list[str]:
    """Split ``a|b||c`` into ``["a", "b", "c"]``."""
    return [part for part in data.split("|") if part]


def _combined(name: str, data: str) -> str:
    return f"{name} {data}" if data else name


def _progress_tag(kind: str, name: str, data: str) -> EventTag | ClockTag | TrackTag | None:
    cls = _PROGRESS_TAGS[kind]
    m = _PROGRESS_RE.fullmatch(_combined(name, data))
    if m:
        return cls(
            name=m.group("name").strip(),
            current=int(m.group("current")),
            max=int(m.group("max")),
        )

    if cls is ClockTag:
        m = _BARE_PROGRESS_RE.fullmatch(name)
        if m:
            return ClockTag(
                name=data or "Clock",
                current=int(m.group("current")),
                max=int(m.group("max")),
            )

    logger.debug("Dropping %s tag without progress: %r", kind, _combined(name, data))
    return None


def _timer_tag(name: str, data: str) -> TimerTag | None:
    m = _TIMER_RE.fullmatch(_combined(name, data))
    if m:
        return TimerTag(name=m.group("name").strip(), value=int(m.group("value")))

    if _BARE_TIMER_RE.fullmatch(name):
        return TimerTag(name="Timer", value=int(name))

    logger.debug("Dropping Timer tag without value: %r", _combined(name, data))
    return None


def extract_tags(text: str) -> list[PersistentTag]:
    """Return the persistent tags found in ``text``, in order of appearance."""
    tags: list[PersistentTag] = []

    for m in _TAG_RE.finditer(text):
        kind = m.group("kind")
        name = m.group("name")
        data = m.group("data") or ""

        tag: PersistentTag | None
        if kind == "N":
            tag = NpcTag(name=name, tags=_split_list(data), ref=m.group("ref") is not None)
        elif kind == "L":
            tag = LocationTag(name=name, tags=_split_list(data))
        elif kind in _PROGRESS_TAGS:
            tag = _progress_tag(kind, name, data)
        elif kind == "Timer":
            tag = _timer_tag(name, data)
        elif kind == "Thread":
            tag = ThreadTag(name=name, state=data or "Open")
        else:
            tag = PcTag(name=name, changes=_split_list(data))

        if tag is not None:
            tags.append(tag)

    return tags
