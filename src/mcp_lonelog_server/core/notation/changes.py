"""Change token parser.

Turns the ``|``-separated tokens of PC and NPC tags into typed state changes:

    HP-9               -> HPChange(-9)
    Stress+2           -> StatChange("Stress", 2)
    alert→unconscious  -> StatusChange("alert", "unconscious")
    +captured          -> TagAddition("captured")
    -wounded           -> TagRemoval("wounded")
    dead               -> StatusChange(None, "dead")
"""

from __future__ import annotations

import logging
import re

from ..models import HPChange, StatChange, StateChange, StatusChange, TagAddition, TagRemoval

logger = logging.getLogger(__name__)

STATUS_KEYWORDS: frozenset[str] = frozenset(
    {
        "dead",
        "unconscious",
        "wounded",
        "hostile",
        "alert",
        "distracted",
        "prone",
        "stunned",
        "paralyzed",
        "frightened",
        "charmed",
        "blinded",
        "deafened",
        "invisible",
        "poisoned",
        "grappled",
        "restrained",
        "incapacitated",
        "petrified",
    }
)

_HP_RE = re.compile(r"HP(?P<sign>[+-])(?P<amount>[0-9]+)")
_STAT_RE = re.compile(r"(?P<stat>[A-Za-z]+)(?P<sign>[+-])(?P<amount>[0-9]+)")
_TRANSITION_RE = re.compile(r"(?P<from>.+?)→(?P<to>.+)")


def _signed(sign: str, amount: str) -> int:
    value = int(amount)
    return value if sign == "+" else -value


def parse_change(change: str) -> StateChange | None:
    """Parse one change token; return None when the token is not recognized."""
    m = _HP_RE.fullmatch(change)
    if m:
        return HPChange(delta=_signed(m.group("sign"), m.group("amount")))

    # HP tokens never reach this branch, so "HP+3" is never a stat change.
    m = _STAT_RE.fullmatch(change)
    if m:
        return StatChange(
            stat=m.group("stat"),
            delta=_signed(m.group("sign"), m.group("amount")),
        )

    m = _TRANSITION_RE.fullmatch(change)
    if m:
        return StatusChange(from_=m.group("from"), to=m.group("to"))

    if change.startswith("+"):
        return TagAddition(tag=change[1:])
    if change.startswith("-"):
        return TagRemoval(tag=change[1:])

    if change.lower() in STATUS_KEYWORDS:
        return StatusChange(from_=None, to=change)

    logger.debug("Ignoring unrecognized change token %r", change)
    return None
