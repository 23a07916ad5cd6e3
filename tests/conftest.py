from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

COMBAT_LOG = "\n".join(
    [
        "S1 *Goblin ambush*",
        "@ Elara attacks Goblin Lookout",
        "d: d20+7=19 vs AC 15 -> Hit",
        "d: 1d8+4=9 slashing damage",
        "=> [N:Goblin Lookout|HP-9|dead]",
        "",
        "? Do the other goblins flee?",
        "-> No, and... (d6=2)",
        "=> They call for reinforcements. [Clock:Reinforcements 1/4]",
        "",
        "@ Thorne casts Healing Word on Elara",
        "=> [PC:Elara|HP+7]",
        "(note: Used 1st level spell slot)",
    ]
)


@pytest.fixture
def combat_log() -> str:
    return COMBAT_LOG


@pytest.fixture
def write_session_log() -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        path.write_text(
            "state_key: goblin-ambush\nscene: \"Forest road\"\n---\n" + COMBAT_LOG + "\n",
            encoding="utf-8",
        )

    return _write


@pytest.fixture
def write_lines() -> Callable[[Path, list[str]], None]:
    def _write(path: Path, lines: list[str]) -> None:
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    return _write
