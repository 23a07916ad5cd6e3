from __future__ import annotations

import json

from mcp_lonelog_server.core.deltas import accumulate_deltas
from mcp_lonelog_server.core.overview import (
    SessionOverview,
    build_session_overview,
    format_overview,
)
from mcp_lonelog_server.core.serialization import (
    change_to_dict,
    entity_delta_to_dict,
    entry_to_dict,
    progress_change_to_dict,
    session_log_to_dict,
    tag_to_dict,
)
from mcp_lonelog_server.core.models import (
    ClockTag,
    EntityDelta,
    EntityType,
    HPChange,
    NpcTag,
    OracleAnswerEntry,
    ProgressChange,
    ProgressKind,
    RollEntry,
    StatusChange,
    TimerTag,
)
from mcp_lonelog_server.core.session_log import decode_session_log


def test_entry_to_dict_omits_missing_optionals() -> None:
    assert entry_to_dict(OracleAnswerEntry(text="Yes")) == {"type": "oracle_answer", "text": "Yes"}
    assert entry_to_dict(RollEntry(roll="d20=11", result="")) == {
        "type": "roll",
        "roll": "d20=11",
        "result": "",
    }
    assert entry_to_dict(RollEntry(roll="d20=4", result="Fail", success=False))["success"] is False


def test_tag_and_change_dicts_use_notation_keys() -> None:
    assert tag_to_dict(NpcTag(name="Guard", tags=["alert"], ref=True)) == {
        "kind": "npc",
        "name": "Guard",
        "tags": ["alert"],
        "ref": True,
    }
    assert tag_to_dict(TimerTag(name="Dawn", value=2)) == {"kind": "timer", "name": "Dawn", "value": 2}
    assert change_to_dict(StatusChange(from_=None, to="dead")) == {
        "type": "status",
        "from": None,
        "to": "dead",
    }
    assert change_to_dict(HPChange(delta=-9)) == {"type": "hp", "delta": -9}


def test_timer_progress_has_no_max_key() -> None:
    timer = ProgressChange(name="Dawn", kind=ProgressKind.TIMER, current=2)
    clock = ProgressChange(name="Alarm", kind=ProgressKind.CLOCK, current=3, max=6)
    assert progress_change_to_dict(timer) == {"name": "Dawn", "kind": "timer", "current": 2}
    assert progress_change_to_dict(clock)["max"] == 6


def test_session_log_to_dict_is_json_serializable(combat_log: str) -> None:
    data = decode_session_log(combat_log)
    out = session_log_to_dict(data)

    json.dumps(out)
    assert out["stateKey"] == "default-log"
    assert out["entityDeltas"][0] == {
        "entity": "Goblin Lookout",
        "entityType": "npc",
        "changes": [
            {"type": "hp", "delta": -9},
            {"type": "status", "from": None, "to": "dead"},
        ],
    }
    assert out["entries"][4]["tags"][0]["kind"] == "npc"
    assert "entries" not in session_log_to_dict(data, include_entries=False)


def test_build_session_overview(combat_log: str) -> None:
    data = decode_session_log(combat_log + "\n=> [PC:Elara|+blessed|-blessed|+hasted|Stress+1]")
    merged = accumulate_deltas(data.entity_deltas)

    overview = build_session_overview(merged.values(), data.progress_changes, data.thread_changes)

    goblin, elara = overview.entities
    assert goblin.entity_type == "npc"
    assert goblin.hp_change == -9
    assert goblin.final_status == "dead"
    assert elara.hp_change == 7
    assert elara.final_status is None
    assert elara.active_tags == ["hasted"]
    assert overview.progress[0].model_dump() == {
        "name": "Reinforcements",
        "kind": "clock",
        "current": 1,
        "max": 4,
    }


def test_format_overview_lines() -> None:
    deltas = [
        EntityDelta(
            entity="Elara",
            entity_type=EntityType.PC,
            changes=[HPChange(delta=7)],
        ),
        EntityDelta(
            entity="Guard",
            entity_type=EntityType.NPC,
            changes=[StatusChange(from_="alert", to="unconscious")],
        ),
    ]
    progress = [
        ProgressChange(name="Alarm", kind=ProgressKind.CLOCK, current=3, max=6),
        ProgressChange(name="Dawn", kind=ProgressKind.TIMER, current=2),
    ]

    lines = format_overview(build_session_overview(deltas, progress))

    assert lines == [
        "PC: Elara HP +7",
        "NPC: Guard Status: unconscious",
        "Clock Alarm: 3/6",
        "Timer Dawn: 2",
    ]


def test_empty_overview_and_schema() -> None:
    assert build_session_overview([]).is_empty
    schema = SessionOverview.model_json_schema()
    assert "EntitySummary" in json.dumps(schema)


def test_entity_delta_to_dict_for_clock_tag_only_logs() -> None:
    data = decode_session_log("=> [Clock:4/12]")
    assert data.entries[0].tags == [ClockTag(name="Clock", current=4, max=12)]
    assert data.entity_deltas == []
    assert entity_delta_to_dict(
        EntityDelta(entity="Mara", entity_type=EntityType.NPC)
    ) == {"entity": "Mara", "entityType": "npc", "changes": []}
