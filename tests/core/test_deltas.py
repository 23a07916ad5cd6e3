from __future__ import annotations

from mcp_lonelog_server.core.deltas import accumulate_deltas, extract_deltas
from mcp_lonelog_server.core.models import (
    ConsequenceEntry,
    EntityDelta,
    EntityType,
    HPChange,
    NarrativeEntry,
    NpcTag,
    ProgressChange,
    ProgressKind,
    StatChange,
    StatusChange,
    TagAddition,
    TagRemoval,
    ThreadChange,
)
from mcp_lonelog_server.core.queries import (
    calculate_total_hp_change,
    get_active_tags,
    get_final_status,
)
from mcp_lonelog_server.core.session_log import parse_lonelog


def test_extract_hp_damage_from_pc_tag() -> None:
    deltas = extract_deltas(parse_lonelog("=> [PC:Elara|HP-9]"))
    assert deltas.entity_deltas == [
        EntityDelta(entity="Elara", entity_type=EntityType.PC, changes=[HPChange(delta=-9)])
    ]


def test_extract_healing_from_pc_tag() -> None:
    deltas = extract_deltas(parse_lonelog("=> [PC:Thorne|HP+7]"))
    assert len(deltas.entity_deltas) == 1
    assert calculate_total_hp_change(deltas.entity_deltas[0].changes) == 7


def test_extract_multiple_changes_in_order() -> None:
    deltas = extract_deltas(parse_lonelog("=> [PC:Elara|HP-5|Stress+2|nonsense|+inspired]"))
    assert deltas.entity_deltas[0].changes == [
        HPChange(delta=-5),
        StatChange(stat="Stress", delta=2),
        TagAddition(tag="inspired"),
    ]


def test_extract_npc_status_and_transition() -> None:
    deltas = extract_deltas(
        parse_lonelog("=> [N:Goblin Lookout|dead]\n=> [N:Guard|alert→unconscious]")
    )
    assert deltas.entity_deltas == [
        EntityDelta(
            entity="Goblin Lookout",
            entity_type=EntityType.NPC,
            changes=[StatusChange(from_=None, to="dead")],
        ),
        EntityDelta(
            entity="Guard",
            entity_type=EntityType.NPC,
            changes=[StatusChange(from_="alert", to="unconscious")],
        ),
    ]


def test_repeated_entity_tags_share_one_delta() -> None:
    log = "\n".join(
        [
            "=> [PC:Elara|HP-3]",
            "=> [N:Elara|hostile]",
            "The fight drags on.",
            "=> [PC:Elara|HP-2|+bleeding]",
        ]
    )
    deltas = extract_deltas(parse_lonelog(log))
    assert [d.key for d in deltas.entity_deltas] == ["pc:Elara", "npc:Elara"]
    assert deltas.entity_deltas[0].changes == [
        HPChange(delta=-3),
        HPChange(delta=-2),
        TagAddition(tag="bleeding"),
    ]


def test_entity_delta_created_without_parsable_changes() -> None:
    deltas = extract_deltas(parse_lonelog("=> [#N:Goblin Lookout] watches [N:Guard|grumpy]"))
    assert deltas.entity_deltas == [
        EntityDelta(entity="Goblin Lookout", entity_type=EntityType.NPC, changes=[]),
        EntityDelta(entity="Guard", entity_type=EntityType.NPC, changes=[]),
    ]


def test_progress_and_thread_changes() -> None:
    log = "\n".join(
        [
            "=> [Clock:Reinforcements 1/4] [Timer:Dawn 2]",
            "=> [Clock:Reinforcements 2/4] [Track:Escape 3/8] [E:Festival 1/3]",
            "=> [Thread:Find Sister] [Thread:Cult|Closed] [L:Ruins|dark]",
        ]
    )
    deltas = extract_deltas(parse_lonelog(log))
    assert deltas.entity_deltas == []
    assert deltas.progress_changes == [
        ProgressChange(name="Reinforcements", kind=ProgressKind.CLOCK, current=1, max=4),
        ProgressChange(name="Dawn", kind=ProgressKind.TIMER, current=2),
        ProgressChange(name="Reinforcements", kind=ProgressKind.CLOCK, current=2, max=4),
        ProgressChange(name="Escape", kind=ProgressKind.TRACK, current=3, max=8),
        ProgressChange(name="Festival", kind=ProgressKind.EVENT, current=1, max=3),
    ]
    assert deltas.progress_changes[1].max is None
    assert deltas.thread_changes == [
        ThreadChange(name="Find Sister", to="Open", from_=None),
        ThreadChange(name="Cult", to="Closed", from_=None),
    ]


def test_only_consequence_entries_contribute() -> None:
    entries = [
        NarrativeEntry(text="[PC:Elara|HP-9]"),
        ConsequenceEntry(text="[N:Guard|dead]", tags=[NpcTag(name="Guard", tags=["dead"])]),
    ]
    deltas = extract_deltas(entries)
    assert [d.entity for d in deltas.entity_deltas] == ["Guard"]


def test_extract_deltas_is_call_local() -> None:
    entries = parse_lonelog("=> [PC:Elara|HP-1]")
    first = extract_deltas(entries)
    second = extract_deltas(entries)
    assert first.entity_deltas == second.entity_deltas
    assert first.entity_deltas[0] is not second.entity_deltas[0]


def test_accumulate_deltas_merges_by_key() -> None:
    first = extract_deltas(parse_lonelog("=> [PC:Elara|HP-9|+poisoned]")).entity_deltas
    second = extract_deltas(parse_lonelog("=> [PC:Elara|HP+4]\n=> [N:Guard|dead]")).entity_deltas

    merged = accumulate_deltas(first + second)

    assert list(merged) == ["pc:Elara", "npc:Guard"]
    elara = merged["pc:Elara"]
    assert len(elara.changes) == len(first[0].changes) + len(second[0].changes)
    assert elara.changes == [HPChange(delta=-9), TagAddition(tag="poisoned"), HPChange(delta=4)]
    # Inputs are not mutated.
    assert len(first[0].changes) == 2


def test_accumulate_deltas_keeps_duplicates() -> None:
    delta = EntityDelta(entity="Guard", entity_type=EntityType.NPC, changes=[HPChange(delta=-1)])
    merged = accumulate_deltas([delta, delta])
    assert merged["npc:Guard"].changes == [HPChange(delta=-1), HPChange(delta=-1)]


def test_total_hp_change() -> None:
    changes = [HPChange(delta=-9), StatChange(stat="HP", delta=100), HPChange(delta=7)]
    assert calculate_total_hp_change(changes) == -2
    assert calculate_total_hp_change([]) == 0


def test_final_status() -> None:
    changes = [
        StatusChange(from_=None, to="alert"),
        HPChange(delta=-4),
        StatusChange(from_="alert", to="unconscious"),
    ]
    assert get_final_status(changes) == "unconscious"
    assert get_final_status([HPChange(delta=1)]) is None


def test_active_tags_replay() -> None:
    changes = [
        TagAddition(tag="wounded"),
        TagAddition(tag="poisoned"),
        TagRemoval(tag="wounded"),
        TagAddition(tag="frightened"),
    ]
    assert get_active_tags(changes) == {"poisoned", "frightened"}

    readded = [TagRemoval(tag="hidden"), TagAddition(tag="hidden")]
    assert get_active_tags(readded) == {"hidden"}
