import logging
import random

import pytest

from debatetab import (
    Judge,
    PairingConstraints,
    PairingOptions,
    PairingResult,
    QualityWeights,
    Team,
    TeamRecord,
    generate_pairings,
)
from debatetab.constants import (
    FLAG_REMATCH,
    FLAG_SAME_INSTITUTION,
    FLAG_SIDES_SWAPPED,
)
from debatetab.exceptions import InvalidPairingException
from debatetab.models import PairingHistory
from debatetab.pairing import (
    evaluate_pairing_quality,
    split_into_pools,
    unpaired_teams,
)
from debatetab.pairing.power_pairing import HARD_CONFLICT, build_history


def _record(team_id, institution=None, **kwargs):
    team = Team(id=team_id, name=f"Team {team_id}", institution=institution)
    return TeamRecord(team=team, **kwargs)


def _field(count, **kwargs):
    return [_record(f"T{n}", **kwargs) for n in range(1, count + 1)]


def _matchups(pairings):
    return [(p.aff_id, p.neg_id) for p in pairings]


def _assert_valid_draw(records, pairings):
    seen = set()
    for pairing in pairings:
        assert pairing.aff_id != pairing.neg_id
        assert pairing.aff_id not in seen and pairing.neg_id not in seen
        seen.update(pairing.team_ids)
    assert seen <= {r.team_id for r in records}


def test_high_low_folds_equal_pool():
    pairings = generate_pairings(_field(4), [])

    assert _matchups(pairings) == [("T1", "T4"), ("T2", "T3")]
    assert all(p.quality == pytest.approx(100.0) for p in pairings)
    assert all(p.flags == () for p in pairings)


def test_high_high_pairs_neighbours():
    options = PairingOptions(method="high_high")

    pairings = generate_pairings(_field(4), [], options=options)

    assert _matchups(pairings) == [("T1", "T2"), ("T3", "T4")]


def test_fold_holds_with_speaks_gap_disabled():
    records = [
        _record("T1", speaks=80.0),
        _record("T2", speaks=70.0),
        _record("T3", speaks=60.0),
        _record("T4", speaks=50.0),
    ]
    options = PairingOptions(weights=QualityWeights(speaks_gap=0.0))

    pairings = generate_pairings(records, [], options=options)

    assert _matchups(pairings) == [("T1", "T4"), ("T2", "T3")]


def test_speaks_gap_pulls_high_low_toward_closer_speaks():
    records = [
        _record("T1", speaks=80.0),
        _record("T2", speaks=70.0),
        _record("T3", speaks=60.0),
        _record("T4", speaks=50.0),
    ]

    pairings = generate_pairings(records, [])

    assert _matchups(pairings) == [("T1", "T3"), ("T2", "T4")]
    assert pairings[0].quality == pytest.approx(98.0)


def test_speaks_gap_lowers_quality():
    records = [_record("T1", speaks=60.0), _record("T2", speaks=58.0)]

    pairings = generate_pairings(records, [])

    assert pairings[0].quality == pytest.approx(99.8)


def test_random_method_is_reproducible_with_seed():
    options = PairingOptions(method="random")
    records = _field(10)

    first = generate_pairings(records, [], options=options, rng=random.Random(5))
    second = generate_pairings(records, [], options=options, rng=random.Random(5))

    assert _matchups(first) == _matchups(second)
    assert len(first) == 5
    _assert_valid_draw(records, first)


def test_pools_are_never_crossed():
    records = [
        _record("T3", wins=0),
        _record("T1", wins=1),
        _record("T4", wins=0),
        _record("T2", wins=1),
    ]

    pairings = generate_pairings(records, [])

    assert _matchups(pairings) == [("T1", "T2"), ("T3", "T4")]
    assert [p.bracket for p in pairings] == [1, 0]


def test_split_into_pools_keeps_ranking_within_pool():
    records = [_record("A", wins=1), _record("B", wins=2), _record("C", wins=1)]

    pools = split_into_pools(records)

    assert [[r.team_id for r in pool] for pool in pools] == [["B"], ["A", "C"]]


def test_odd_pool_leaves_one_team_with_a_bye():
    records = _field(3)

    pairings = generate_pairings(records, [])

    assert _matchups(pairings) == [("T1", "T3")]
    assert unpaired_teams(records, pairings) == ["T2"]


def test_lone_team_in_pool_gets_a_bye():
    records = [_record("T1", wins=2), _record("T2"), _record("T3")]

    pairings = generate_pairings(records, [])

    assert _matchups(pairings) == [("T2", "T3")]
    assert unpaired_teams(records, pairings) == ["T1"]


def test_empty_field_gives_empty_draw():
    assert generate_pairings([], []) == []


def test_hard_conflict_is_never_paired():
    constraints = PairingConstraints(team_conflicts=[("T1", "T4")])

    pairings = generate_pairings(_field(4), [], constraints=constraints)

    assert _matchups(pairings) == [("T1", "T3"), ("T2", "T4")]


def test_rejected_teams_get_paired_in_leftover_sweep():
    constraints = PairingConstraints(
        team_conflicts=[("T1", "T4"), ("T1", "T3"), ("T2", "T4"), ("T2", "T3")]
    )

    pairings = generate_pairings(_field(4), [], constraints=constraints)

    assert _matchups(pairings) == [("T1", "T2"), ("T3", "T4")]


def test_fully_conflicted_teams_sit_out():
    constraints = PairingConstraints(team_conflicts=[("T1", "T2")])
    records = _field(2)

    pairings = generate_pairings(records, [], constraints=constraints)

    assert pairings == []
    assert unpaired_teams(records, pairings) == ["T1", "T2"]


def test_same_institution_is_avoided():
    records = [
        _record("T1", institution="X"),
        _record("T2"),
        _record("T3"),
        _record("T4", institution="X"),
    ]

    pairings = generate_pairings(records, [])

    assert _matchups(pairings) == [("T1", "T3"), ("T2", "T4")]


def test_same_institution_allowed_without_club_protect():
    records = [_record("T1", institution="X"), _record("T2", institution="X")]
    constraints = PairingConstraints(club_protect=False)

    pairings = generate_pairings(records, [], constraints=constraints)

    assert pairings[0].flags == ()
    assert pairings[0].quality == pytest.approx(100.0)


def test_unavoidable_same_institution_is_flagged():
    records = [_record("T1", institution="X"), _record("T2", institution="X")]

    pairings = generate_pairings(records, [])

    assert _matchups(pairings) == [("T1", "T2")]
    assert pairings[0].quality == pytest.approx(50.0)
    assert FLAG_SAME_INSTITUTION in pairings[0].flags


def test_rematch_from_previous_pairings_is_avoided():
    previous = [PairingResult("T1", "T4", "aff", round_number=1)]

    pairings = generate_pairings(_field(4), [], previous_pairings=previous)

    assert _matchups(pairings) == [("T1", "T3"), ("T2", "T4")]


def test_rematch_from_standings_is_avoided():
    records = _field(4)
    records[0] = _record("T1", opponent_ids=("T4",))

    pairings = generate_pairings(records, [])

    assert _matchups(pairings) == [("T1", "T3"), ("T2", "T4")]


def test_unavoidable_rematch_is_flagged():
    history = PairingHistory()
    history.add_pairing("T1", "T2")

    pairings = generate_pairings(_field(2), [], previous_pairings=history)

    assert pairings[0].quality == pytest.approx(70.0)
    assert pairings[0].flags == (FLAG_REMATCH,)


def test_judges_are_allocated_without_conflicts():
    records = [
        _record("T1", institution="X"),
        _record("T2"),
        _record("T3"),
        _record("T4"),
    ]
    judges = [Judge("J1", institution="X"), Judge("J2")]

    pairings = generate_pairings(records, judges)

    assert [(p.aff_id, p.judge_id) for p in pairings] == [
        ("T1", "J2"),
        ("T2", "J1"),
    ]


def test_judge_team_and_institution_conflicts():
    records = [_record("T1", institution="X"), _record("T2")]
    by_team = PairingConstraints(judge_team_conflicts={"J1": ["T2"]})
    by_institution = PairingConstraints(judge_institution_conflicts={"J1": ["X"]})
    judges = [Judge("J1"), Judge("J2")]

    assert generate_pairings(records, judges, by_team)[0].judge_id == "J2"
    assert generate_pairings(records, judges, by_institution)[0].judge_id == "J2"


def test_no_free_judge_leaves_pairing_unjudged(caplog):
    records = [_record("T1", institution="X"), _record("T2")]

    with caplog.at_level(logging.WARNING, logger="debatetab"):
        pairings = generate_pairings(records, [Judge("J1", institution="X")])

    assert pairings[0].judge_id is None
    assert "No unconflicted judge" in caplog.text


def test_judge_is_used_at_most_once_per_round():
    records = _field(8)
    judges = [Judge(f"J{n}") for n in range(1, 4)]

    pairings = generate_pairings(records, judges)

    assigned = [p.judge_id for p in pairings]
    assert assigned == ["J1", "J2", "J3", None]


def test_rooms_are_assigned_in_draw_order():
    options = PairingOptions(rooms=["R1", "R2"])

    pairings = generate_pairings(_field(6), [], options=options)

    assert [p.room for p in pairings] == ["R1", "R2", None]


def test_balance_mode_swaps_sides():
    records = [
        _record("T1", aff_rounds=2),
        _record("T2", aff_rounds=1, neg_rounds=1),
        _record("T3", aff_rounds=1, neg_rounds=1),
        _record("T4", neg_rounds=2),
    ]
    options = PairingOptions(side_method="balance")

    pairings = generate_pairings(records, [], options=options)

    assert _matchups(pairings) == [("T4", "T1"), ("T2", "T3")]
    assert FLAG_SIDES_SWAPPED in pairings[0].flags
    assert FLAG_SIDES_SWAPPED not in pairings[1].flags


def test_fixed_mode_keeps_fold_sides():
    records = [_record("T1", aff_rounds=2), _record("T2", neg_rounds=2)]

    pairings = generate_pairings(records, [])

    assert _matchups(pairings) == [("T1", "T2")]


def test_unknown_method_is_rejected():
    with pytest.raises(InvalidPairingException):
        generate_pairings(_field(2), [], options=PairingOptions(method="swiss"))


def test_unknown_side_method_is_rejected():
    with pytest.raises(ValueError):
        generate_pairings(_field(2), [], options=PairingOptions(side_method="coin"))


def test_every_pairing_is_valid_for_large_mixed_field():
    rng = random.Random(11)
    records = [
        _record(
            f"T{n}",
            institution=f"I{n % 4}",
            wins=rng.randint(0, 3),
            speaks=rng.uniform(200, 240),
        )
        for n in range(1, 26)
    ]
    conflicts = PairingConstraints(team_conflicts=[("T1", "T2"), ("T3", "T5")])

    for method in ("high_high", "high_low", "random"):
        pairings = generate_pairings(
            records,
            [],
            constraints=conflicts,
            options=PairingOptions(method=method),
            rng=random.Random(1),
        )
        _assert_valid_draw(records, pairings)
        wins = {r.team_id: r.wins for r in records}
        for pairing in pairings:
            assert wins[pairing.aff_id] == wins[pairing.neg_id]
            assert not conflicts.teams_conflict(pairing.aff_id, pairing.neg_id)


def test_evaluate_pairing_quality():
    history = PairingHistory()
    constraints = PairingConstraints(team_conflicts=[("A", "C")])
    a = _record("A", wins=2)
    b = _record("B", wins=0)
    c = _record("C", wins=2)

    assert evaluate_pairing_quality(a, b, constraints, history)[0] == pytest.approx(
        80.0
    )
    assert evaluate_pairing_quality(a, a, constraints, history)[0] == HARD_CONFLICT
    assert evaluate_pairing_quality(a, c, constraints, history)[0] == HARD_CONFLICT


def test_build_history_merges_sources():
    records = [_record("A", opponent_ids=("B",)), _record("B", opponent_ids=("A",))]
    previous = [
        PairingResult("A", "C", None),
        PairingResult("D", None, "bye"),
    ]

    history = build_history(records, previous)

    assert history.have_played("B", "A")
    assert history.have_played("C", "A")
    assert len(history) == 2
