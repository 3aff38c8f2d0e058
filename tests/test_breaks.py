import pytest

from debatetab import (
    BreakCategory,
    BreakRemark,
    BreakRule,
    Team,
    TeamRecord,
    generate_all_breaks,
    generate_break,
)
from debatetab.breaks import institution_ranks
from debatetab.exceptions import InvalidBreakCategoryException


def _standings(*entries):
    """Build ranked records from (team id, institution) pairs, best first."""
    records = []
    wins = len(entries)
    for team_id, institution in entries:
        team = Team(id=team_id, name=f"Team {team_id}", institution=institution)
        records.append(TeamRecord(team=team, wins=wins))
        wins -= 1
    return records


def _breaking(results):
    return [r.team_id for r in results if r.is_breaking]


def _remarks(results):
    return {r.team_id: r.remark for r in results if r.remark is not None}


def test_standard_break_takes_top_teams():
    standings = _standings(*[(f"T{n}", None) for n in range(1, 7)])
    category = BreakCategory(id="open", name="Open", break_size=4)

    results = generate_break(standings, category)

    assert _breaking(results) == ["T1", "T2", "T3", "T4"]
    assert [r.break_rank for r in results] == [1, 2, 3, 4, 0, 0]
    assert _remarks(results) == {}
    assert all(r.category_id == "open" for r in results)


def test_break_smaller_than_field_fills_every_team():
    standings = _standings(("T1", None), ("T2", None))
    category = BreakCategory(id="open", name="Open", break_size=4)

    assert _breaking(generate_break(standings, category)) == ["T1", "T2"]


def test_ineligible_teams_are_skipped():
    standings = _standings(("T1", None), ("T2", None), ("T3", None))
    category = BreakCategory(id="novice", name="Novice", break_size=2)

    results = generate_break(standings, category, eligibility={"T1": False})

    assert _breaking(results) == ["T2", "T3"]
    assert _remarks(results) == {"T1": BreakRemark.INELIGIBLE}


def test_teams_breaking_elsewhere_are_skipped():
    standings = _standings(("T1", None), ("T2", None), ("T3", None))
    category = BreakCategory(id="novice", name="Novice", break_size=1)

    results = generate_break(standings, category, other_breaks={"T1": "open"})

    assert _breaking(results) == ["T2"]
    assert _remarks(results) == {"T1": BreakRemark.DIFFERENT_BREAK}


def test_institution_cap_in_standard_break():
    standings = _standings(("X1", "X"), ("X2", "X"), ("Y1", "Y"), ("Z1", "Z"))
    category = BreakCategory(id="open", name="Open", break_size=2, institution_cap=1)

    results = generate_break(standings, category)

    assert _breaking(results) == ["X1", "Y1"]
    assert _remarks(results) == {"X2": BreakRemark.CAPPED}
    assert [r.break_rank for r in results if r.is_breaking] == [1, 2]


def test_aida_1996_caps_fourth_team_of_an_institution():
    standings = _standings(
        ("X1", "X"), ("X2", "X"), ("X3", "X"), ("X4", "X"), ("Y1", "Y")
    )
    category = BreakCategory(
        id="open", name="Open", break_size=4, rule=BreakRule.AIDA_1996
    )

    results = generate_break(standings, category)

    assert _breaking(results) == ["X1", "X2", "X3", "Y1"]
    assert _remarks(results) == {"X4": BreakRemark.CAPPED}


def test_aida_1996_caps_fourth_team_below_other_institution():
    standings = _standings(
        ("X1", "X"), ("X2", "X"), ("X3", "X"), ("Y1", "Y"), ("X4", "X")
    )
    category = BreakCategory(
        id="open", name="Open", break_size=4, rule=BreakRule.AIDA_1996
    )

    results = generate_break(standings, category)

    assert _breaking(results) == ["X1", "X2", "X3", "Y1"]
    assert _remarks(results) == {"X4": BreakRemark.CAPPED}


def test_aida_1996_leaves_slots_empty():
    standings = _standings(
        ("X1", "X"), ("X2", "X"), ("X3", "X"), ("X4", "X"), ("Y1", "Y")
    )
    category = BreakCategory(id="open", name="Open", break_size=5, rule="aida-1996")

    results = generate_break(standings, category)

    assert len(_breaking(results)) == 4


def test_aida_2016_promotes_capped_teams_into_empty_slots():
    standings = _standings(
        ("X1", "X"),
        ("X2", "X"),
        ("X3", "X"),
        ("X4", "X"),
        ("X5", "X"),
        ("Y1", "Y"),
        ("Y2", "Y"),
    )
    category = BreakCategory(
        id="open", name="Open", break_size=6, rule=BreakRule.AIDA_2016
    )

    results = {r.team_id: r for r in generate_break(standings, category)}

    assert sorted(t for t, r in results.items() if r.is_breaking) == [
        "X1",
        "X2",
        "X3",
        "X4",
        "Y1",
        "Y2",
    ]
    assert results["X4"].remark == BreakRemark.PROMOTED
    assert results["X4"].break_rank == 6
    assert results["X5"].remark == BreakRemark.CAPPED
    assert not results["X5"].is_breaking


def test_aida_2016_promotion_respects_institution_cap():
    standings = _standings(
        ("X1", "X"), ("X2", "X"), ("X3", "X"), ("X4", "X"), ("Y1", "Y")
    )
    category = BreakCategory(
        id="open",
        name="Open",
        break_size=5,
        rule=BreakRule.AIDA_2016,
        institution_cap=3,
    )

    results = generate_break(standings, category)

    assert _breaking(results) == ["X1", "X2", "X3", "Y1"]
    assert _remarks(results) == {"X4": BreakRemark.CAPPED}


def test_teams_without_institution_are_never_capped():
    standings = _standings(*[(f"T{n}", None) for n in range(1, 6)])
    category = BreakCategory(
        id="open",
        name="Open",
        break_size=5,
        rule=BreakRule.AIDA_1996,
        institution_cap=1,
    )

    assert len(_breaking(generate_break(standings, category))) == 5


def test_institution_ranks():
    standings = _standings(("X1", "X"), ("N1", None), ("X2", "X"), ("N2", None))

    assert institution_ranks(standings) == {"X1": 1, "N1": 1, "X2": 2, "N2": 1}


def test_coin_flip_loser_is_remarked():
    records = [
        TeamRecord(team=Team("T1"), wins=3, speaks=120.0),
        TeamRecord(team=Team("T2"), wins=2, speaks=100.0),
        TeamRecord(team=Team("T3"), wins=2, speaks=100.0),
        TeamRecord(team=Team("T4"), wins=1, speaks=90.0),
    ]
    category = BreakCategory(id="open", name="Open", break_size=2)

    with_flip = generate_break(
        records, category, tiebreakers=["wins", "speaks", "coin_flip"]
    )
    without_flip = generate_break(records, category)

    assert _breaking(with_flip) == ["T1", "T2"]
    assert _remarks(with_flip) == {"T3": BreakRemark.COIN_FLIP}
    assert _remarks(without_flip) == {}


def test_coin_flip_remark_depends_on_tiebreakers():
    records = [
        TeamRecord(team=Team("T1"), wins=2, speaks=100.0),
        TeamRecord(team=Team("T2"), wins=2, speaks=99.0),
    ]
    category = BreakCategory(id="open", name="Open", break_size=1)

    results = generate_break(records, category, tiebreakers=["wins", "coin_flip"])
    assert _remarks(results) == {"T2": BreakRemark.COIN_FLIP}

    results = generate_break(
        records, category, tiebreakers=["wins", "speaks", "coin_flip"]
    )
    assert _remarks(results) == {}


def test_non_positive_break_size_is_rejected():
    standings = _standings(("T1", None))

    with pytest.raises(InvalidBreakCategoryException):
        generate_break(standings, BreakCategory(id="open", name="Open", break_size=0))
    with pytest.raises(ValueError):
        generate_break(standings, BreakCategory(id="open", name="Open", break_size=-2))


def test_unknown_rule_is_rejected():
    with pytest.raises(InvalidBreakCategoryException):
        BreakCategory(id="open", name="Open", break_size=4, rule="wsdc")


def test_all_breaks_are_mutually_exclusive():
    standings = _standings(*[(f"T{n}", None) for n in range(1, 7)])
    categories = [
        BreakCategory(id="novice", name="Novice", break_size=2, priority=1),
        BreakCategory(id="open", name="Open", break_size=2, is_general=True),
    ]
    eligibility = {"novice": {"T3": False}}

    breaks = generate_all_breaks(standings, categories, eligibility)

    assert list(breaks) == ["open", "novice"]
    assert _breaking(breaks["open"]) == ["T1", "T2"]
    assert _breaking(breaks["novice"]) == ["T4", "T5"]
    assert _remarks(breaks["novice"]) == {
        "T1": BreakRemark.DIFFERENT_BREAK,
        "T2": BreakRemark.DIFFERENT_BREAK,
        "T3": BreakRemark.INELIGIBLE,
    }


def test_general_category_goes_first_at_equal_priority():
    standings = _standings(("T1", None), ("T2", None), ("T3", None))
    categories = [
        BreakCategory(id="esl", name="ESL", break_size=1),
        BreakCategory(id="open", name="Open", break_size=1, is_general=True),
    ]

    breaks = generate_all_breaks(standings, categories)

    assert list(breaks) == ["open", "esl"]
    assert _breaking(breaks["open"]) == ["T1"]
    assert _breaking(breaks["esl"]) == ["T2"]


def test_duplicate_category_ids_are_rejected():
    categories = [
        BreakCategory(id="open", name="Open", break_size=2),
        BreakCategory(id="open", name="Open again", break_size=2),
    ]

    with pytest.raises(InvalidBreakCategoryException, match="Duplicate"):
        generate_all_breaks(_standings(("T1", None)), categories)


def test_invalid_category_fails_before_any_break():
    categories = [
        BreakCategory(id="open", name="Open", break_size=2),
        BreakCategory(id="novice", name="Novice", break_size=0, priority=1),
    ]

    with pytest.raises(InvalidBreakCategoryException, match="novice"):
        generate_all_breaks(_standings(("T1", None)), categories)


def test_breaks_never_exceed_size():
    standings = _standings(*[(f"T{n}", f"I{n % 3}") for n in range(1, 21)])
    categories = [
        BreakCategory(
            id="open",
            name="Open",
            break_size=8,
            rule=BreakRule.AIDA_2016,
            institution_cap=3,
            is_general=True,
        ),
        BreakCategory(id="esl", name="ESL", break_size=4, priority=1),
    ]

    breaks = generate_all_breaks(standings, categories)

    seen = set()
    for category in categories:
        breaking = _breaking(breaks[category.id])
        assert len(breaking) <= category.break_size
        assert seen.isdisjoint(breaking)
        seen.update(breaking)
