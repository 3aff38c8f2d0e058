import pytest

from debatetab import (
    BreakCategory,
    GeneratedPairing,
    Judge,
    PairingConstraints,
    SeedEntry,
    Team,
    TeamRecord,
    generate_all_breaks,
    generate_elimination_pairings,
    generate_pairings,
)
from debatetab.models import BreakResult, PairingHistory
from debatetab.validation import (
    CriterionStatus,
    ViolationType,
    create_draw_validator,
)


def _record(team_id, institution=None, wins=0):
    team = Team(id=team_id, name=f"Team {team_id}", institution=institution)
    return TeamRecord(team=team, wins=wins)


def _violated(report):
    return [v.criterion for v in report.violations]


def _warned(report):
    return [w.criterion for w in report.quality_warnings]


@pytest.fixture
def validator():
    return create_draw_validator()


def test_generated_draw_is_valid(validator):
    records = [_record(f"T{n}", institution=f"I{n % 3}") for n in range(1, 9)]
    judges = [Judge(f"J{n}") for n in range(1, 5)]
    constraints = PairingConstraints(team_conflicts=[("T1", "T8")])

    pairings = generate_pairings(records, judges, constraints)
    report = validator.validate_round_pairings(
        pairings, records=records, judges=judges, constraints=constraints
    )

    assert report.is_valid
    assert report.overall_status == CriterionStatus.COMPLIANT
    assert report.summary.startswith("Draw valid")
    assert report.compliance_percentage == pytest.approx(100.0)


def test_self_pairing_and_repeats_are_violations(validator):
    pairings = [
        GeneratedPairing("T1", "T1"),
        GeneratedPairing("T2", "T3"),
        GeneratedPairing("T3", "T4"),
    ]

    report = validator.validate_round_pairings(pairings)

    assert not report.is_valid
    assert _violated(report) == ["D1", "D2"]
    assert all(v.violation_type == ViolationType.ABSOLUTE for v in report.violations)
    assert report.violations[1].details["teams"] == ["T3"]
    assert "invalid" in report.summary


def test_not_applicable_checks_are_excluded_from_totals(validator):
    report = validator.validate_round_pairings([GeneratedPairing("T1", "T2")])

    statuses = {r.criterion: r.status for r in report.criteria_results}
    assert statuses["D3"] == CriterionStatus.NOT_APPLICABLE
    assert statuses["D4"] == CriterionStatus.NOT_APPLICABLE
    assert statuses["Q3"] == CriterionStatus.NOT_APPLICABLE
    assert report.total_criteria == 5
    assert report.compliant_count == 5


def test_conflicted_match_up_is_a_violation(validator):
    constraints = PairingConstraints(team_conflicts=[("T1", "T2")])

    report = validator.validate_round_pairings(
        [GeneratedPairing("T1", "T2")], constraints=constraints
    )

    assert _violated(report) == ["D3"]


def test_judge_reuse_and_conflicts(validator):
    records = [
        _record("T1", institution="X"),
        _record("T2"),
        _record("T3"),
        _record("T4"),
    ]
    judges = [Judge("J1", institution="X"), Judge("J2")]

    reused = [
        GeneratedPairing("T3", "T4", judge_id="J2"),
        GeneratedPairing("T1", "T2", judge_id="J2"),
    ]
    conflicted = [GeneratedPairing("T1", "T2", judge_id="J1")]

    reuse_report = validator.validate_round_pairings(
        reused, records=records, judges=judges
    )
    allowed_report = validator.validate_round_pairings(
        reused, records=records, judges=judges, allow_judge_reuse=True
    )
    conflict_report = validator.validate_round_pairings(
        conflicted, records=records, judges=judges
    )

    assert _violated(reuse_report) == ["D4"]
    assert allowed_report.is_valid
    assert _violated(conflict_report) == ["D4"]
    assert conflict_report.violations[0].details["judge"] == "J1"


def test_crossed_pools_are_a_violation(validator):
    records = [_record("T1", wins=2), _record("T2", wins=1)]

    crossed = validator.validate_round_pairings(
        [GeneratedPairing("T1", "T2", bracket=2)], records=records
    )
    elimination = validator.validate_round_pairings(
        [GeneratedPairing("T1", "T2", bracket=None)], records=records
    )

    assert _violated(crossed) == ["D5"]
    assert elimination.is_valid


def test_quality_problems_are_warnings_only(validator):
    records = [_record("T1", institution="X"), _record("T2", institution="X")]
    history = PairingHistory()
    history.add_pairing("T1", "T2")

    report = validator.validate_round_pairings(
        [GeneratedPairing("T1", "T2")],
        records=records,
        judges=[Judge("J1")],
        history=history,
    )

    assert report.is_valid
    assert _warned(report) == ["Q1", "Q2", "Q3"]
    assert report.summary == "Draw valid; 3 quality warning(s)"
    assert report.compliance_percentage == pytest.approx(4 / 7 * 100)


def test_elimination_bracket_passes_with_judge_reuse(validator):
    seeds = [SeedEntry(f"T{n}", n) for n in range(1, 9)]
    judges = [Judge("J1"), Judge("J2")]

    pairings = generate_elimination_pairings(seeds, judges)
    report = validator.validate_round_pairings(
        pairings, judges=judges, allow_judge_reuse=True
    )

    assert report.is_valid


def test_generated_breaks_are_valid(validator):
    standings = [_record(f"T{n}", institution=f"I{n % 2}") for n in range(1, 13)]
    categories = [
        BreakCategory(id="open", name="Open", break_size=4, institution_cap=2),
        BreakCategory(id="novice", name="Novice", break_size=4, priority=1),
    ]

    report = validator.validate_breaks(
        generate_all_breaks(standings, categories), categories
    )

    assert report.is_valid
    assert report.summary.startswith("Break valid")


def test_broken_breaks_are_reported(validator):
    def result(team_id, rank, category_id):
        return BreakResult(team_id, team_id, None, rank, True, None, category_id)

    category = BreakCategory(id="open", name="Open", break_size=1)
    other = BreakCategory(id="esl", name="ESL", break_size=2)
    results = {
        "open": [result("T1", 1, "open"), result("T2", 3, "open")],
        "esl": [result("T1", 1, "esl")],
    }

    report = validator.validate_breaks(results, [category, other])

    assert _violated(report) == ["B1", "B2", "B3"]
    assert report.to_dict()["overall_status"] == "VIOLATION"
