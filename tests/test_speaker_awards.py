import logging

import pytest

from debatetab import (
    BreakCategory,
    PairingResult,
    Team,
    calculate_speaker_awards,
    compute_standings,
    generate_all_breaks,
)
from debatetab.models import BreakResult
from debatetab.tabulation import SpeakerAwardsCalculator, breaking_team_ids


def _teams():
    return [
        Team("A", "Alpha", "North", speakers=("Ada", "Abe"), division="open"),
        Team("B", "Bravo", "South", speakers=("Bea",), division="novice"),
        Team("C", "Charlie", "North", division="Novice"),
    ]


def _result(aff, neg, winner, aff_speaks, neg_speaks, **kwargs):
    return PairingResult(
        aff_id=aff,
        neg_id=neg,
        winner=winner,
        aff_speaks=aff_speaks,
        neg_speaks=neg_speaks,
        **kwargs,
    )


def _results():
    return [
        _result("A", "B", "aff", [75, 74], [72, 71], round_number=1),
        _result("C", "A", "neg", [73, 70], [76, 72], round_number=2),
        _result("B", "C", "aff", [74, 73], [75, 72], round_number=3),
    ]


def _ids(speakers):
    return [s.speaker_id for s in speakers]


def test_speakers_are_ranked_by_total_points():
    awards = calculate_speaker_awards(_teams(), _results())

    assert _ids(awards.speakers) == ["A-1", "C-1", "A-2", "B-1", "B-2", "C-2"]
    assert [s.rank for s in awards.speakers] == [1, 2, 3, 4, 5, 6]
    assert awards.divisions == ["Novice", "novice", "open"]


def test_speaker_statistics():
    awards = calculate_speaker_awards(_teams(), _results())

    ada = awards.speakers[0]
    assert ada.speaker_name == "Ada"
    assert ada.team_name == "Alpha"
    assert ada.rounds_spoken == 2
    assert ada.total_points == pytest.approx(151.0)
    assert ada.average_points == pytest.approx(75.5)
    assert ada.high_point == 76
    assert ada.low_point == 75
    assert ada.adjusted_points == pytest.approx(151.0)


def test_unnamed_speakers_get_placeholder_names():
    awards = calculate_speaker_awards(_teams(), _results())

    names = {s.speaker_id: s.speaker_name for s in awards.speakers}
    assert names["B-1"] == "Bea"
    assert names["B-2"] == "Speaker 2"
    assert names["C-1"] == "Speaker 1"


def test_top_n_limits_the_award_list():
    awards = calculate_speaker_awards(_teams(), _results(), top_n=2)

    assert _ids(awards.top_speakers) == ["A-1", "A-2"]
    assert len(awards.speakers) == 6


def test_drop_count_ranks_on_adjusted_points():
    teams = [Team("X", speakers=("Xia",)), Team("Y", speakers=("Yan",))]
    results = [
        _result("X", "Y", "aff", [80], [70], round_number=1),
        _result("X", "Y", "aff", [75], [76], round_number=2),
        _result("X", "Y", "aff", [60], [72], round_number=3),
    ]

    by_total = calculate_speaker_awards(teams, results)
    by_adjusted = calculate_speaker_awards(teams, results, drop_count=1)

    assert _ids(by_total.speakers) == ["Y-1", "X-1"]
    assert _ids(by_adjusted.speakers) == ["X-1", "Y-1"]
    assert by_adjusted.speakers[0].adjusted_points == pytest.approx(75.0)
    assert by_adjusted.speakers[1].adjusted_points == pytest.approx(72.0)


def test_adjusted_points_keep_full_total_with_few_rounds():
    awards = calculate_speaker_awards(_teams(), _results(), drop_count=1)

    assert all(s.adjusted_points == s.total_points for s in awards.speakers)


def test_division_filter_is_case_insensitive():
    awards = calculate_speaker_awards(_teams(), _results(), division="NOVICE")

    assert _ids(awards.speakers) == ["C-1", "B-1", "B-2", "C-2"]
    assert awards.speakers[0].rank == 1
    assert awards.divisions == ["Novice", "novice", "open"]


def test_breaking_teams_can_be_excluded():
    teams = _teams()
    results = _results()
    standings = compute_standings(teams, results)
    breaks = generate_all_breaks(
        standings, [BreakCategory(id="open", name="Open", break_size=1)]
    )

    marked = calculate_speaker_awards(teams, results, breaks=breaks)
    excluded = calculate_speaker_awards(
        teams, results, exclude_breaking=True, breaks=breaks
    )

    assert {s.team_id for s in marked.speakers if s.is_breaking} == {"A"}
    assert "A" not in {s.team_id for s in excluded.speakers}
    assert excluded.speakers[0].rank == 1


def test_excluding_without_breaks_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="debatetab"):
        awards = calculate_speaker_awards(_teams(), _results(), exclude_breaking=True)

    assert len(awards.speakers) == 6
    assert "no break results" in caplog.text


def test_team_totals_and_missing_scores_are_not_attributed():
    results = [
        _result("A", "B", "aff", 150, [72, None], round_number=1),
        _result("A", "C", "aff", [75, "n/a"], [0, 70], round_number=2),
    ]

    awards = calculate_speaker_awards(_teams(), results)

    assert _ids(awards.speakers) == ["A-1", "B-1", "C-2"]


def test_forfeits_byes_and_undecided_results_are_skipped():
    results = [
        _result("A", "B", "aff", [75, 74], [72, 71], forfeit=True),
        _result("A", None, "bye", [75, 74], None),
        _result("B", "C", None, [74, 73], [71, 72]),
    ]

    assert calculate_speaker_awards(_teams(), results).speakers == []


def test_elimination_scores_are_opt_in():
    results = [_result("A", "B", "aff", [75, 74], [72, 71], is_elimination=True)]

    skipped = calculate_speaker_awards(_teams(), results)
    counted = calculate_speaker_awards(_teams(), results, include_elimination=True)

    assert skipped.speakers == []
    assert len(counted.speakers) == 4


def test_unknown_team_scores_are_skipped(caplog):
    results = [_result("A", "Z", "aff", [75, 74], [72, 71], round_number=4)]

    with caplog.at_level(logging.WARNING, logger="debatetab"):
        awards = calculate_speaker_awards(_teams(), results)

    assert _ids(awards.speakers) == ["A-1", "A-2"]
    assert "unknown team Z" in caplog.text


def test_breaking_team_ids_covers_every_category():
    def result(team_id, breaking, category_id):
        rank = 1 if breaking else 0
        return BreakResult(team_id, team_id, None, rank, breaking, None, category_id)

    breaks = {
        "open": [result("A", True, "open"), result("B", False, "open")],
        "novice": [result("B", True, "novice"), result("C", False, "novice")],
    }

    assert breaking_team_ids(breaks) == {"A", "B"}


def test_speaker_to_dict():
    calculator = SpeakerAwardsCalculator()
    speaker = calculator.aggregate(_teams(), _results())[0]

    data = speaker.to_dict()

    assert data["speaker_id"] == "A-1"
    assert data["division"] == "open"
    assert data["rank"] is None
    assert data["is_breaking"] is False
