"""Individual speaker awards.

Speaker points are only attributable to a speaker when a result records
them per speaker (a list in speaking order). A single team total still
counts towards team standings but is ignored here.
"""

# Debate Tab
# Copyright (C) 2025  Debate Tab developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from debatetab.constants import DEFAULT_DROP_COUNT, DEFAULT_SPEAKER_AWARDS_TOP_N
from debatetab.models.breaks import BreakResult
from debatetab.models.results import PairingResult
from debatetab.models.speakers import SpeakerAwards, SpeakerStats
from debatetab.models.team import Team
from debatetab.tabulation.standings_calculator import adjusted_total
from debatetab.utils import parse_score, setup_logger

logger = setup_logger(__name__)


def breaking_team_ids(breaks: Mapping[str, Sequence[BreakResult]]) -> Set[str]:
    """Ids of every team breaking in any category."""
    return {
        result.team_id
        for results in breaks.values()
        for result in results
        if result.is_breaking
    }


class SpeakerAwardsCalculator:
    """Aggregates per-speaker points and ranks the speakers.

    Args:
        drop_count: Best and worst scores dropped from each speaker's
            adjusted total. When positive, speakers are ranked on the
            adjusted total instead of the raw total.
        include_elimination: Count elimination-round scores
    """

    def __init__(self, drop_count: int = 0, include_elimination: bool = False):
        self.drop_count = drop_count
        self.include_elimination = include_elimination

    def aggregate(
        self,
        teams: Iterable[Team],
        results: Iterable[PairingResult],
        breaking: Optional[Set[str]] = None,
    ) -> List[SpeakerStats]:
        """Tally every speaker with at least one recorded score.

        Speakers come out in roster order, then speaking order.
        """
        breaking = breaking or set()
        roster: Dict[str, Team] = {}
        for team in teams:
            roster.setdefault(team.id, team)
        ordering = {team_id: index for index, team_id in enumerate(roster)}

        points: Dict[str, List[float]] = {}
        sort_keys: Dict[str, Tuple[int, int]] = {}
        stats: Dict[str, SpeakerStats] = {}

        for result in results:
            if not result.is_decided or result.is_bye or result.forfeit:
                continue
            if result.is_elimination and not self.include_elimination:
                continue

            for team_id, scores in (
                (result.aff_id, result.aff_speaks),
                (result.neg_id, result.neg_speaks),
            ):
                team = roster.get(team_id)
                if team is None:
                    logger.warning(
                        "Skipping speaker points for unknown team %s (round %s)",
                        team_id,
                        result.round_number,
                    )
                    continue
                if not isinstance(scores, (list, tuple)):
                    continue

                for position, raw in enumerate(scores):
                    score = parse_score(raw)
                    if score <= 0:
                        continue
                    speaker_id = f"{team.id}-{position + 1}"
                    if speaker_id not in stats:
                        stats[speaker_id] = SpeakerStats(
                            speaker_id=speaker_id,
                            speaker_name=team.speaker_name(position),
                            team_id=team.id,
                            team_name=team.display_name,
                            institution=team.institution,
                            division=team.division,
                            is_breaking=team.id in breaking,
                        )
                        points[speaker_id] = []
                        sort_keys[speaker_id] = (ordering[team.id], position)
                    points[speaker_id].append(score)

        speaker_ids = sorted(stats, key=sort_keys.__getitem__)
        return [self._finish(stats[s], points[s]) for s in speaker_ids]

    def _finish(self, speaker: SpeakerStats, scores: List[float]) -> SpeakerStats:
        speaker.rounds_spoken = len(scores)
        speaker.total_points = float(sum(scores))
        speaker.average_points = speaker.total_points / len(scores)
        speaker.high_point = max(scores)
        speaker.low_point = min(scores)
        speaker.adjusted_points = adjusted_total(
            scores, self.drop_count or DEFAULT_DROP_COUNT
        )
        return speaker

    def rank(
        self,
        speakers: List[SpeakerStats],
        top_n: int = DEFAULT_SPEAKER_AWARDS_TOP_N,
        exclude_breaking: bool = False,
        division: Optional[str] = None,
    ) -> SpeakerAwards:
        """Filter, sort and number the speakers.

        Divisions are listed from every speaker, before any filtering.
        """
        divisions = sorted({s.division for s in speakers if s.division})

        ranked = list(speakers)
        if division:
            wanted = division.lower()
            ranked = [s for s in ranked if (s.division or "").lower() == wanted]
        if exclude_breaking:
            ranked = [s for s in ranked if not s.is_breaking]

        if self.drop_count > 0:
            ranked.sort(key=lambda s: s.adjusted_points, reverse=True)
        else:
            ranked.sort(key=lambda s: s.total_points, reverse=True)

        for position, speaker in enumerate(ranked, start=1):
            speaker.rank = position

        return SpeakerAwards(
            speakers=ranked,
            top_speakers=ranked[: max(top_n, 0)],
            divisions=divisions,
        )


def calculate_speaker_awards(
    teams: Iterable[Team],
    results: Iterable[PairingResult],
    top_n: int = DEFAULT_SPEAKER_AWARDS_TOP_N,
    exclude_breaking: bool = False,
    drop_count: int = 0,
    division: Optional[str] = None,
    breaks: Optional[Mapping[str, Sequence[BreakResult]]] = None,
    include_elimination: bool = False,
) -> SpeakerAwards:
    """Rank individual speakers by their points.

    Args:
        teams: Registered teams, optionally with speaker names
        results: Round results with per-speaker points
        top_n: Speakers listed in ``top_speakers``
        exclude_breaking: Leave out speakers whose team breaks
        drop_count: Best and worst scores dropped before ranking, 0 ranks on
            raw totals
        division: Only rank speakers from this division (case-insensitive)
        breaks: Break results, as returned by ``generate_all_breaks``, used
            to mark breaking speakers
        include_elimination: Count elimination-round scores

    Returns:
        SpeakerAwards with every ranked speaker and the top ``top_n``
    """
    breaking = breaking_team_ids(breaks) if breaks else set()
    if exclude_breaking and breaks is None:
        logger.warning("Excluding breaking teams, but no break results were given")

    calculator = SpeakerAwardsCalculator(
        drop_count=drop_count, include_elimination=include_elimination
    )
    speakers = calculator.aggregate(teams, results, breaking)
    awards = calculator.rank(speakers, top_n, exclude_breaking, division)
    logger.info(
        "Ranked %s speakers (%s in the top list)",
        len(awards.speakers),
        len(awards.top_speakers),
    )
    return awards
