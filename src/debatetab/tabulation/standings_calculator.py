"""Standings calculation for debate tournaments.

This module turns decided round results into one immutable
:class:`~debatetab.models.TeamRecord` per registered team.
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

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from debatetab.constants import (
    DEFAULT_DROP_COUNT,
    DOUBLE_ADJUSTED_DROP_COUNT,
    SIDE_AFF,
)
from debatetab.models.results import PairingResult
from debatetab.models.standings import TeamRecord
from debatetab.models.team import Team
from debatetab.utils import parse_score, setup_logger

logger = setup_logger(__name__)


@dataclass
class _Tally:
    """Running totals for one team while results are folded in."""

    team: Team
    wins: int = 0
    losses: int = 0
    byes: int = 0
    forfeits_given: int = 0
    forfeits_received: int = 0
    aff_rounds: int = 0
    neg_rounds: int = 0
    rounds_completed: int = 0
    speaks_list: List[float] = field(default_factory=list)
    ranks_list: List[float] = field(default_factory=list)
    opponent_ids: List[str] = field(default_factory=list)
    head_to_head: Dict[str, int] = field(default_factory=dict)


def adjusted_total(values: Sequence[float], drop_count: int) -> float:
    """Sum ``values`` after dropping the ``drop_count`` highest and lowest.

    Nothing is dropped unless at least ``2 * drop_count + 1`` values exist,
    so a team with few scored rounds keeps its full total.
    """
    if drop_count <= 0 or len(values) < 2 * drop_count + 1:
        return float(sum(values))
    ordered = sorted(values)
    return float(sum(ordered[drop_count : len(ordered) - drop_count]))


class StandingsCalculator:
    """Calculates team standings from decided pairing results.

    Standings are recomputed from scratch on every call: the calculator
    keeps no state between calls, so the same input always produces equal
    records.

    Args:
        drop_speaks: Rounds dropped at each end for adjusted speaks
        drop_ranks: Rounds dropped at each end for adjusted ranks
        include_elimination: Count elimination-round results
    """

    def __init__(
        self,
        drop_speaks: int = DEFAULT_DROP_COUNT,
        drop_ranks: int = DEFAULT_DROP_COUNT,
        include_elimination: bool = False,
    ):
        self.drop_speaks = drop_speaks
        self.drop_ranks = drop_ranks
        self.include_elimination = include_elimination

    def compute(
        self, teams: Iterable[Team], decided_pairings: Iterable[PairingResult]
    ) -> List[TeamRecord]:
        """Compute one record per team, in roster order.

        Args:
            teams: Registered teams
            decided_pairings: Results to count; undecided ones are skipped

        Returns:
            List of TeamRecord in the same order as ``teams``
        """
        tallies: Dict[str, _Tally] = {}
        for team in teams:
            if team.id in tallies:
                logger.warning("Duplicate team id %s in roster, ignoring", team.id)
                continue
            tallies[team.id] = _Tally(team=team)

        counted = 0
        for pairing in decided_pairings:
            if self._record_result(pairing, tallies):
                counted += 1

        records = [self._freeze(tally, tallies) for tally in tallies.values()]
        logger.debug(
            "Computed standings for %s teams from %s results",
            len(records),
            counted,
        )
        return records

    def _record_result(
        self, pairing: PairingResult, tallies: Dict[str, _Tally]
    ) -> bool:
        """Fold one result into the tallies. Returns True if it was counted."""
        if not pairing.is_decided:
            return False

        if pairing.is_elimination and not self.include_elimination:
            return False

        if pairing.is_bye:
            tally = tallies.get(pairing.aff_id)
            if tally is None:
                logger.warning(
                    "Skipping bye for unknown team %s (round %s)",
                    pairing.aff_id,
                    pairing.round_number,
                )
                return False
            tally.wins += 1
            tally.byes += 1
            tally.rounds_completed += 1
            return True

        aff = tallies.get(pairing.aff_id)
        neg = tallies.get(pairing.neg_id) if pairing.neg_id is not None else None
        if aff is None or neg is None:
            logger.warning(
                "Skipping result %s vs %s (round %s): unknown team",
                pairing.aff_id,
                pairing.neg_id,
                pairing.round_number,
            )
            return False

        if aff is neg:
            logger.warning(
                "Skipping result pairing team %s with itself (round %s)",
                pairing.aff_id,
                pairing.round_number,
            )
            return False

        aff.rounds_completed += 1
        neg.rounds_completed += 1
        aff.aff_rounds += 1
        neg.neg_rounds += 1
        aff.opponent_ids.append(neg.team.id)
        neg.opponent_ids.append(aff.team.id)

        winner, loser = (aff, neg) if pairing.winner == SIDE_AFF else (neg, aff)
        winner.wins += 1
        loser.losses += 1
        winner.head_to_head[loser.team.id] = (
            winner.head_to_head.get(loser.team.id, 0) + 1
        )

        if pairing.forfeit:
            loser.forfeits_given += 1
            winner.forfeits_received += 1
            return True

        for tally, speaks, ranks in (
            (aff, pairing.aff_speaks, pairing.aff_ranks),
            (neg, pairing.neg_speaks, pairing.neg_ranks),
        ):
            points = parse_score(speaks)
            if points > 0:
                tally.speaks_list.append(points)
            rank_total = parse_score(ranks)
            if rank_total > 0:
                tally.ranks_list.append(rank_total)

        return True

    def _freeze(self, tally: _Tally, tallies: Dict[str, _Tally]) -> TeamRecord:
        opponents = [tallies[o] for o in tally.opponent_ids]
        opp_wins = sum(o.wins for o in opponents)
        opp_rounds = sum(o.rounds_completed for o in opponents)

        return TeamRecord(
            team=tally.team,
            wins=tally.wins,
            losses=tally.losses,
            speaks=float(sum(tally.speaks_list)),
            opp_strength=opp_wins,
            opp_win_pct=opp_wins / opp_rounds if opp_rounds else 0.0,
            ranks=float(sum(tally.ranks_list)),
            adjusted_speaks=adjusted_total(tally.speaks_list, self.drop_speaks),
            adjusted_ranks=adjusted_total(tally.ranks_list, self.drop_ranks),
            double_adjusted_speaks=adjusted_total(
                tally.speaks_list, DOUBLE_ADJUSTED_DROP_COUNT
            ),
            double_adjusted_ranks=adjusted_total(
                tally.ranks_list, DOUBLE_ADJUSTED_DROP_COUNT
            ),
            byes=tally.byes,
            forfeits_given=tally.forfeits_given,
            forfeits_received=tally.forfeits_received,
            aff_rounds=tally.aff_rounds,
            neg_rounds=tally.neg_rounds,
            rounds_completed=tally.rounds_completed,
            opponent_ids=tuple(tally.opponent_ids),
            head_to_head=dict(tally.head_to_head),
        )


def compute_standings(
    teams: Iterable[Team],
    decided_pairings: Iterable[PairingResult],
    drop_speaks: int = DEFAULT_DROP_COUNT,
    drop_ranks: int = DEFAULT_DROP_COUNT,
    include_elimination: bool = False,
) -> List[TeamRecord]:
    """Compute standings for ``teams`` from ``decided_pairings``.

    Every registered team gets a record, including teams with no results.
    Results naming an unknown team are skipped and logged.
    """
    calculator = StandingsCalculator(
        drop_speaks=drop_speaks,
        drop_ranks=drop_ranks,
        include_elimination=include_elimination,
    )
    return calculator.compute(teams, decided_pairings)
