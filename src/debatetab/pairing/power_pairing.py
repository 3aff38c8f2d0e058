"""Power-matched pairings for preliminary debate rounds.

Teams are grouped into pools of equal win count and paired within their
pool only. Inside a pool the pairing method decides which teams are
offered to each other, and a greedy pass picks the best-scoring opponent
for each team in turn.
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

import math
import random
from typing import Iterable, List, Optional, Sequence, Set, Tuple, Union

from debatetab.constants import (
    FLAG_REMATCH,
    FLAG_SAME_INSTITUTION,
    FLAG_SIDES_SWAPPED,
    PAIRING_HIGH_HIGH,
    PAIRING_HIGH_LOW,
    PAIRING_METHODS,
    PAIRING_RANDOM,
    SIDE_METHOD_BALANCE,
    SIDE_METHODS,
)
from debatetab.exceptions import InvalidPairingException
from debatetab.models.pairing import (
    GeneratedPairing,
    PairingConstraints,
    PairingHistory,
    PairingOptions,
    QualityWeights,
)
from debatetab.models.results import PairingResult
from debatetab.models.standings import TeamRecord
from debatetab.models.team import Judge
from debatetab.pairing.judges import take_first_available_judge
from debatetab.utils import setup_logger

logger = setup_logger(__name__)

# Score of a match-up that must never happen
HARD_CONFLICT = -math.inf

# (aff, neg, quality, flags) before judges and rooms are added
_Draft = Tuple[TeamRecord, TeamRecord, float, Tuple[str, ...]]

PreviousPairings = Union[PairingHistory, Iterable[PairingResult], None]


def evaluate_pairing_quality(
    team1: TeamRecord,
    team2: TeamRecord,
    constraints: PairingConstraints,
    history: PairingHistory,
    weights: Optional[QualityWeights] = None,
) -> Tuple[float, Tuple[str, ...]]:
    """Score a candidate match-up.

    Parameters
    ----------
        team1, team2: Records of the two candidate teams
        constraints: Conflicts and soft-constraint switches
        history: Match-ups already played
        weights: Penalty weights, defaults if omitted

    Returns
    -------
        (quality, flags). Quality is ``-inf`` for a hard conflict, otherwise
        the base score minus every applicable penalty. Flags name the soft
        constraints the match-up breaks.
    """
    if weights is None:
        weights = QualityWeights()

    if team1.team_id == team2.team_id:
        return HARD_CONFLICT, ()
    if constraints.teams_conflict(team1.team_id, team2.team_id):
        return HARD_CONFLICT, ()

    quality = weights.base
    flags = []

    if (
        constraints.club_protect
        and team1.institution
        and team1.institution == team2.institution
    ):
        quality -= weights.institution
        flags.append(FLAG_SAME_INSTITUTION)

    if constraints.avoid_rematches and history.have_played(
        team1.team_id, team2.team_id
    ):
        quality -= weights.rematch
        flags.append(FLAG_REMATCH)

    quality -= weights.record_gap * abs(team1.wins - team2.wins)
    quality -= weights.speaks_gap * abs(team1.speaks - team2.speaks)

    return quality, tuple(flags)


def split_into_pools(records: Sequence[TeamRecord]) -> List[List[TeamRecord]]:
    """Group records into pools of equal wins, most wins first.

    The sort is stable, so each pool keeps the caller's ranking.
    """
    ordered = sorted(records, key=lambda r: -r.wins)
    pools: List[List[TeamRecord]] = []
    for record in ordered:
        if pools and pools[-1][0].wins == record.wins:
            pools[-1].append(record)
        else:
            pools.append([record])
    return pools


def unpaired_teams(
    records: Sequence[TeamRecord], pairings: Iterable[GeneratedPairing]
) -> List[str]:
    """Team ids from ``records`` that do not appear in ``pairings`` (byes)."""
    paired: Set[str] = set()
    for pairing in pairings:
        paired.update(pairing.team_ids)
    return [r.team_id for r in records if r.team_id not in paired]


def build_history(
    records: Sequence[TeamRecord], previous_pairings: PreviousPairings = None
) -> PairingHistory:
    """Merge opponents recorded in standings with explicitly supplied history."""
    if isinstance(previous_pairings, PairingHistory):
        history = PairingHistory(
            previous_matches=set(previous_pairings.previous_matches)
        )
    else:
        history = PairingHistory.from_results(previous_pairings or [])

    for record in records:
        for opponent_id in record.opponent_ids:
            history.add_pairing(record.team_id, opponent_id)
    return history


class PairingGenerator:
    """Generates one preliminary round.

    Args:
        constraints: Hard and soft constraints
        options: Method, weights, side handling and rooms
        rng: Random source for the random method; seed it for reproducible draws
    """

    def __init__(
        self,
        constraints: Optional[PairingConstraints] = None,
        options: Optional[PairingOptions] = None,
        rng: Optional[random.Random] = None,
    ):
        if constraints is None:
            constraints = PairingConstraints()
        self.constraints = constraints
        self.options = options if options is not None else PairingOptions()
        self.random = rng if rng is not None else random.Random()

        if self.options.method not in PAIRING_METHODS:
            raise InvalidPairingException(
                f"Unknown pairing method '{self.options.method}'. "
                f"Use one of: {', '.join(PAIRING_METHODS)}"
            )
        if self.options.side_method not in SIDE_METHODS:
            raise InvalidPairingException(
                f"Unknown side method '{self.options.side_method}'"
            )

    def generate(
        self,
        records: Sequence[TeamRecord],
        judges: Sequence[Judge] = (),
        previous_pairings: PreviousPairings = None,
    ) -> List[GeneratedPairing]:
        """Draw the round.

        Args:
            records: Team records in ranked order
            judges: Judges available, in allocation priority order
            previous_pairings: Earlier match-ups, as a history or as results

        Returns:
            Pairings in draw order, strongest pool first. Teams missing from
            the result sit the round out.
        """
        history = build_history(records, previous_pairings)

        drafts: List[Tuple[_Draft, int]] = []
        for pool in split_into_pools(records):
            bracket = pool[0].wins
            for draft in self._pair_pool(pool, history):
                drafts.append((draft, bracket))

        judge_pool = list(judges)
        rooms = list(self.options.rooms)
        pairings = []
        for index, ((aff, neg, quality, flags), bracket) in enumerate(drafts):
            if self.options.side_method == SIDE_METHOD_BALANCE and (
                aff.side_imbalance > neg.side_imbalance
            ):
                aff, neg = neg, aff
                flags = flags + (FLAG_SIDES_SWAPPED,)

            judge = take_first_available_judge(
                judge_pool,
                self.constraints,
                (aff.team_id, aff.institution),
                (neg.team_id, neg.institution),
            )
            if judge is None and judges:
                logger.warning(
                    "No unconflicted judge left for %s vs %s",
                    aff.team_id,
                    neg.team_id,
                )

            pairings.append(
                GeneratedPairing(
                    aff_id=aff.team_id,
                    neg_id=neg.team_id,
                    judge_id=judge.id if judge else None,
                    room=rooms[index] if index < len(rooms) else None,
                    quality=quality,
                    bracket=bracket,
                    flags=flags,
                )
            )

        byes = unpaired_teams(records, pairings)
        logger.info(
            "Generated %s pairings (%s) with %s bye(s)",
            len(pairings),
            self.options.method,
            len(byes),
        )
        if byes:
            logger.debug("Teams without a debate: %s", ", ".join(byes))
        return pairings

    # ========== Pool pairing ==========

    def _pair_pool(
        self, pool: List[TeamRecord], history: PairingHistory
    ) -> List[_Draft]:
        if len(pool) < 2:
            return []

        used: Set[str] = set()
        method = self.options.method
        if method == PAIRING_HIGH_HIGH:
            drafts = self._greedy(pool, None, history, used)
        else:
            if method == PAIRING_RANDOM:
                pool = list(pool)
                self.random.shuffle(pool)
            half = len(pool) // 2
            top, bottom = pool[:half], pool[half:]
            if method == PAIRING_HIGH_LOW:
                bottom = list(reversed(bottom))
            drafts = self._greedy(top, bottom, history, used)

        # Teams whose offered opponents were all rejected get one more chance
        leftovers = [r for r in pool if r.team_id not in used]
        if len(leftovers) >= 2:
            drafts.extend(self._greedy(leftovers, None, history, used))

        return drafts

    def _greedy(
        self,
        seekers: List[TeamRecord],
        candidates: Optional[List[TeamRecord]],
        history: PairingHistory,
        used: Set[str],
    ) -> List[_Draft]:
        """Give each unused seeker its best-scoring unused candidate.

        With ``candidates`` None, each seeker looks at the seekers after it.
        Ties go to the earliest candidate.
        """
        drafts = []
        for position, team in enumerate(seekers):
            if team.team_id in used:
                continue

            pool = seekers[position + 1 :] if candidates is None else candidates
            best = None
            best_quality = HARD_CONFLICT
            best_flags: Tuple[str, ...] = ()
            for candidate in pool:
                if candidate.team_id in used or candidate.team_id == team.team_id:
                    continue
                quality, flags = evaluate_pairing_quality(
                    team, candidate, self.constraints, history, self.options.weights
                )
                if quality > best_quality:
                    best, best_quality, best_flags = candidate, quality, flags

            if best is None:
                logger.debug("No acceptable opponent for %s in pool", team.team_id)
                continue

            used.add(team.team_id)
            used.add(best.team_id)
            drafts.append((team, best, best_quality, best_flags))
            logger.debug(
                "Paired %s vs %s (quality %.2f)",
                team.team_id,
                best.team_id,
                best_quality,
            )
        return drafts


def generate_pairings(
    records: Sequence[TeamRecord],
    judges: Sequence[Judge],
    constraints: Optional[PairingConstraints] = None,
    options: Optional[PairingOptions] = None,
    previous_pairings: PreviousPairings = None,
    rng: Optional[random.Random] = None,
) -> List[GeneratedPairing]:
    """Generate power-matched pairings for the next preliminary round.

    Args:
        records: Team records in ranked order (see ``order_by_tiebreakers``)
        judges: Available judges in allocation order
        constraints: Conflicts and soft-constraint switches
        options: Pairing method, weights, side handling and rooms
        previous_pairings: Earlier match-ups for rematch detection
        rng: Random source used by the random method

    Returns:
        List of GeneratedPairing. No team appears twice and no team meets
        itself; teams left out of an odd pool receive a bye.
    """
    generator = PairingGenerator(constraints=constraints, options=options, rng=rng)
    return generator.generate(records, judges, previous_pairings)
