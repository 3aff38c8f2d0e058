"""Break generation for elimination rounds.

Supported qualification rules:
- standard: the top N eligible teams, subject to the institution cap
- aida-1996: as standard, but only an institution's best three teams
  (by overall rank) may break
- aida-2016: aida-1996, then teams held back only by the three-team rule
  are promoted in rank order until the break is full

Categories are decided in priority order. A team that breaks in one
category is reported as ``different_break`` in every later one.
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

from collections import Counter
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from debatetab.constants import AIDA_MAX_INSTITUTION_RANK
from debatetab.exceptions import InvalidBreakCategoryException
from debatetab.models.breaks import (
    BreakCategory,
    BreakRemark,
    BreakResult,
    BreakRule,
    Liveness,
)
from debatetab.models.standings import TeamRecord
from debatetab.tabulation.tiebreak_orderer import TiebreakOrderer
from debatetab.type_hints import AssignmentMap, EligibilityMap, TiebreakerSequence
from debatetab.utils import setup_logger

logger = setup_logger(__name__)


def institution_ranks(standings: Sequence[TeamRecord]) -> Dict[str, int]:
    """Rank of each team within its own institution (1 = institution's best).

    Teams without an institution are each ranked first.
    """
    seen: Counter = Counter()
    ranks = {}
    for record in standings:
        if not record.institution:
            ranks[record.team_id] = 1
            continue
        seen[record.institution] += 1
        ranks[record.team_id] = seen[record.institution]
    return ranks


class BreakGenerator:
    """Decides which teams break in each category.

    Args:
        tiebreakers: The sequence the standings were ordered by. When given,
            the first team left out only by a coin flip is remarked
            ``coin_flip``.
    """

    def __init__(self, tiebreakers: Optional[TiebreakerSequence] = None):
        self.orderer = TiebreakOrderer(tiebreakers) if tiebreakers else None

    def generate_break(
        self,
        standings: Sequence[TeamRecord],
        category: BreakCategory,
        eligibility: Optional[EligibilityMap] = None,
        other_breaks: Optional[AssignmentMap] = None,
    ) -> List[BreakResult]:
        """Break one category.

        Args:
            standings: Team records in final ranked order
            category: The category to break
            eligibility: team id -> eligible; only an explicit False excludes
            other_breaks: team id -> category the team already breaks in

        Returns:
            One BreakResult per team, in standings order

        Raises:
            InvalidBreakCategoryException: If the break size is not positive
        """
        category.validate()
        eligibility = eligibility or {}
        other_breaks = other_breaks or {}

        if category.rule == BreakRule.STANDARD:
            results, rank_capped = self._select(
                standings, category, eligibility, other_breaks
            )
        else:
            results, rank_capped = self._select(
                standings,
                category,
                eligibility,
                other_breaks,
                ranks_within_institution=institution_ranks(standings),
            )
            if category.rule == BreakRule.AIDA_2016:
                results = self._promote(results, rank_capped, category)

        if self.orderer is not None and self.orderer.uses_coin_flip:
            results = self._mark_coin_flip(standings, results)

        logger.info(
            "Category %s (%s): %s of %s slots filled",
            category.id,
            category.rule.value,
            sum(1 for r in results if r.is_breaking),
            category.break_size,
        )
        return results

    def generate_all_breaks(
        self,
        standings: Sequence[TeamRecord],
        categories: Iterable[BreakCategory],
        eligibility_maps: Optional[Mapping[str, EligibilityMap]] = None,
    ) -> Dict[str, List[BreakResult]]:
        """Break every category, highest priority first.

        Categories are sorted by priority (lower first); at equal priority
        the general category goes first, then input order. All categories
        are validated before any is processed.

        Returns:
            category id -> results, in processing order

        Raises:
            InvalidBreakCategoryException: On a non-positive break size or a
                duplicate category id
        """
        categories = list(categories)
        seen: Set[str] = set()
        for category in categories:
            category.validate()
            if category.id in seen:
                raise InvalidBreakCategoryException(
                    f"Duplicate break category id '{category.id}'"
                )
            seen.add(category.id)

        eligibility_maps = eligibility_maps or {}
        ordered = sorted(categories, key=lambda c: (c.priority, not c.is_general))

        assigned: AssignmentMap = {}
        all_results: Dict[str, List[BreakResult]] = {}
        for category in ordered:
            results = self.generate_break(
                standings, category, eligibility_maps.get(category.id), assigned
            )
            all_results[category.id] = results
            assigned = {
                **assigned,
                **{r.team_id: category.id for r in results if r.is_breaking},
            }

        return all_results

    # ========== Selection ==========

    def _select(
        self,
        standings: Sequence[TeamRecord],
        category: BreakCategory,
        eligibility: EligibilityMap,
        other_breaks: AssignmentMap,
        ranks_within_institution: Optional[Dict[str, int]] = None,
    ) -> Tuple[List[BreakResult], Set[str]]:
        """Walk the standings and fill the break.

        Returns the results and the ids of teams capped by institution rank.
        """
        results = []
        rank_capped: Set[str] = set()
        breaking_per_institution: Counter = Counter()
        filled = 0

        for record in standings:
            team_id = record.team_id
            institution = record.institution
            remark = None
            break_rank = 0

            if eligibility.get(team_id, True) is False:
                remark = BreakRemark.INELIGIBLE
            elif other_breaks.get(team_id, category.id) != category.id:
                remark = BreakRemark.DIFFERENT_BREAK
            elif (
                ranks_within_institution is not None
                and ranks_within_institution[team_id] > AIDA_MAX_INSTITUTION_RANK
            ):
                remark = BreakRemark.CAPPED
                rank_capped.add(team_id)
            elif self._at_institution_cap(
                category, institution, breaking_per_institution
            ):
                remark = BreakRemark.CAPPED
            elif filled < category.break_size:
                filled += 1
                break_rank = filled
                if institution:
                    breaking_per_institution[institution] += 1

            results.append(
                BreakResult(
                    team_id=team_id,
                    team_name=record.team.display_name,
                    institution=institution,
                    break_rank=break_rank,
                    is_breaking=break_rank > 0,
                    remark=remark,
                    category_id=category.id,
                )
            )

        return results, rank_capped

    @staticmethod
    def _at_institution_cap(
        category: BreakCategory, institution: Optional[str], counts: Counter
    ) -> bool:
        if category.institution_cap <= 0 or not institution:
            return False
        return counts[institution] >= category.institution_cap

    def _promote(
        self,
        results: List[BreakResult],
        rank_capped: Set[str],
        category: BreakCategory,
    ) -> List[BreakResult]:
        """Fill empty slots with teams held back only by institution rank."""
        filled = sum(1 for r in results if r.is_breaking)
        if filled >= category.break_size:
            return results

        counts: Counter = Counter(
            r.institution for r in results if r.is_breaking and r.institution
        )
        promoted = list(results)
        for index, result in enumerate(results):
            if filled >= category.break_size:
                break
            if result.team_id not in rank_capped:
                continue
            if self._at_institution_cap(category, result.institution, counts):
                continue

            filled += 1
            if result.institution:
                counts[result.institution] += 1
            promoted[index] = replace(
                result,
                is_breaking=True,
                break_rank=filled,
                remark=BreakRemark.PROMOTED,
            )
            logger.debug(
                "Promoted %s into %s at rank %s", result.team_id, category.id, filled
            )

        return promoted

    def _mark_coin_flip(
        self, standings: Sequence[TeamRecord], results: List[BreakResult]
    ) -> List[BreakResult]:
        """Remark the first team that missed out to the last breaking team by chance."""
        last_index = None
        for index, result in enumerate(results):
            if result.is_breaking and result.remark is None:
                last_index = index
        if last_index is None:
            return results

        last_record = standings[last_index]
        for index in range(last_index + 1, len(results)):
            result = results[index]
            if result.is_breaking or result.remark is not None:
                continue
            if self.orderer.compare(last_record, standings[index], skip_random=True)[0]:
                break
            marked = list(results)
            marked[index] = replace(result, remark=BreakRemark.COIN_FLIP)
            return marked
        return results


def calculate_liveness(
    team_id: str,
    standings: Sequence[TeamRecord],
    break_size: int,
    rounds_remaining: int,
) -> Optional[Liveness]:
    """Estimate whether a team can still break. Advisory only.

    ``standings`` must be ranked; a team's position in it is its rank.

    - dead: at least ``break_size`` other teams already have more wins than
      this team can reach
    - safe: the team sits inside the break and is within ``rounds_remaining``
      wins of the best record among the top ``break_size``
    - live: anything in between

    Returns None if ``team_id`` is not in ``standings``.
    """
    if break_size <= 0:
        raise InvalidBreakCategoryException(
            f"Break size must be positive, got {break_size}"
        )

    rank, team = next(
        ((p, r) for p, r in enumerate(standings, start=1) if r.team_id == team_id),
        (None, None),
    )
    if team is None:
        return None

    best_reachable = team.wins + rounds_remaining
    out_of_reach = sum(
        1 for r in standings if r.team_id != team_id and r.wins > best_reachable
    )
    if out_of_reach >= break_size:
        return Liveness.DEAD

    threshold = max(r.wins for r in standings[:break_size]) - rounds_remaining
    if team.wins >= threshold and rank <= break_size:
        return Liveness.SAFE

    return Liveness.LIVE


def calculate_all_liveness(
    standings: Sequence[TeamRecord], break_size: int, rounds_remaining: int
) -> Dict[str, Liveness]:
    """Liveness of every team in ``standings``, keyed by team id."""
    return {
        record.team_id: calculate_liveness(
            record.team_id, standings, break_size, rounds_remaining
        )
        for record in standings
    }


def generate_break(
    standings: Sequence[TeamRecord],
    category: BreakCategory,
    eligibility: Optional[EligibilityMap] = None,
    other_breaks: Optional[AssignmentMap] = None,
    tiebreakers: Optional[TiebreakerSequence] = None,
) -> List[BreakResult]:
    """Break a single category. See :meth:`BreakGenerator.generate_break`."""
    return BreakGenerator(tiebreakers).generate_break(
        standings, category, eligibility, other_breaks
    )


def generate_all_breaks(
    standings: Sequence[TeamRecord],
    categories: Iterable[BreakCategory],
    eligibility_maps: Optional[Mapping[str, EligibilityMap]] = None,
    tiebreakers: Optional[TiebreakerSequence] = None,
) -> Dict[str, List[BreakResult]]:
    """Break every category in priority order with cross-category exclusivity."""
    return BreakGenerator(tiebreakers).generate_all_breaks(
        standings, categories, eligibility_maps
    )
