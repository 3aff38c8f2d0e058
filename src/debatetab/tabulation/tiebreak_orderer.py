"""Tiebreak ordering for debate standings.

Criteria are comparators registered by name. An ordering applies the
comparators of a tiebreaker sequence left to right; the first one that
separates two teams decides between them.

Comparators take ``(a, b, context)`` and return a negative number when
``a`` ranks ahead of ``b``, positive when ``b`` ranks ahead, and 0 when the
criterion cannot separate them.

Supported criteria:
- wins / losses
- speaks, adjusted_speaks, double_adjusted_speaks (higher is better)
- ranks, adjusted_ranks, double_adjusted_ranks (lower is better)
- opp_wins, opp_win_pct: strength of the opponents faced
- head_to_head: wins in debates between the two teams
- coin_flip: a random draw made once per ordering, always decisive
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

import functools
import random
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from debatetab.constants import (
    SCORE_PRECISION,
    TB_ADJUSTED_RANKS,
    TB_ADJUSTED_SPEAKS,
    TB_COIN_FLIP,
    TB_DOUBLE_ADJUSTED_RANKS,
    TB_DOUBLE_ADJUSTED_SPEAKS,
    TB_HEAD_TO_HEAD,
    TB_LOSSES,
    TB_OPP_WIN_PCT,
    TB_OPP_WINS,
    TB_RANKS,
    TB_SPEAKS,
    TB_WINS,
    TIEBREAK_NAMES,
)
from debatetab.exceptions import InvalidTiebreakerException
from debatetab.models.standings import TeamRecord
from debatetab.type_hints import TiebreakerSequence
from debatetab.utils import setup_logger

logger = setup_logger(__name__)


@dataclass
class TiebreakContext:
    """Per-ordering state shared by comparators.

    Attributes:
        draw: team id -> position in this ordering's coin flip draw
    """

    draw: Dict[str, int] = field(default_factory=dict)


Comparator = Callable[[TeamRecord, TeamRecord, TiebreakContext], int]

_COMPARATORS: Dict[str, Comparator] = {}

# Criteria that break ties by chance rather than by merit
RANDOM_CRITERIA = {TB_COIN_FLIP}


def register_tiebreaker(name: str) -> Callable[[Comparator], Comparator]:
    """Register a comparator under ``name``.

    Usage::

        @register_tiebreaker("fewest_forfeits")
        def _fewest_forfeits(a, b, context):
            return a.forfeits_given - b.forfeits_given
    """

    def decorator(comparator: Comparator) -> Comparator:
        if name in _COMPARATORS:
            logger.debug("Replacing tiebreaker %s", name)
        _COMPARATORS[name] = comparator
        return comparator

    return decorator


def available_tiebreakers() -> List[str]:
    return sorted(_COMPARATORS)


def tiebreaker_label(name: str) -> str:
    return TIEBREAK_NAMES.get(name, name.replace("_", " ").title())


def _prefer_higher(a_value: float, b_value: float) -> int:
    a_value = round(a_value, SCORE_PRECISION)
    b_value = round(b_value, SCORE_PRECISION)
    if a_value > b_value:
        return -1
    if a_value < b_value:
        return 1
    return 0


def _prefer_lower(a_value: float, b_value: float) -> int:
    return -_prefer_higher(a_value, b_value)


def _attribute_comparator(attribute: str, higher_is_better: bool) -> Comparator:
    prefer = _prefer_higher if higher_is_better else _prefer_lower

    def compare(a: TeamRecord, b: TeamRecord, context: TiebreakContext) -> int:
        return prefer(getattr(a, attribute), getattr(b, attribute))

    compare.__name__ = f"compare_{attribute}"
    return compare


for _name, _attribute, _higher in (
    (TB_WINS, "wins", True),
    (TB_LOSSES, "losses", False),
    (TB_SPEAKS, "speaks", True),
    (TB_RANKS, "ranks", False),
    (TB_ADJUSTED_SPEAKS, "adjusted_speaks", True),
    (TB_ADJUSTED_RANKS, "adjusted_ranks", False),
    (TB_DOUBLE_ADJUSTED_SPEAKS, "double_adjusted_speaks", True),
    (TB_DOUBLE_ADJUSTED_RANKS, "double_adjusted_ranks", False),
    (TB_OPP_WINS, "opp_strength", True),
    (TB_OPP_WIN_PCT, "opp_win_pct", True),
):
    register_tiebreaker(_name)(_attribute_comparator(_attribute, _higher))


@register_tiebreaker(TB_HEAD_TO_HEAD)
def _head_to_head(a: TeamRecord, b: TeamRecord, context: TiebreakContext) -> int:
    return _prefer_higher(a.wins_against(b.team_id), b.wins_against(a.team_id))


@register_tiebreaker(TB_COIN_FLIP)
def _coin_flip(a: TeamRecord, b: TeamRecord, context: TiebreakContext) -> int:
    return context.draw.get(a.team_id, 0) - context.draw.get(b.team_id, 0)


def validate_tiebreak_sequence(sequence: TiebreakerSequence) -> List[str]:
    """Check a tiebreaker sequence before it is used.

    Raises:
        InvalidTiebreakerException: If a name is not registered, or a random
            criterion is followed by others (they could never be reached)
    """
    if isinstance(sequence, str):
        raise InvalidTiebreakerException(
            "Tiebreaker sequence must be a list of names, not a string"
        )

    names = list(sequence)
    for position, name in enumerate(names):
        if name not in _COMPARATORS:
            raise InvalidTiebreakerException(
                f"Unknown tiebreaker '{name}'. "
                f"Available: {', '.join(available_tiebreakers())}"
            )
        if name in RANDOM_CRITERIA and position != len(names) - 1:
            raise InvalidTiebreakerException(
                f"Tiebreaker '{name}' must be the last criterion"
            )
    return names


class TiebreakOrderer:
    """Orders team records by a tiebreaker sequence.

    Args:
        tiebreaker_sequence: Criteria names, highest priority first
        rng: Source for coin flips; a fresh ``random.Random`` if omitted
    """

    def __init__(
        self,
        tiebreaker_sequence: TiebreakerSequence,
        rng: Optional[random.Random] = None,
    ):
        self.sequence = validate_tiebreak_sequence(tiebreaker_sequence)
        self.random = rng if rng is not None else random.Random()

    @property
    def uses_coin_flip(self) -> bool:
        return any(name in RANDOM_CRITERIA for name in self.sequence)

    def new_context(self, records: Sequence[TeamRecord]) -> TiebreakContext:
        """Draw coin flip positions for one ordering."""
        if not self.uses_coin_flip:
            return TiebreakContext()
        team_ids = [r.team_id for r in records]
        shuffled = self.random.sample(team_ids, len(team_ids))
        return TiebreakContext(draw={tid: pos for pos, tid in enumerate(shuffled)})

    def compare(
        self,
        a: TeamRecord,
        b: TeamRecord,
        context: Optional[TiebreakContext] = None,
        skip_random: bool = False,
    ) -> Tuple[int, Optional[str]]:
        """Compare two records.

        Returns:
            (result, deciding criterion). ``result`` is negative when ``a``
            ranks first; the criterion is None when nothing separated them.
        """
        if context is None:
            context = TiebreakContext() if skip_random else self.new_context([a, b])

        for name in self.sequence:
            if skip_random and name in RANDOM_CRITERIA:
                continue
            result = _COMPARATORS[name](a, b, context)
            if result:
                return result, name
        return 0, None

    def deciding_tiebreaker(self, a: TeamRecord, b: TeamRecord) -> Optional[str]:
        """Name of the first criterion that separates two teams on merit."""
        return self.compare(a, b, skip_random=True)[1]

    def order(self, records: Sequence[TeamRecord]) -> List[TeamRecord]:
        """Return ``records`` sorted best first. The input is not modified."""
        context = self.new_context(records)
        ordered = sorted(
            records,
            key=functools.cmp_to_key(lambda a, b: self.compare(a, b, context)[0]),
        )
        logger.debug(
            "Ordered %s teams by %s", len(ordered), ", ".join(self.sequence) or "-"
        )
        return ordered

    def group_into_tiers(
        self, records: Sequence[TeamRecord]
    ) -> List[List[TeamRecord]]:
        """Order records and group neighbours tied on every non-random criterion."""
        tiers: List[List[TeamRecord]] = []
        for record in self.order(records):
            if tiers and self.compare(tiers[-1][-1], record, skip_random=True)[0] == 0:
                tiers[-1].append(record)
            else:
                tiers.append([record])
        return tiers


def order_by_tiebreakers(
    records: Sequence[TeamRecord],
    tiebreaker_sequence: TiebreakerSequence,
    rng: Optional[random.Random] = None,
) -> List[TeamRecord]:
    """Rank ``records`` by ``tiebreaker_sequence``.

    The result is deterministic for identical input until ``coin_flip`` is
    reached. A sequence ending in ``coin_flip`` yields a strict total order.

    Raises:
        InvalidTiebreakerException: If the sequence names an unknown criterion
    """
    return TiebreakOrderer(tiebreaker_sequence, rng=rng).order(records)


def group_into_tiers(
    records: Sequence[TeamRecord], tiebreaker_sequence: TiebreakerSequence
) -> List[List[TeamRecord]]:
    return TiebreakOrderer(tiebreaker_sequence).group_into_tiers(records)
