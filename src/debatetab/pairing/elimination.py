"""Elimination bracket pairings."""

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

from typing import List, Optional, Sequence

from debatetab.constants import FLAG_ELIMINATION, QUALITY_BASE
from debatetab.models.pairing import GeneratedPairing, PairingConstraints, SeedEntry
from debatetab.models.team import Judge
from debatetab.pairing.judges import rotate_judge
from debatetab.utils import setup_logger

logger = setup_logger(__name__)


def generate_elimination_pairings(
    seeds: Sequence[SeedEntry],
    judges: Sequence[Judge],
    constraints: Optional[PairingConstraints] = None,
    rooms: Optional[Sequence[str]] = None,
) -> List[GeneratedPairing]:
    """Pair a seeded bracket: 1 vs N, 2 vs N-1, and so on.

    The higher seed takes the affirmative. With an odd number of seeds the
    middle seed is left unpaired and advances. Judges are handed out
    round-robin over the bracket, skipping any judge conflicted with either
    team. Every elimination debate has the maximum quality score.

    Args:
        seeds: Seed entries, in any order
        judges: Judges in rotation order
        constraints: Judge conflicts to respect; none if omitted
        rooms: Room names assigned in bracket order

    Returns:
        Pairings in bracket order, top seed first
    """
    if constraints is None:
        constraints = PairingConstraints()
    judges = list(judges)
    rooms = list(rooms or [])

    ordered = sorted(seeds, key=lambda s: s.seed)
    count = len(ordered)

    pairings = []
    for index in range(count // 2):
        high = ordered[index]
        low = ordered[count - 1 - index]
        judge = rotate_judge(
            judges,
            index,
            constraints,
            (high.team_id, high.institution),
            (low.team_id, low.institution),
        )
        pairings.append(
            GeneratedPairing(
                aff_id=high.team_id,
                neg_id=low.team_id,
                judge_id=judge.id if judge else None,
                room=rooms[index] if index < len(rooms) else None,
                quality=QUALITY_BASE,
                bracket=None,
                flags=(FLAG_ELIMINATION,),
            )
        )

    if count % 2:
        logger.info(
            "Seed %s (%s) advances without a debate",
            ordered[count // 2].seed,
            ordered[count // 2].team_id,
        )
    logger.info("Generated %s elimination pairings", len(pairings))
    return pairings
