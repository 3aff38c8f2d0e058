"""Judge allocation for generated debates."""

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

from typing import List, Optional, Tuple

from debatetab.models.pairing import PairingConstraints
from debatetab.models.team import Judge

# (team id, institution) for each side of a debate
SideInfo = Tuple[str, Optional[str]]


def judge_can_see(
    judge: Judge, constraints: PairingConstraints, *sides: SideInfo
) -> bool:
    """Return True if ``judge`` has no conflict with any of ``sides``.

    A judge is conflicted from a team listed against them, from any
    institution listed against them, and from their own institution.
    """
    for team_id, institution in sides:
        if constraints.judge_conflicts_team(judge.id, team_id):
            return False
        if constraints.judge_conflicts_institution(judge.id, institution):
            return False
        if institution and judge.institution == institution:
            return False
    return True


def take_first_available_judge(
    pool: List[Judge],
    constraints: PairingConstraints,
    aff: SideInfo,
    neg: SideInfo,
) -> Optional[Judge]:
    """Remove and return the first judge in ``pool`` free to hear aff vs neg.

    Returns None, leaving the pool unchanged, when every judge is conflicted.
    """
    for index, judge in enumerate(pool):
        if judge_can_see(judge, constraints, aff, neg):
            return pool.pop(index)
    return None


def rotate_judge(
    judges: List[Judge],
    start: int,
    constraints: PairingConstraints,
    aff: SideInfo,
    neg: SideInfo,
) -> Optional[Judge]:
    """Pick a judge round-robin, starting at ``start`` and skipping conflicts."""
    if not judges:
        return None
    for offset in range(len(judges)):
        judge = judges[(start + offset) % len(judges)]
        if judge_can_see(judge, constraints, aff, neg):
            return judge
    return None
