"""Draw generation for Debate Tab."""

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

from debatetab.pairing.elimination import generate_elimination_pairings
from debatetab.pairing.judges import judge_can_see
from debatetab.pairing.power_pairing import (
    PairingGenerator,
    evaluate_pairing_quality,
    generate_pairings,
    split_into_pools,
    unpaired_teams,
)

__all__ = [
    "PairingGenerator",
    "evaluate_pairing_quality",
    "generate_elimination_pairings",
    "generate_pairings",
    "judge_can_see",
    "split_into_pools",
    "unpaired_teams",
]
