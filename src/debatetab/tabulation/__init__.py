"""Standings and tiebreak ordering for Debate Tab."""

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

from debatetab.tabulation.speaker_awards import (
    SpeakerAwardsCalculator,
    breaking_team_ids,
    calculate_speaker_awards,
)
from debatetab.tabulation.standings_calculator import (
    StandingsCalculator,
    adjusted_total,
    compute_standings,
)
from debatetab.tabulation.tiebreak_orderer import (
    TiebreakContext,
    TiebreakOrderer,
    available_tiebreakers,
    group_into_tiers,
    order_by_tiebreakers,
    register_tiebreaker,
    tiebreaker_label,
    validate_tiebreak_sequence,
)

__all__ = [
    "SpeakerAwardsCalculator",
    "StandingsCalculator",
    "TiebreakContext",
    "TiebreakOrderer",
    "adjusted_total",
    "available_tiebreakers",
    "breaking_team_ids",
    "calculate_speaker_awards",
    "compute_standings",
    "group_into_tiers",
    "order_by_tiebreakers",
    "register_tiebreaker",
    "tiebreaker_label",
    "validate_tiebreak_sequence",
]
