"""Debate Tab - a debate tournament tabulation engine.

Standings, tiebreak ordering, power-matched and elimination draws, break
qualification and speaker awards, computed as pure functions over their
inputs.
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

from debatetab.breaks.break_generator import (
    calculate_liveness,
    generate_all_breaks,
    generate_break,
)
from debatetab.models import (
    BreakCategory,
    BreakRemark,
    BreakResult,
    BreakRule,
    GeneratedPairing,
    Judge,
    Liveness,
    PairingConstraints,
    PairingOptions,
    PairingResult,
    QualityWeights,
    SeedEntry,
    SpeakerAwards,
    SpeakerStats,
    TabulationConfig,
    Team,
    TeamRecord,
)
from debatetab.pairing.elimination import generate_elimination_pairings
from debatetab.pairing.power_pairing import generate_pairings
from debatetab.tabulation.speaker_awards import calculate_speaker_awards
from debatetab.tabulation.standings_calculator import compute_standings
from debatetab.tabulation.tiebreak_orderer import order_by_tiebreakers

__version__ = "0.1.0"

__all__ = [
    "BreakCategory",
    "BreakRemark",
    "BreakResult",
    "BreakRule",
    "GeneratedPairing",
    "Judge",
    "Liveness",
    "PairingConstraints",
    "PairingOptions",
    "PairingResult",
    "QualityWeights",
    "SeedEntry",
    "SpeakerAwards",
    "SpeakerStats",
    "TabulationConfig",
    "Team",
    "TeamRecord",
    "calculate_liveness",
    "calculate_speaker_awards",
    "compute_standings",
    "generate_all_breaks",
    "generate_break",
    "generate_elimination_pairings",
    "generate_pairings",
    "order_by_tiebreakers",
]
