"""Data models for Debate Tab."""

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

from debatetab.models.breaks import (
    BreakCategory,
    BreakRemark,
    BreakResult,
    BreakRule,
    Liveness,
)
from debatetab.models.config import TabulationConfig
from debatetab.models.pairing import (
    GeneratedPairing,
    PairingConstraints,
    PairingHistory,
    PairingOptions,
    QualityWeights,
    SeedEntry,
)
from debatetab.models.results import PairingResult
from debatetab.models.speakers import SpeakerAwards, SpeakerStats
from debatetab.models.standings import TeamRecord
from debatetab.models.team import Judge, Team

__all__ = [
    "BreakCategory",
    "BreakRemark",
    "BreakResult",
    "BreakRule",
    "GeneratedPairing",
    "Judge",
    "Liveness",
    "PairingConstraints",
    "PairingHistory",
    "PairingOptions",
    "PairingResult",
    "QualityWeights",
    "SeedEntry",
    "SpeakerAwards",
    "SpeakerStats",
    "TabulationConfig",
    "Team",
    "TeamRecord",
]
