"""Tabulation settings for a tournament.

Settings are plain data: tiebreak orders, weights and break categories are
loaded from JSON and validated up front so that a bad configuration fails
before any standings are computed.
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
from typing import Any, Dict, List, Optional

from debatetab.constants import (
    DEFAULT_DROP_COUNT,
    DEFAULT_PAIRING_METHOD,
    DEFAULT_SIDE_METHOD,
    DEFAULT_TIEBREAK_SORT_ORDER,
    PAIRING_METHODS,
    SIDE_METHODS,
    TIEBREAK_PRESETS,
)
from debatetab.exceptions import InvalidConfigurationException
from debatetab.models.breaks import BreakCategory
from debatetab.models.pairing import PairingOptions, QualityWeights
from debatetab.utils import setup_logger

logger = setup_logger(__name__)


@dataclass
class TabulationConfig:
    """Configuration settings for tabulating a tournament.

    Attributes:
        name: Tournament name
        tiebreak_order: Tiebreak criteria in priority order
        drop_speaks: Best/worst rounds dropped for adjusted speaks
        drop_ranks: Best/worst rounds dropped for adjusted ranks
        include_elimination: Count elimination results in standings
        pairing_method: Default preliminary pairing method
        side_method: "fixed" or "balance"
        avoid_rematches: Penalise rematches when pairing
        club_protect: Penalise same-institution match-ups when pairing
        quality_weights: Pairing quality weights
        break_categories: Break categories to decide
    """

    name: str = "Untitled Tournament"
    tiebreak_order: List[str] = field(
        default_factory=lambda: list(DEFAULT_TIEBREAK_SORT_ORDER)
    )
    drop_speaks: int = DEFAULT_DROP_COUNT
    drop_ranks: int = DEFAULT_DROP_COUNT
    include_elimination: bool = False
    pairing_method: str = DEFAULT_PAIRING_METHOD
    side_method: str = DEFAULT_SIDE_METHOD
    avoid_rematches: bool = True
    club_protect: bool = True
    quality_weights: QualityWeights = field(default_factory=QualityWeights)
    break_categories: List[BreakCategory] = field(default_factory=list)

    def validate(self) -> None:
        """Check every setting, raising a ConfigurationException on the first error."""
        from debatetab.tabulation.tiebreak_orderer import validate_tiebreak_sequence

        validate_tiebreak_sequence(self.tiebreak_order)

        if self.drop_speaks < 0 or self.drop_ranks < 0:
            raise InvalidConfigurationException("Drop counts cannot be negative")

        if self.pairing_method not in PAIRING_METHODS:
            raise InvalidConfigurationException(
                f"Unknown pairing method '{self.pairing_method}'"
            )

        if self.side_method not in SIDE_METHODS:
            raise InvalidConfigurationException(
                f"Unknown side method '{self.side_method}'"
            )

        seen = set()
        for category in self.break_categories:
            category.validate()
            if category.id in seen:
                raise InvalidConfigurationException(
                    f"Duplicate break category id '{category.id}'"
                )
            seen.add(category.id)

    def pairing_options(self, rooms: Optional[List[str]] = None) -> PairingOptions:
        """Build the options for drawing a preliminary round."""
        return PairingOptions(
            method=self.pairing_method,
            weights=self.quality_weights,
            side_method=self.side_method,
            rooms=list(rooms or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "name": self.name,
            "tiebreak_order": list(self.tiebreak_order),
            "drop_speaks": self.drop_speaks,
            "drop_ranks": self.drop_ranks,
            "include_elimination": self.include_elimination,
            "pairing_method": self.pairing_method,
            "side_method": self.side_method,
            "avoid_rematches": self.avoid_rematches,
            "club_protect": self.club_protect,
            "quality_weights": self.quality_weights.to_dict(),
            "break_categories": [c.to_dict() for c in self.break_categories],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TabulationConfig":
        """Deserialize configuration from dictionary.

        ``tiebreak_preset`` may name one of the built-in orders instead of
        listing ``tiebreak_order`` explicitly; an explicit order wins.
        """
        tiebreak_order = data.get("tiebreak_order")
        preset = data.get("tiebreak_preset")
        if tiebreak_order is None and preset is not None:
            if preset not in TIEBREAK_PRESETS:
                raise InvalidConfigurationException(
                    f"Unknown tiebreak preset '{preset}'. "
                    f"Available: {', '.join(sorted(TIEBREAK_PRESETS))}"
                )
            tiebreak_order = TIEBREAK_PRESETS[preset]
            logger.debug("Using tiebreak preset %s", preset)

        return cls(
            name=data.get("name", "Untitled Tournament"),
            tiebreak_order=list(tiebreak_order or DEFAULT_TIEBREAK_SORT_ORDER),
            drop_speaks=int(data.get("drop_speaks", DEFAULT_DROP_COUNT)),
            drop_ranks=int(data.get("drop_ranks", DEFAULT_DROP_COUNT)),
            include_elimination=bool(data.get("include_elimination", False)),
            pairing_method=data.get("pairing_method", DEFAULT_PAIRING_METHOD),
            side_method=data.get("side_method", DEFAULT_SIDE_METHOD),
            avoid_rematches=data.get("avoid_rematches", True),
            club_protect=data.get("club_protect", True),
            quality_weights=QualityWeights.from_dict(data.get("quality_weights", {})),
            break_categories=[
                BreakCategory.from_dict(c) for c in data.get("break_categories", [])
            ],
        )
