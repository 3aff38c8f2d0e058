"""Break categories and per-team break outcomes."""

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

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from debatetab.constants import BREAK_AIDA_1996, BREAK_AIDA_2016, BREAK_STANDARD
from debatetab.exceptions import InvalidBreakCategoryException


class BreakRule(str, Enum):
    """Qualification rule applied to a break category."""

    STANDARD = BREAK_STANDARD
    AIDA_1996 = BREAK_AIDA_1996
    AIDA_2016 = BREAK_AIDA_2016


class BreakRemark(str, Enum):
    """Why a team did (or did not) take a break slot."""

    CAPPED = "capped"
    INELIGIBLE = "ineligible"
    DIFFERENT_BREAK = "different_break"
    COIN_FLIP = "coin_flip"
    PROMOTED = "promoted"


class Liveness(str, Enum):
    """Whether a team can still reach the break."""

    SAFE = "safe"
    LIVE = "live"
    DEAD = "dead"


@dataclass
class BreakCategory:
    """An elimination bracket with its own size and qualification rule.

    Attributes:
        id: Unique category identifier
        name: Display name
        break_size: Number of teams that break
        rule: Qualification rule
        institution_cap: Max breaking teams per institution, 0 for no cap
        priority: Lower numbers are decided first
        is_general: The open break, decided before other categories of equal priority
    """

    id: str
    name: str
    break_size: int
    rule: BreakRule = BreakRule.STANDARD
    institution_cap: int = 0
    priority: int = 0
    is_general: bool = False

    def __post_init__(self):
        try:
            self.rule = BreakRule(self.rule)
        except ValueError:
            raise InvalidBreakCategoryException(
                f"Break category '{self.id}' has unknown rule '{self.rule}'"
            ) from None

    def validate(self) -> None:
        """Raise InvalidBreakCategoryException if the category cannot be broken."""
        if self.break_size <= 0:
            raise InvalidBreakCategoryException(
                f"Break category '{self.id}' must have a positive break size, "
                f"got {self.break_size}"
            )
        if self.institution_cap < 0:
            raise InvalidBreakCategoryException(
                f"Break category '{self.id}' has a negative institution cap"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize category to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "break_size": self.break_size,
            "rule": self.rule.value,
            "institution_cap": self.institution_cap,
            "priority": self.priority,
            "is_general": self.is_general,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BreakCategory":
        """Deserialize category from dictionary."""
        return cls(
            id=str(data["id"]),
            name=data.get("name", str(data["id"])),
            break_size=int(data["break_size"]),
            rule=data.get("rule", BREAK_STANDARD),
            institution_cap=int(data.get("institution_cap", 0)),
            priority=int(data.get("priority", 0)),
            is_general=bool(data.get("is_general", False)),
        )


@dataclass(frozen=True)
class BreakResult:
    """Outcome for one team in one break category.

    ``break_rank`` is 0 for teams that do not break. Teams breaking on merit
    carry no remark.
    """

    team_id: str
    team_name: str
    institution: Optional[str]
    break_rank: int
    is_breaking: bool
    remark: Optional[BreakRemark]
    category_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team_id": self.team_id,
            "team_name": self.team_name,
            "institution": self.institution,
            "break_rank": self.break_rank,
            "is_breaking": self.is_breaking,
            "remark": self.remark.value if self.remark else None,
            "category_id": self.category_id,
        }
