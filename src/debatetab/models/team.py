"""Registration records for teams and judges."""

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
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Team:
    """A registered team.

    Attributes:
        id: Unique team identifier
        name: Display name (falls back to the id)
        institution: School or club the team represents, if any
        speakers: Speaker names in speaking order
        division: Division the team competes in, e.g. "novice"
    """

    id: str
    name: str = ""
    institution: Optional[str] = None
    speakers: Tuple[str, ...] = ()
    division: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def speaker_name(self, position: int) -> str:
        """Name of the speaker at ``position`` (0-based), or a placeholder."""
        if position < len(self.speakers) and self.speakers[position]:
            return self.speakers[position]
        return f"Speaker {position + 1}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize team to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "institution": self.institution,
            "speakers": list(self.speakers),
            "division": self.division,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Team":
        """Deserialize team from dictionary."""
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            institution=data.get("institution") or None,
            speakers=tuple(str(s) for s in data.get("speakers", [])),
            division=data.get("division") or None,
        )


@dataclass(frozen=True)
class Judge:
    """A judge available for allocation.

    A judge is always conflicted from teams of their own institution.
    """

    id: str
    name: str = ""
    institution: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "institution": self.institution}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Judge":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            institution=data.get("institution") or None,
        )
