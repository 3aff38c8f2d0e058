"""Individual speaker tallies and awards."""

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


@dataclass
class SpeakerStats:
    """Points earned by one speaker across the counted rounds.

    A speaker is identified by team and speaking position, so the same
    person keeps one entry however many rounds they speak in.

    Attributes:
        speaker_id: ``<team id>-<position>`` with a 1-based position
        speaker_name: Name from the team registration, or "Speaker N"
        team_id: Team the speaker debates for
        team_name: Display name of that team
        institution: Team institution, if any
        division: Team division, if any
        rounds_spoken: Rounds with a score recorded
        total_points: Sum of every recorded score
        average_points: Total divided by rounds spoken
        high_point: Best single score
        low_point: Worst single score
        adjusted_points: Total with the best and worst scores dropped
        rank: Position in the awards list, set once speakers are ranked
        is_breaking: The speaker's team broke in some category
    """

    speaker_id: str
    speaker_name: str
    team_id: str
    team_name: str
    institution: Optional[str] = None
    division: Optional[str] = None
    rounds_spoken: int = 0
    total_points: float = 0.0
    average_points: float = 0.0
    high_point: float = 0.0
    low_point: float = 0.0
    adjusted_points: float = 0.0
    rank: Optional[int] = None
    is_breaking: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Serialize speaker to dictionary."""
        return {
            "speaker_id": self.speaker_id,
            "speaker_name": self.speaker_name,
            "team_id": self.team_id,
            "team_name": self.team_name,
            "institution": self.institution,
            "division": self.division,
            "rounds_spoken": self.rounds_spoken,
            "total_points": self.total_points,
            "average_points": self.average_points,
            "high_point": self.high_point,
            "low_point": self.low_point,
            "adjusted_points": self.adjusted_points,
            "rank": self.rank,
            "is_breaking": self.is_breaking,
        }


@dataclass
class SpeakerAwards:
    """Ranked speakers plus the top of the list."""

    speakers: List[SpeakerStats] = field(default_factory=list)
    top_speakers: List[SpeakerStats] = field(default_factory=list)
    divisions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "speakers": [s.to_dict() for s in self.speakers],
            "top_speakers": [s.to_dict() for s in self.top_speakers],
            "divisions": list(self.divisions),
        }
