"""Decided round results fed into standings."""

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
from typing import Any, Dict, Optional

from debatetab.constants import RESULT_BYE, SIDE_AFF, SIDE_NEG


@dataclass(frozen=True)
class PairingResult:
    """Represents the result of a single debate.

    Speaker points and ranks are kept as supplied (number, numeric string,
    per-speaker list or None); they are coerced when standings are computed.

    Attributes:
        aff_id: ID of the affirmative team (the team receiving a bye)
        neg_id: ID of the negative team, None for a bye
        winner: "aff", "neg", "bye" or None while undecided
        aff_speaks: Affirmative speaker points
        neg_speaks: Negative speaker points
        aff_ranks: Affirmative speaker ranks
        neg_ranks: Negative speaker ranks
        forfeit: The losing side forfeited
        is_elimination: Result belongs to an elimination round
        round_number: Round the debate was held in
    """

    aff_id: str
    neg_id: Optional[str] = None
    winner: Optional[str] = None
    aff_speaks: Any = None
    neg_speaks: Any = None
    aff_ranks: Any = None
    neg_ranks: Any = None
    forfeit: bool = False
    is_elimination: bool = False
    round_number: Optional[int] = None

    @property
    def is_decided(self) -> bool:
        return self.winner in (SIDE_AFF, SIDE_NEG, RESULT_BYE)

    @property
    def is_bye(self) -> bool:
        return self.winner == RESULT_BYE

    @property
    def winner_id(self) -> Optional[str]:
        if self.winner == SIDE_AFF or self.winner == RESULT_BYE:
            return self.aff_id
        if self.winner == SIDE_NEG:
            return self.neg_id
        return None

    @property
    def loser_id(self) -> Optional[str]:
        if self.winner == SIDE_AFF:
            return self.neg_id
        if self.winner == SIDE_NEG:
            return self.aff_id
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize result to dictionary."""
        return {
            "aff_id": self.aff_id,
            "neg_id": self.neg_id,
            "winner": self.winner,
            "aff_speaks": self.aff_speaks,
            "neg_speaks": self.neg_speaks,
            "aff_ranks": self.aff_ranks,
            "neg_ranks": self.neg_ranks,
            "forfeit": self.forfeit,
            "is_elimination": self.is_elimination,
            "round_number": self.round_number,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PairingResult":
        """Deserialize result from dictionary."""
        neg_id = data.get("neg_id")
        return cls(
            aff_id=str(data["aff_id"]),
            neg_id=str(neg_id) if neg_id is not None else None,
            winner=data.get("winner"),
            aff_speaks=data.get("aff_speaks"),
            neg_speaks=data.get("neg_speaks"),
            aff_ranks=data.get("aff_ranks"),
            neg_ranks=data.get("neg_ranks"),
            forfeit=bool(data.get("forfeit", False)),
            is_elimination=bool(data.get("is_elimination", False)),
            round_number=data.get("round_number"),
        )
