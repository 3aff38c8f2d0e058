"""Team standing snapshot produced by the standings calculator."""

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
from typing import Any, Dict, Optional, Tuple

from debatetab.models.team import Team


@dataclass(frozen=True)
class TeamRecord:
    """Immutable standing of one team after a set of results.

    Attributes:
        team: The team this record describes
        wins: Rounds won, byes included
        losses: Rounds lost
        speaks: Cumulative speaker points
        opp_strength: Sum of the win counts of every opponent faced
        opp_win_pct: Opponents' wins divided by opponents' rounds
        ranks: Cumulative speaker ranks (lower is better)
        adjusted_speaks: Speaks with the best and worst rounds dropped
        adjusted_ranks: Ranks with the best and worst rounds dropped
        double_adjusted_speaks: Speaks with two best and two worst dropped
        double_adjusted_ranks: Ranks with two best and two worst dropped
        byes: Byes received
        forfeits_given: Rounds lost by forfeit
        forfeits_received: Rounds won because the opponent forfeited
        aff_rounds: Rounds debated on the affirmative
        neg_rounds: Rounds debated on the negative
        rounds_completed: Rounds counted, byes included
        opponent_ids: Opponents in the order they were met
        head_to_head: Wins against each opponent, keyed by opponent id
    """

    team: Team
    wins: int = 0
    losses: int = 0
    speaks: float = 0.0
    opp_strength: int = 0
    opp_win_pct: float = 0.0
    ranks: float = 0.0
    adjusted_speaks: float = 0.0
    adjusted_ranks: float = 0.0
    double_adjusted_speaks: float = 0.0
    double_adjusted_ranks: float = 0.0
    byes: int = 0
    forfeits_given: int = 0
    forfeits_received: int = 0
    aff_rounds: int = 0
    neg_rounds: int = 0
    rounds_completed: int = 0
    opponent_ids: Tuple[str, ...] = ()
    head_to_head: Dict[str, int] = field(default_factory=dict, hash=False)

    @property
    def team_id(self) -> str:
        return self.team.id

    @property
    def institution(self) -> Optional[str]:
        return self.team.institution

    @property
    def side_imbalance(self) -> int:
        """Affirmative rounds minus negative rounds."""
        return self.aff_rounds - self.neg_rounds

    def wins_against(self, opponent_id: str) -> int:
        return self.head_to_head.get(opponent_id, 0)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize record to dictionary."""
        return {
            "team_id": self.team.id,
            "team_name": self.team.display_name,
            "institution": self.team.institution,
            "wins": self.wins,
            "losses": self.losses,
            "speaks": self.speaks,
            "opp_strength": self.opp_strength,
            "opp_win_pct": self.opp_win_pct,
            "ranks": self.ranks,
            "adjusted_speaks": self.adjusted_speaks,
            "adjusted_ranks": self.adjusted_ranks,
            "double_adjusted_speaks": self.double_adjusted_speaks,
            "double_adjusted_ranks": self.double_adjusted_ranks,
            "byes": self.byes,
            "forfeits_given": self.forfeits_given,
            "forfeits_received": self.forfeits_received,
            "aff_rounds": self.aff_rounds,
            "neg_rounds": self.neg_rounds,
            "rounds_completed": self.rounds_completed,
            "opponent_ids": list(self.opponent_ids),
            "head_to_head": dict(self.head_to_head),
        }
