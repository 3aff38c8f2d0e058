"""Data models used when generating a draw."""

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
from typing import (
    Any,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
)

from debatetab.constants import (
    DEFAULT_PAIRING_METHOD,
    DEFAULT_SIDE_METHOD,
    QUALITY_BASE,
    QUALITY_INSTITUTION_PENALTY,
    QUALITY_RECORD_GAP_PENALTY,
    QUALITY_REMATCH_PENALTY,
    QUALITY_SPEAKS_GAP_PENALTY,
)
from debatetab.models.results import PairingResult


@dataclass
class PairingHistory:
    """Tracks historical pairings to flag rematches.

    Attributes:
        previous_matches: Set of frozensets containing team ID pairs who have met
    """

    previous_matches: Set[frozenset] = field(default_factory=set)

    def add_pairing(self, team1_id: str, team2_id: str) -> None:
        """Record that two teams have been paired."""
        self.previous_matches.add(frozenset({team1_id, team2_id}))

    def have_played(self, team1_id: str, team2_id: str) -> bool:
        """Check if two teams have previously met."""
        return frozenset({team1_id, team2_id}) in self.previous_matches

    def __len__(self) -> int:
        return len(self.previous_matches)

    @classmethod
    def from_results(cls, results: Iterable[PairingResult]) -> "PairingHistory":
        """Build history from past results, decided or not. Byes are ignored."""
        history = cls()
        for result in results:
            if result.neg_id is None or result.is_bye:
                continue
            history.add_pairing(result.aff_id, result.neg_id)
        return history

    def to_dict(self) -> Dict[str, Any]:
        return {"previous_matches": [sorted(pair) for pair in self.previous_matches]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PairingHistory":
        return cls(
            previous_matches=set(
                frozenset(map(str, pair)) for pair in data.get("previous_matches", [])
            )
        )


@dataclass
class PairingConstraints:
    """Hard and soft constraints honoured by the draw.

    Team conflicts are symmetric: listing ``("a", "b")`` also forbids b vs a.
    The generator only reads this object.

    Attributes:
        team_conflicts: Pairs of team ids that must never meet
        judge_team_conflicts: judge id -> team ids the judge cannot see
        judge_institution_conflicts: judge id -> institutions the judge cannot see
        avoid_rematches: Penalise teams that already met
        club_protect: Penalise teams from the same institution meeting
    """

    team_conflicts: Iterable[Sequence[str]] = field(default_factory=list)
    judge_team_conflicts: Dict[str, Iterable[str]] = field(default_factory=dict)
    judge_institution_conflicts: Dict[str, Iterable[str]] = field(
        default_factory=dict
    )
    avoid_rematches: bool = True
    club_protect: bool = True

    def __post_init__(self):
        self.team_conflicts = frozenset(
            frozenset(pair) for pair in self.team_conflicts if len(set(pair)) == 2
        )
        self.judge_team_conflicts = {
            str(judge_id): frozenset(teams)
            for judge_id, teams in self.judge_team_conflicts.items()
        }
        self.judge_institution_conflicts = {
            str(judge_id): frozenset(institutions)
            for judge_id, institutions in self.judge_institution_conflicts.items()
        }

    def teams_conflict(self, team1_id: str, team2_id: str) -> bool:
        return frozenset({team1_id, team2_id}) in self.team_conflicts

    def judge_conflicts_team(self, judge_id: str, team_id: str) -> bool:
        return team_id in self.judge_team_conflicts.get(judge_id, frozenset())

    def judge_conflicts_institution(
        self, judge_id: str, institution: Optional[str]
    ) -> bool:
        if not institution:
            return False
        return institution in self.judge_institution_conflicts.get(
            judge_id, frozenset()
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team_conflicts": [sorted(pair) for pair in self.team_conflicts],
            "judge_team_conflicts": {
                j: sorted(t) for j, t in self.judge_team_conflicts.items()
            },
            "judge_institution_conflicts": {
                j: sorted(i) for j, i in self.judge_institution_conflicts.items()
            },
            "avoid_rematches": self.avoid_rematches,
            "club_protect": self.club_protect,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PairingConstraints":
        return cls(
            team_conflicts=[
                tuple(map(str, pair)) for pair in data.get("team_conflicts", [])
            ],
            judge_team_conflicts={
                j: [str(t) for t in teams]
                for j, teams in data.get("judge_team_conflicts", {}).items()
            },
            judge_institution_conflicts=dict(
                data.get("judge_institution_conflicts", {})
            ),
            avoid_rematches=data.get("avoid_rematches", True),
            club_protect=data.get("club_protect", True),
        )


@dataclass
class QualityWeights:
    """Scoring weights for candidate match-ups.

    Every candidate starts at ``base`` and loses points for each soft
    constraint it breaks. Setting ``speaks_gap`` to zero makes the fold
    order of the pairing method the only tie-break between equal records.
    """

    base: float = QUALITY_BASE
    institution: float = QUALITY_INSTITUTION_PENALTY
    rematch: float = QUALITY_REMATCH_PENALTY
    record_gap: float = QUALITY_RECORD_GAP_PENALTY
    speaks_gap: float = QUALITY_SPEAKS_GAP_PENALTY

    def to_dict(self) -> Dict[str, float]:
        return {
            "base": self.base,
            "institution": self.institution,
            "rematch": self.rematch,
            "record_gap": self.record_gap,
            "speaks_gap": self.speaks_gap,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QualityWeights":
        defaults = cls()
        return cls(
            base=float(data.get("base", defaults.base)),
            institution=float(data.get("institution", defaults.institution)),
            rematch=float(data.get("rematch", defaults.rematch)),
            record_gap=float(data.get("record_gap", defaults.record_gap)),
            speaks_gap=float(data.get("speaks_gap", defaults.speaks_gap)),
        )


@dataclass
class PairingOptions:
    """How a preliminary round should be drawn.

    Attributes:
        method: "high_high", "high_low" or "random"
        weights: Quality scoring weights; with the default ``speaks_gap`` a team may
            prefer a closer speaker total over its fold partner, and
            ``QualityWeights(speaks_gap=0)`` restores the pure fold
        side_method: "fixed" keeps fold sides, "balance" evens out aff/neg counts
        rooms: Room names handed out to pairings in draw order
    """

    method: str = DEFAULT_PAIRING_METHOD
    weights: QualityWeights = field(default_factory=QualityWeights)
    side_method: str = DEFAULT_SIDE_METHOD
    rooms: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class GeneratedPairing:
    """One debate of a generated draw.

    Attributes:
        aff_id: Affirmative team id
        neg_id: Negative team id
        judge_id: Allocated judge, None when no judge was free of conflicts
        room: Allocated room, if rooms were supplied
        quality: Score of the match-up, higher is better
        bracket: Win count of the pool the debate was drawn from
        flags: Soft constraints the match-up breaks, plus side adjustments
    """

    aff_id: str
    neg_id: str
    judge_id: Optional[str] = None
    room: Optional[str] = None
    quality: float = QUALITY_BASE
    bracket: Optional[int] = None
    flags: Tuple[str, ...] = ()

    @property
    def team_ids(self) -> FrozenSet[str]:
        return frozenset({self.aff_id, self.neg_id})

    def to_dict(self) -> Dict[str, Any]:
        """Serialize pairing to dictionary."""
        return {
            "aff_id": self.aff_id,
            "neg_id": self.neg_id,
            "judge_id": self.judge_id,
            "room": self.room,
            "quality": self.quality,
            "bracket": self.bracket,
            "flags": list(self.flags),
        }


@dataclass(frozen=True)
class SeedEntry:
    """A team's seed going into an elimination bracket (1 is the top seed)."""

    team_id: str
    seed: int
    institution: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SeedEntry":
        return cls(
            team_id=str(data["team_id"]),
            seed=int(data["seed"]),
            institution=data.get("institution") or None,
        )
