"""Draw Checker - Internal validation of generated draws and breaks.

This module re-checks generated pairings and break results against the
rules every draw must satisfy (no team twice, no team against itself, no
hard conflicts, break sizes and category exclusivity) and reports soft
constraint breaches as quality warnings.
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

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence

from debatetab.models.breaks import BreakCategory, BreakResult
from debatetab.models.pairing import (
    GeneratedPairing,
    PairingConstraints,
    PairingHistory,
)
from debatetab.models.standings import TeamRecord
from debatetab.models.team import Judge
from debatetab.pairing.judges import judge_can_see
from debatetab.utils import setup_logger

logger = setup_logger(__name__)


class CriterionStatus(Enum):
    """Status of a draw criterion check."""

    COMPLIANT = "COMPLIANT"
    VIOLATION = "VIOLATION"
    NOT_APPLICABLE = "NOT_APPLICABLE"


class ViolationType(Enum):
    """Types of criterion violations."""

    ABSOLUTE = "ABSOLUTE"  # Must never happen
    QUALITY = "QUALITY"  # Allowed, but should be rare


@dataclass
class CriterionResult:
    """Result of validating a single criterion."""

    criterion: str
    status: CriterionStatus
    violation_type: Optional[ViolationType] = None
    description: str = ""
    details: Dict[str, object] = field(default_factory=dict)

    @property
    def message(self) -> str:
        return self.description


@dataclass
class ValidationReport:
    """Complete validation report for a draw or a break."""

    total_criteria: int
    compliant_count: int
    violations: List[CriterionResult]
    overall_status: CriterionStatus
    summary: str
    quality_warnings: List[CriterionResult] = field(default_factory=list)
    criteria_results: List[CriterionResult] = field(default_factory=list)

    @property
    def compliance_percentage(self) -> float:
        """Calculate compliance percentage."""
        if self.total_criteria == 0:
            return 100.0
        return (self.compliant_count / self.total_criteria) * 100.0

    @property
    def is_valid(self) -> bool:
        return self.overall_status != CriterionStatus.VIOLATION

    def to_dict(self) -> Dict[str, object]:
        return {
            "summary": self.summary,
            "overall_status": self.overall_status.value,
            "compliance_percentage": self.compliance_percentage,
            "violations": [v.criterion for v in self.violations],
            "quality_warnings": [w.criterion for w in self.quality_warnings],
        }


def _compliant(criterion: str, description: str) -> CriterionResult:
    return CriterionResult(
        criterion=criterion,
        status=CriterionStatus.COMPLIANT,
        description=description,
    )


def _violation(
    criterion: str,
    violation_type: ViolationType,
    description: str,
    **details: object,
) -> CriterionResult:
    return CriterionResult(
        criterion=criterion,
        status=CriterionStatus.VIOLATION,
        violation_type=violation_type,
        description=description,
        details=details,
    )


class DrawCriteriaChecker:
    """Checks a single round's pairings."""

    def check_no_self_pairing(
        self, pairings: Sequence[GeneratedPairing]
    ) -> CriterionResult:
        """D1: A team never debates itself."""
        offenders = [p.aff_id for p in pairings if p.aff_id == p.neg_id]
        if offenders:
            return _violation(
                "D1",
                ViolationType.ABSOLUTE,
                f"Team paired against itself: {', '.join(offenders)}",
                teams=offenders,
            )
        return _compliant("D1", "No self pairings")

    def check_single_appearance(
        self, pairings: Sequence[GeneratedPairing]
    ) -> CriterionResult:
        """D2: A team appears in at most one debate."""
        counts: Counter = Counter()
        for pairing in pairings:
            counts[pairing.aff_id] += 1
            if pairing.neg_id != pairing.aff_id:
                counts[pairing.neg_id] += 1
        repeated = sorted(t for t, n in counts.items() if n > 1)
        if repeated:
            return _violation(
                "D2",
                ViolationType.ABSOLUTE,
                f"Teams drawn more than once: {', '.join(repeated)}",
                teams=repeated,
            )
        return _compliant("D2", "Every team drawn at most once")

    def check_team_conflicts(
        self,
        pairings: Sequence[GeneratedPairing],
        constraints: Optional[PairingConstraints],
    ) -> CriterionResult:
        """D3: Hard-conflicted teams never meet."""
        if constraints is None:
            return CriterionResult(
                criterion="D3",
                status=CriterionStatus.NOT_APPLICABLE,
                description="No constraints supplied",
            )
        clashes = [
            (p.aff_id, p.neg_id)
            for p in pairings
            if constraints.teams_conflict(p.aff_id, p.neg_id)
        ]
        if clashes:
            return _violation(
                "D3",
                ViolationType.ABSOLUTE,
                f"{len(clashes)} conflicted match-up(s) drawn",
                pairs=clashes,
            )
        return _compliant("D3", "No conflicted match-ups")

    def check_judges(
        self,
        pairings: Sequence[GeneratedPairing],
        judges: Optional[Sequence[Judge]],
        constraints: Optional[PairingConstraints],
        institutions: Mapping[str, Optional[str]],
        allow_judge_reuse: bool = False,
    ) -> CriterionResult:
        """D4: Judges are conflict free and, unless allowed, used once."""
        if not judges:
            return CriterionResult(
                criterion="D4",
                status=CriterionStatus.NOT_APPLICABLE,
                description="No judges supplied",
            )
        constraints = constraints or PairingConstraints()
        by_id = {j.id: j for j in judges}
        used: Counter = Counter(p.judge_id for p in pairings if p.judge_id)

        if not allow_judge_reuse:
            reused = sorted(j for j, n in used.items() if n > 1)
            if reused:
                return _violation(
                    "D4",
                    ViolationType.ABSOLUTE,
                    f"Judges allocated twice: {', '.join(reused)}",
                    judges=reused,
                )

        for pairing in pairings:
            judge = by_id.get(pairing.judge_id) if pairing.judge_id else None
            if judge is None:
                continue
            if not judge_can_see(
                judge,
                constraints,
                (pairing.aff_id, institutions.get(pairing.aff_id)),
                (pairing.neg_id, institutions.get(pairing.neg_id)),
            ):
                return _violation(
                    "D4",
                    ViolationType.ABSOLUTE,
                    f"Judge {judge.id} conflicted with "
                    f"{pairing.aff_id} vs {pairing.neg_id}",
                    judge=judge.id,
                )
        return _compliant("D4", "Judge allocation valid")

    def check_pools(
        self,
        pairings: Sequence[GeneratedPairing],
        wins: Mapping[str, int],
    ) -> CriterionResult:
        """D5: Preliminary debates stay inside a win pool."""
        crossed = [
            (p.aff_id, p.neg_id)
            for p in pairings
            if p.bracket is not None
            and wins.get(p.aff_id) is not None
            and wins.get(p.aff_id) != wins.get(p.neg_id)
        ]
        if crossed:
            return _violation(
                "D5",
                ViolationType.ABSOLUTE,
                f"{len(crossed)} debate(s) cross win pools",
                pairs=crossed,
            )
        return _compliant("D5", "All debates within their pool")

    def check_rematches(
        self,
        pairings: Sequence[GeneratedPairing],
        history: PairingHistory,
    ) -> CriterionResult:
        """Q1: Rematches are kept to a minimum."""
        repeats = [
            (p.aff_id, p.neg_id)
            for p in pairings
            if history.have_played(p.aff_id, p.neg_id)
        ]
        if repeats:
            return _violation(
                "Q1",
                ViolationType.QUALITY,
                f"{len(repeats)} rematch(es) drawn",
                pairs=repeats,
            )
        return _compliant("Q1", "No rematches")

    def check_institution_clashes(
        self,
        pairings: Sequence[GeneratedPairing],
        institutions: Mapping[str, Optional[str]],
    ) -> CriterionResult:
        """Q2: Teams from one institution rarely meet."""
        clashes = [
            (p.aff_id, p.neg_id)
            for p in pairings
            if institutions.get(p.aff_id)
            and institutions.get(p.aff_id) == institutions.get(p.neg_id)
        ]
        if clashes:
            return _violation(
                "Q2",
                ViolationType.QUALITY,
                f"{len(clashes)} same-institution debate(s)",
                pairs=clashes,
            )
        return _compliant("Q2", "No same-institution debates")

    def check_judge_coverage(
        self, pairings: Sequence[GeneratedPairing], judges: Optional[Sequence[Judge]]
    ) -> CriterionResult:
        """Q3: Every debate has a judge when judges were supplied."""
        if not judges:
            return CriterionResult(
                criterion="Q3",
                status=CriterionStatus.NOT_APPLICABLE,
                description="No judges supplied",
            )
        missing = [(p.aff_id, p.neg_id) for p in pairings if p.judge_id is None]
        if missing:
            return _violation(
                "Q3",
                ViolationType.QUALITY,
                f"{len(missing)} debate(s) without a judge",
                pairs=missing,
            )
        return _compliant("Q3", "Every debate judged")


class BreakCriteriaChecker:
    """Checks break results across categories."""

    def check_break_sizes(
        self,
        results: Mapping[str, Sequence[BreakResult]],
        categories: Mapping[str, BreakCategory],
    ) -> CriterionResult:
        """B1: No category breaks more teams than its size."""
        oversized = {}
        for category_id, category_results in results.items():
            category = categories.get(category_id)
            breaking = sum(1 for r in category_results if r.is_breaking)
            if category is not None and breaking > category.break_size:
                oversized[category_id] = breaking
        if oversized:
            return _violation(
                "B1",
                ViolationType.ABSOLUTE,
                f"Categories over their break size: {', '.join(oversized)}",
                categories=oversized,
            )
        return _compliant("B1", "All breaks within size")

    def check_exclusivity(
        self, results: Mapping[str, Sequence[BreakResult]]
    ) -> CriterionResult:
        """B2: A team breaks in at most one category."""
        breaking_in: Dict[str, List[str]] = {}
        for category_id, category_results in results.items():
            for result in category_results:
                if result.is_breaking:
                    breaking_in.setdefault(result.team_id, []).append(category_id)
        doubled = {t: c for t, c in breaking_in.items() if len(c) > 1}
        if doubled:
            return _violation(
                "B2",
                ViolationType.ABSOLUTE,
                f"Teams breaking twice: {', '.join(sorted(doubled))}",
                teams=doubled,
            )
        return _compliant("B2", "Every team breaks at most once")

    def check_break_ranks(
        self, results: Mapping[str, Sequence[BreakResult]]
    ) -> CriterionResult:
        """B3: Break ranks run 1..k without gaps inside each category."""
        for category_id, category_results in results.items():
            ranks = sorted(r.break_rank for r in category_results if r.is_breaking)
            if ranks != list(range(1, len(ranks) + 1)):
                return _violation(
                    "B3",
                    ViolationType.ABSOLUTE,
                    f"Break ranks in {category_id} are not contiguous",
                    category=category_id,
                    ranks=ranks,
                )
        return _compliant("B3", "Break ranks contiguous")


class DrawValidator:
    """Main validator for generated draws and breaks."""

    def __init__(self):
        self.draw_checker = DrawCriteriaChecker()
        self.break_checker = BreakCriteriaChecker()

    def validate_round_pairings(
        self,
        pairings: Sequence[GeneratedPairing],
        records: Optional[Sequence[TeamRecord]] = None,
        judges: Optional[Sequence[Judge]] = None,
        constraints: Optional[PairingConstraints] = None,
        history: Optional[PairingHistory] = None,
        allow_judge_reuse: bool = False,
    ) -> ValidationReport:
        """Validate one round of pairings.

        Args:
            pairings: The generated draw
            records: Standings the draw was made from, for pool checks
            judges: Judges that were available
            constraints: Constraints the draw had to honour
            history: Earlier match-ups, for rematch warnings
            allow_judge_reuse: Elimination brackets may rotate judges

        Returns:
            ValidationReport with absolute violations and quality warnings
        """
        records = records or []
        institutions = {r.team_id: r.institution for r in records}
        wins = {r.team_id: r.wins for r in records}

        checker = self.draw_checker
        all_results = [
            checker.check_no_self_pairing(pairings),
            checker.check_single_appearance(pairings),
            checker.check_team_conflicts(pairings, constraints),
            checker.check_judges(
                pairings, judges, constraints, institutions, allow_judge_reuse
            ),
            checker.check_pools(pairings, wins),
            checker.check_rematches(pairings, history or PairingHistory()),
            checker.check_institution_clashes(pairings, institutions),
            checker.check_judge_coverage(pairings, judges),
        ]
        return self._build_report(all_results, "Draw")

    def validate_breaks(
        self,
        results: Mapping[str, Sequence[BreakResult]],
        categories: Sequence[BreakCategory],
    ) -> ValidationReport:
        """Validate the results of ``generate_all_breaks``."""
        by_id = {c.id: c for c in categories}
        checker = self.break_checker
        all_results = [
            checker.check_break_sizes(results, by_id),
            checker.check_exclusivity(results),
            checker.check_break_ranks(results),
        ]
        return self._build_report(all_results, "Break")

    def _build_report(
        self, all_results: List[CriterionResult], subject: str
    ) -> ValidationReport:
        applicable = [
            r for r in all_results if r.status != CriterionStatus.NOT_APPLICABLE
        ]
        compliant_count = sum(
            1 for r in applicable if r.status == CriterionStatus.COMPLIANT
        )
        absolute_violations = [
            r
            for r in all_results
            if r.status == CriterionStatus.VIOLATION
            and r.violation_type == ViolationType.ABSOLUTE
        ]
        quality_warnings = [
            r
            for r in all_results
            if r.status == CriterionStatus.VIOLATION
            and r.violation_type == ViolationType.QUALITY
        ]

        overall_status = (
            CriterionStatus.VIOLATION
            if absolute_violations
            else CriterionStatus.COMPLIANT
        )

        if overall_status == CriterionStatus.COMPLIANT:
            summary = (
                f"{subject} valid; {len(quality_warnings)} quality warning(s)"
            )
        else:
            summary = (
                f"{subject} invalid - {len(absolute_violations)} "
                f"criteria failed; {len(quality_warnings)} quality warning(s)"
            )

        logger.info("Validation complete: %s", summary)

        return ValidationReport(
            total_criteria=len(applicable),
            compliant_count=compliant_count,
            violations=absolute_violations,
            quality_warnings=quality_warnings,
            overall_status=overall_status,
            summary=summary,
            criteria_results=all_results,
        )


def create_draw_validator() -> DrawValidator:
    """Create and configure draw validator instance."""
    return DrawValidator()
