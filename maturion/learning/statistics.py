"""Aggregate statistics over learning patterns."""

from collections.abc import Iterable
from dataclasses import dataclass

from maturion.models.pattern import LearningPattern, PatternStrength, ValidationStatus


@dataclass
class PatternStatistics:
    """Container for pattern counts by activity, review state and tier."""

    total: int = 0
    active: int = 0
    validated: int = 0
    rejected: int = 0
    needing_validation: int = 0
    critical: int = 0
    strong: int = 0
    moderate: int = 0
    weak: int = 0

    def count_for(self, strength: PatternStrength) -> int:
        return getattr(self, strength.value)

    def to_display_string(self) -> str:
        """Format statistics for log output."""
        return (
            f"Total: {self.total} | Active: {self.active} | "
            f"Critical: {self.critical} | Strong: {self.strong} | "
            f"Moderate: {self.moderate} | Weak: {self.weak} | "
            f"Awaiting review: {self.needing_validation}"
        )


def calculate_pattern_statistics(patterns: Iterable[LearningPattern]) -> PatternStatistics:
    """Calculate statistics for a collection of patterns.

    Args:
        patterns: Patterns to analyze.

    Returns:
        PatternStatistics with all counts populated.
    """
    stats = PatternStatistics()
    for pattern in patterns:
        stats.total += 1
        if pattern.is_active:
            stats.active += 1
        if pattern.validation_status == ValidationStatus.HUMAN_APPROVED:
            stats.validated += 1
        elif pattern.validation_status == ValidationStatus.HUMAN_REJECTED:
            stats.rejected += 1
        elif pattern.validation_status == ValidationStatus.UNVALIDATED:
            stats.needing_validation += 1
        setattr(stats, pattern.strength.value, stats.count_for(pattern.strength) + 1)
    return stats


def patterns_by_strength(
    patterns: Iterable[LearningPattern], strength: PatternStrength
) -> list[LearningPattern]:
    return [p for p in patterns if p.strength == strength]


def patterns_by_category(
    patterns: Iterable[LearningPattern], category: str
) -> list[LearningPattern]:
    return [p for p in patterns if p.pattern_category == category]


def patterns_needing_validation(patterns: Iterable[LearningPattern]) -> list[LearningPattern]:
    return [p for p in patterns if p.validation_status == ValidationStatus.UNVALIDATED]
