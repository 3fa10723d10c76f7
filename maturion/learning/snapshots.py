"""Learning model snapshots: capture, compare and summarize.

A snapshot freezes an organization's active patterns and enabled rules so
later states can be compared against it. Rollback is only planned, never
applied; restoring patterns stays a human decision.
"""

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta

from maturion.exceptions import MaturionError
from maturion.learning.statistics import calculate_pattern_statistics
from maturion.models.context import OrganizationContext
from maturion.models.snapshot import ModelSnapshot, ModelState, SnapshotType
from maturion.storage.patterns import PatternRepository
from maturion.storage.rules import RuleRepository
from maturion.storage.snapshots import SnapshotRepository

logger = logging.getLogger(__name__)


@dataclass
class SnapshotSummary:
    name: str
    created_at: datetime
    pattern_count: int
    active_rules_count: int

    @classmethod
    def of(cls, snapshot: ModelSnapshot) -> "SnapshotSummary":
        return cls(
            name=snapshot.snapshot_name,
            created_at=snapshot.created_at,
            pattern_count=snapshot.pattern_count,
            active_rules_count=snapshot.active_rules_count,
        )


@dataclass
class SnapshotComparison:
    """How the second snapshot differs from the first."""

    first: SnapshotSummary
    second: SnapshotSummary
    pattern_change: int
    rules_change: int
    time_difference: timedelta


@dataclass
class SnapshotStatistics:
    total: int = 0
    manual: int = 0
    automated: int = 0
    milestone: int = 0
    pre_activation: int = 0
    rollback_available: int = 0
    has_baseline: bool = False
    total_patterns: int = 0
    total_active_rules: int = 0


@dataclass
class RollbackPlan:
    """What restoring a snapshot would bring back."""

    snapshot_id: str
    snapshot_name: str
    reason: str
    would_restore_patterns: int
    would_restore_rules: int


def compare_snapshots(first: ModelSnapshot, second: ModelSnapshot) -> SnapshotComparison:
    return SnapshotComparison(
        first=SnapshotSummary.of(first),
        second=SnapshotSummary.of(second),
        pattern_change=second.pattern_count - first.pattern_count,
        rules_change=second.active_rules_count - first.active_rules_count,
        time_difference=second.created_at - first.created_at,
    )


def calculate_snapshot_statistics(snapshots: Iterable[ModelSnapshot]) -> SnapshotStatistics:
    stats = SnapshotStatistics()
    for snapshot in snapshots:
        stats.total += 1
        setattr(stats, snapshot.snapshot_type.value, getattr(stats, snapshot.snapshot_type.value) + 1)
        if snapshot.rollback_available:
            stats.rollback_available += 1
        if snapshot.is_baseline:
            stats.has_baseline = True
        stats.total_patterns += snapshot.pattern_count
        stats.total_active_rules += snapshot.active_rules_count
    return stats


def baseline_snapshot(snapshots: Iterable[ModelSnapshot]) -> ModelSnapshot | None:
    return next((s for s in snapshots if s.is_baseline), None)


def snapshots_by_type(
    snapshots: Iterable[ModelSnapshot], snapshot_type: SnapshotType
) -> list[ModelSnapshot]:
    return [s for s in snapshots if s.snapshot_type == snapshot_type]


class SnapshotManager:
    """Captures snapshots of an organization's learning state.

    Args:
        patterns: Pattern storage.
        rules: Rule storage.
        snapshots: Snapshot storage.
    """

    def __init__(
        self,
        patterns: PatternRepository,
        rules: RuleRepository,
        snapshots: SnapshotRepository,
    ) -> None:
        self._patterns = patterns
        self._rules = rules
        self._snapshots = snapshots

    def create_snapshot(
        self,
        context: OrganizationContext,
        snapshot_name: str,
        snapshot_type: SnapshotType = SnapshotType.MANUAL,
        snapshot_reason: str | None = None,
        is_baseline: bool = False,
        include_patterns: bool = True,
        include_rules: bool = True,
        include_metrics: bool = True,
    ) -> ModelSnapshot:
        """Capture the active patterns and enabled rules of the context's organization.

        Args:
            context: Organization and user taking the snapshot.
            snapshot_name: Display name.
            snapshot_type: Why the snapshot exists.
            snapshot_reason: Free-text note.
            is_baseline: Make this the organization's baseline.
            include_patterns: Capture active patterns.
            include_rules: Capture enabled rules.
            include_metrics: Record pattern statistics alongside the state.

        Returns:
            The stored snapshot.
        """
        organization_id = context.organization_id
        state = ModelState()
        if include_patterns:
            state.patterns = self._patterns.list_for_organization(organization_id, active_only=True)
        if include_rules:
            state.rules = self._rules.list_for_organization(organization_id, enabled_only=True)

        now = datetime.now()
        metrics = {}
        if include_metrics:
            metrics = {
                "snapshot_timestamp": now.isoformat(),
                "total_patterns": len(state.patterns),
                "active_rules": len(state.rules),
                "pattern_statistics": asdict(calculate_pattern_statistics(state.patterns)),
            }

        snapshot = ModelSnapshot(
            organization_id=organization_id,
            snapshot_name=snapshot_name,
            snapshot_type=snapshot_type,
            snapshot_reason=snapshot_reason,
            pattern_count=len(state.patterns),
            active_rules_count=len(state.rules),
            model_state=state,
            performance_metrics=metrics,
            is_baseline=is_baseline,
            created_by=context.user_id,
            created_at=now,
        )
        self._snapshots.add(snapshot)
        logger.info(
            "Snapshot %r captured %d patterns and %d rules for %s",
            snapshot_name,
            snapshot.pattern_count,
            snapshot.active_rules_count,
            organization_id,
        )
        return snapshot

    def create_initial_baseline(self, context: OrganizationContext) -> ModelSnapshot:
        return self.create_snapshot(
            context,
            "Initial Baseline",
            snapshot_type=SnapshotType.MILESTONE,
            snapshot_reason="Initial learning model baseline",
            is_baseline=True,
        )

    def set_baseline(self, context: OrganizationContext, snapshot_id: str) -> None:
        self._snapshots.set_baseline(context.organization_id, snapshot_id)

    def baseline(self, context: OrganizationContext) -> ModelSnapshot | None:
        return baseline_snapshot(self._snapshots.list_for_organization(context.organization_id))

    def compare(self, first_id: str, second_id: str) -> SnapshotComparison:
        """Compare two stored snapshots.

        Raises:
            SnapshotNotFoundError: If either snapshot does not exist.
        """
        return compare_snapshots(self._snapshots.get(first_id), self._snapshots.get(second_id))

    def statistics(self, context: OrganizationContext) -> SnapshotStatistics:
        return calculate_snapshot_statistics(
            self._snapshots.list_for_organization(context.organization_id)
        )

    def plan_rollback(
        self,
        context: OrganizationContext,
        snapshot_id: str,
        reason: str,
        confirm: bool = False,
    ) -> RollbackPlan:
        """Describe a rollback to a snapshot without changing any state.

        Raises:
            ValueError: If the rollback was not confirmed.
            SnapshotNotFoundError: If the snapshot does not exist.
            MaturionError: If the snapshot does not allow rollback.
        """
        if not confirm:
            raise ValueError("Rollback must be confirmed")
        snapshot = self._snapshots.get(snapshot_id)
        if not snapshot.rollback_available:
            raise MaturionError(f"Snapshot {snapshot_id} does not allow rollback")

        plan = RollbackPlan(
            snapshot_id=snapshot.id,
            snapshot_name=snapshot.snapshot_name,
            reason=reason,
            would_restore_patterns=snapshot.pattern_count,
            would_restore_rules=snapshot.active_rules_count,
        )
        logger.info(
            "Rollback to snapshot %r planned by %s (%s): %d patterns, %d rules",
            snapshot.snapshot_name,
            context.user_id,
            reason,
            plan.would_restore_patterns,
            plan.would_restore_rules,
        )
        return plan
