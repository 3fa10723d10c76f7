"""Tests for feedback ingestion."""

from pathlib import Path

import pytest

from maturion.config import ClassificationConfig, FeedbackConfig
from maturion.exceptions import DuplicatePatternError, PatternNotFoundError
from maturion.learning.classifier import StrengthThresholds
from maturion.learning.feedback import FeedbackIngestor
from maturion.learning.weights import FeedbackWeightTable
from maturion.models.context import OrganizationContext
from maturion.models.feedback import FeedbackEvent
from maturion.models.pattern import PatternStrength, ValidationStatus
from maturion.storage.database import initialize_database
from maturion.storage.patterns import PatternRepository


@pytest.fixture
def context() -> OrganizationContext:
    return OrganizationContext(organization_id="org-1", user_id="reviewer-1")


@pytest.fixture
def repository(tmp_path: Path) -> PatternRepository:
    db_path = tmp_path / "maturion.db"
    initialize_database(db_path)
    return PatternRepository(db_path)


@pytest.fixture
def ingestor(repository: PatternRepository) -> FeedbackIngestor:
    return FeedbackIngestor(
        repository=repository,
        weights=FeedbackWeightTable.with_defaults(),
        config=FeedbackConfig(),
        thresholds=StrengthThresholds(ClassificationConfig()),
    )


def _event(pattern_id: str, feedback_type: str, category: str, confidence: float, frequency: int) -> FeedbackEvent:
    return FeedbackEvent(
        pattern_id=pattern_id,
        feedback_type=feedback_type,
        feedback_category=category,
        confidence_delta=confidence,
        frequency_delta=frequency,
    )


class TestDetectPattern:
    def test_creates_with_initial_defaults(
        self, ingestor: FeedbackIngestor, context: OrganizationContext
    ) -> None:
        pattern = ingestor.detect_pattern(
            context, "terminology", "accuracy", "says 'audit' for 'assessment'", ["Leadership"]
        )
        assert pattern.organization_id == "org-1"
        assert pattern.confidence_score == 50.0
        assert pattern.frequency_count == 1
        assert pattern.strength == PatternStrength.WEAK
        assert pattern.affected_domains == ["Leadership"]

    def test_returns_existing_active_pattern(
        self, ingestor: FeedbackIngestor, context: OrganizationContext
    ) -> None:
        first = ingestor.detect_pattern(context, "terminology", "accuracy", "same text")
        second = ingestor.detect_pattern(context, "terminology", "accuracy", "same text")
        assert first.id == second.id

    def test_new_pattern_after_deactivation(
        self, ingestor: FeedbackIngestor, context: OrganizationContext
    ) -> None:
        first = ingestor.detect_pattern(context, "terminology", "accuracy", "same text")
        ingestor.deactivate_pattern(context, first.id)
        second = ingestor.detect_pattern(context, "terminology", "accuracy", "same text")
        assert first.id != second.id


class TestApplyFeedback:
    def test_unweighted_feedback(
        self, ingestor: FeedbackIngestor, context: OrganizationContext
    ) -> None:
        pattern = ingestor.detect_pattern(context, "style", "tone", "too informal")
        updated = ingestor.apply_feedback(context, _event(pattern.id, "unknown", "unknown", 10, 2))
        assert updated.confidence_score == 60
        assert updated.frequency_count == 3
        assert updated.strength == PatternStrength.MODERATE

    def test_weighted_feedback(
        self, ingestor: FeedbackIngestor, context: OrganizationContext
    ) -> None:
        pattern = ingestor.detect_pattern(context, "content", "hallucination", "invents ISO clauses")
        event = _event(pattern.id, "rejected", "hallucination", 8, 9)
        updated = ingestor.apply_feedback(context, event)
        # rejected/hallucination carries a 5.0 multiplier on confidence only
        assert updated.confidence_score == 90
        assert updated.frequency_count == 10
        assert updated.strength == PatternStrength.CRITICAL
        assert updated.source_feedback_ids == [event.id]

    def test_weight_does_not_scale_frequency(
        self, ingestor: FeedbackIngestor, context: OrganizationContext
    ) -> None:
        pattern = ingestor.detect_pattern(context, "content", "hallucination", "invents ISO clauses")
        updated = ingestor.apply_feedback(
            context, _event(pattern.id, "rejected", "hallucination", 0, 2)
        )
        assert updated.frequency_count == 3

    def test_repeated_approvals_raise_frequency(
        self, ingestor: FeedbackIngestor, context: OrganizationContext
    ) -> None:
        pattern = ingestor.detect_pattern(context, "terminology", "accuracy", "uses 'criteria' correctly")
        for _ in range(5):
            pattern = ingestor.apply_feedback(
                context, _event(pattern.id, "approved", "accuracy", 10, 1)
            )
        # approved/accuracy weighs confidence by 0.5: 50 + 5 * 5
        assert pattern.confidence_score == 75
        assert pattern.frequency_count == 6
        assert pattern.strength == PatternStrength.STRONG

    def test_confidence_clamped_and_frequency_floored(
        self, ingestor: FeedbackIngestor, context: OrganizationContext
    ) -> None:
        pattern = ingestor.detect_pattern(context, "style", "tone", "too informal")
        updated = ingestor.apply_feedback(context, _event(pattern.id, "x", "y", -500, -20))
        assert updated.confidence_score == 0
        assert updated.frequency_count == 1
        assert updated.strength == PatternStrength.WEAK

    def test_persists_and_bumps_version(
        self,
        ingestor: FeedbackIngestor,
        repository: PatternRepository,
        context: OrganizationContext,
    ) -> None:
        pattern = ingestor.detect_pattern(context, "style", "tone", "too informal")
        ingestor.apply_feedback(context, _event(pattern.id, "x", "y", 5, 1))
        ingestor.apply_feedback(context, _event(pattern.id, "x", "y", 5, 1))
        stored = repository.get(pattern.id)
        assert stored.confidence_score == 60
        assert stored.frequency_count == 3
        assert stored.version == pattern.version + 2
        assert len(stored.source_feedback_ids) == 2

    def test_logs_strength_change(
        self,
        ingestor: FeedbackIngestor,
        context: OrganizationContext,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        caplog.set_level("INFO")
        pattern = ingestor.detect_pattern(context, "style", "tone", "too informal")
        ingestor.apply_feedback(context, _event(pattern.id, "x", "y", 10, 2))
        assert "from weak to moderate" in caplog.text

    def test_unknown_pattern_raises(
        self, ingestor: FeedbackIngestor, context: OrganizationContext
    ) -> None:
        with pytest.raises(PatternNotFoundError):
            ingestor.apply_feedback(context, _event("missing", "x", "y", 1, 1))


class TestValidatePattern:
    def test_human_approval_recorded(
        self,
        ingestor: FeedbackIngestor,
        repository: PatternRepository,
        context: OrganizationContext,
    ) -> None:
        pattern = ingestor.detect_pattern(context, "style", "tone", "too informal")
        validated = ingestor.validate_pattern(
            context,
            pattern.id,
            ValidationStatus.HUMAN_APPROVED,
            replacement_suggestion="use formal register",
        )
        assert validated.validation_status == ValidationStatus.HUMAN_APPROVED
        assert validated.validated_by == "reviewer-1"
        assert validated.validated_at is not None
        assert validated.strength == pattern.strength
        assert len(repository.validation_history(pattern.id)) == 1

    def test_non_human_status_rejected(
        self, ingestor: FeedbackIngestor, context: OrganizationContext
    ) -> None:
        pattern = ingestor.detect_pattern(context, "style", "tone", "too informal")
        with pytest.raises(ValueError):
            ingestor.validate_pattern(context, pattern.id, ValidationStatus.AUTO_VALIDATED)

    def test_feedback_after_validation(
        self, ingestor: FeedbackIngestor, context: OrganizationContext
    ) -> None:
        pattern = ingestor.detect_pattern(context, "style", "tone", "too informal")
        ingestor.validate_pattern(context, pattern.id, ValidationStatus.HUMAN_REJECTED)
        updated = ingestor.apply_feedback(context, _event(pattern.id, "x", "y", 5, 0))
        assert updated.validation_status == ValidationStatus.HUMAN_REJECTED
        assert updated.confidence_score == 55


class TestActivation:
    def test_deactivate_and_reactivate(
        self,
        ingestor: FeedbackIngestor,
        repository: PatternRepository,
        context: OrganizationContext,
    ) -> None:
        pattern = ingestor.detect_pattern(context, "style", "tone", "too informal")
        ingestor.deactivate_pattern(context, pattern.id)
        assert repository.get(pattern.id).is_active is False
        ingestor.reactivate_pattern(context, pattern.id)
        assert repository.get(pattern.id).is_active is True

    def test_reactivation_refused_when_replacement_active(
        self,
        ingestor: FeedbackIngestor,
        repository: PatternRepository,
        context: OrganizationContext,
    ) -> None:
        original = ingestor.detect_pattern(context, "style", "tone", "too informal")
        ingestor.deactivate_pattern(context, original.id)
        replacement = ingestor.detect_pattern(context, "style", "tone", "too informal")

        with pytest.raises(DuplicatePatternError):
            ingestor.reactivate_pattern(context, original.id)

        assert repository.get(original.id).is_active is False
        active = repository.list_for_organization("org-1", active_only=True)
        assert [p.id for p in active] == [replacement.id]

    def test_reactivate_already_active_pattern(
        self, ingestor: FeedbackIngestor, context: OrganizationContext
    ) -> None:
        pattern = ingestor.detect_pattern(context, "style", "tone", "too informal")
        ingestor.reactivate_pattern(context, pattern.id)
        assert ingestor.detect_pattern(context, "style", "tone", "too informal").id == pattern.id

    def test_reactivate_unknown_pattern_raises(
        self, ingestor: FeedbackIngestor, context: OrganizationContext
    ) -> None:
        with pytest.raises(PatternNotFoundError):
            ingestor.reactivate_pattern(context, "missing")
