"""Feedback ingestion: turns user feedback into pattern metric updates."""

import logging
from datetime import datetime

from maturion.config import FeedbackConfig
from maturion.exceptions import DuplicatePatternError
from maturion.learning.classifier import StrengthThresholds, classify, clamp_confidence, update_metrics
from maturion.learning.weights import FeedbackWeightTable, weight_for
from maturion.models.context import OrganizationContext
from maturion.models.feedback import FeedbackEvent
from maturion.models.pattern import LearningPattern, ValidationStatus
from maturion.storage.patterns import PatternRepository

logger = logging.getLogger(__name__)


class FeedbackIngestor:
    """Applies weighted feedback events to stored learning patterns.

    Clamping happens here, at the boundary, so the classifier only ever sees
    in-range values. Strength is never set directly; it always comes out of
    ``update_metrics``.

    Args:
        repository: Pattern storage.
        weights: The organization's feedback weight table.
        config: Feedback defaults (initial metrics, fallback multiplier).
        thresholds: Strength tier table.
    """

    def __init__(
        self,
        repository: PatternRepository,
        weights: FeedbackWeightTable,
        config: FeedbackConfig,
        thresholds: StrengthThresholds,
    ) -> None:
        self._repository = repository
        self._weights = weights
        self._config = config
        self._thresholds = thresholds

    def detect_pattern(
        self,
        context: OrganizationContext,
        pattern_type: str,
        pattern_category: str,
        pattern_text: str,
        affected_domains: list[str] | None = None,
    ) -> LearningPattern:
        """Return the active pattern with this signature, creating it if new.

        New patterns start at the configured low-confidence defaults.
        """
        existing = self._repository.find_active(
            context.organization_id, pattern_type, pattern_category, pattern_text
        )
        if existing is not None:
            return existing

        confidence = clamp_confidence(self._config.initial_confidence)
        frequency = max(1, self._config.initial_frequency)
        pattern = LearningPattern(
            organization_id=context.organization_id,
            pattern_type=pattern_type,
            pattern_category=pattern_category,
            pattern_text=pattern_text,
            confidence_score=confidence,
            frequency_count=frequency,
            strength=classify(confidence, frequency, self._thresholds),
            affected_domains=affected_domains or [],
        )
        return self._repository.add(pattern)

    def apply_feedback(self, context: OrganizationContext, event: FeedbackEvent) -> LearningPattern:
        """Scale an event's confidence delta by its feedback weight and update the pattern.

        The frequency delta counts observed occurrences and is applied unweighted.

        Raises:
            PatternNotFoundError: If the event refers to an unknown pattern.
            ConcurrentUpdateError: If the pattern changed while updating.
        """
        pattern = self._repository.get(event.pattern_id)
        multiplier = weight_for(
            event.feedback_type,
            event.feedback_category,
            self._weights,
            default=self._config.default_multiplier,
        )

        updated = update_metrics(
            pattern,
            confidence_delta=event.confidence_delta * multiplier,
            frequency_delta=event.frequency_delta,
            thresholds=self._thresholds,
        )
        updated = updated.model_copy(
            update={"source_feedback_ids": [*pattern.source_feedback_ids, event.id]}
        )
        saved = self._repository.save_metrics(updated, expected_version=pattern.version)

        if saved.strength != pattern.strength:
            logger.info(
                "Pattern %s moved from %s to %s after %s/%s feedback from %s",
                pattern.id,
                pattern.strength.value,
                saved.strength.value,
                event.feedback_type,
                event.feedback_category,
                context.user_id,
            )
        return saved

    def validate_pattern(
        self,
        context: OrganizationContext,
        pattern_id: str,
        status: ValidationStatus,
        suppression_rule: str | None = None,
        replacement_suggestion: str | None = None,
        notes: str | None = None,
    ) -> LearningPattern:
        """Record a human approval or rejection of a pattern."""
        if status not in (ValidationStatus.HUMAN_APPROVED, ValidationStatus.HUMAN_REJECTED):
            raise ValueError(f"Human validation must approve or reject, got {status.value}")

        pattern = self._repository.get(pattern_id)
        validated = pattern.model_copy(
            update={
                "validation_status": status,
                "validated_by": context.user_id,
                "validated_at": datetime.now(),
                "suppression_rule": suppression_rule,
                "replacement_suggestion": replacement_suggestion,
            }
        )
        self._repository.record_validation(validated, notes=notes)
        logger.info("Pattern %s marked %s by %s", pattern_id, status.value, context.user_id)
        return self._repository.get(pattern_id)

    def deactivate_pattern(self, context: OrganizationContext, pattern_id: str) -> None:
        self._repository.set_active(pattern_id, False)
        logger.info("Pattern %s deactivated by %s", pattern_id, context.user_id)

    def reactivate_pattern(self, context: OrganizationContext, pattern_id: str) -> None:
        """Reactivate a soft-deactivated pattern.

        Raises:
            PatternNotFoundError: If the pattern does not exist.
            DuplicatePatternError: If another active pattern already has the
                same type, category and text.
        """
        pattern = self._repository.get(pattern_id)
        existing = self._repository.find_active(
            pattern.organization_id,
            pattern.pattern_type,
            pattern.pattern_category,
            pattern.pattern_text,
        )
        if existing is not None and existing.id != pattern_id:
            logger.warning(
                "Refusing to reactivate pattern %s: pattern %s is already active",
                pattern_id,
                existing.id,
            )
            raise DuplicatePatternError(
                f"Pattern {existing.id} is already active for this signature"
            )
        self._repository.set_active(pattern_id, True)
        logger.info("Pattern %s reactivated by %s", pattern_id, context.user_id)
