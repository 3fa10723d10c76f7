"""Pattern strength classification and metric updates."""

import logging
from datetime import datetime
from typing import NamedTuple

from maturion.config import ClassificationConfig
from maturion.exceptions import InvalidConfiguration
from maturion.models.pattern import LearningPattern, PatternStrength

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 0.0
MAX_CONFIDENCE = 100.0
MIN_ACTIVE_FREQUENCY = 1


class Tier(NamedTuple):
    strength: PatternStrength
    min_confidence: float
    min_frequency: int


class StrengthThresholds:
    """Ordered tier table: critical, then strong, then moderate.

    Each tier must be strictly higher than the next one on both confidence
    and frequency.

    Raises:
        InvalidConfiguration: If the tiers are not strictly descending.
    """

    def __init__(self, config: ClassificationConfig) -> None:
        self.tiers: tuple[Tier, ...] = (
            Tier(PatternStrength.CRITICAL, config.critical.min_confidence, config.critical.min_frequency),
            Tier(PatternStrength.STRONG, config.strong.min_confidence, config.strong.min_frequency),
            Tier(PatternStrength.MODERATE, config.moderate.min_confidence, config.moderate.min_frequency),
        )
        for higher, lower in zip(self.tiers, self.tiers[1:]):
            if not (
                higher.min_confidence > lower.min_confidence
                and higher.min_frequency > lower.min_frequency
            ):
                raise InvalidConfiguration(
                    f"Tier '{higher.strength.value}' must require more confidence and "
                    f"frequency than '{lower.strength.value}'"
                )


DEFAULT_THRESHOLDS = StrengthThresholds(ClassificationConfig())


def classify(
    confidence_score: float,
    frequency_count: int,
    thresholds: StrengthThresholds = DEFAULT_THRESHOLDS,
) -> PatternStrength:
    """Bucket a pattern into a strength tier.

    The first tier whose confidence AND frequency minimums are both met wins;
    otherwise the pattern is weak. The confidence is not clamped here.

    Args:
        confidence_score: Confidence in [0, 100].
        frequency_count: Number of observed occurrences.
        thresholds: Tier table to apply.

    Returns:
        The PatternStrength tier.
    """
    for tier in thresholds.tiers:
        if confidence_score >= tier.min_confidence and frequency_count >= tier.min_frequency:
            return tier.strength
    return PatternStrength.WEAK


def clamp_confidence(value: float) -> float:
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, value))


def update_metrics(
    pattern: LearningPattern,
    confidence_delta: float,
    frequency_delta: int,
    thresholds: StrengthThresholds = DEFAULT_THRESHOLDS,
) -> LearningPattern:
    """Apply confidence/frequency deltas and recompute the strength.

    Confidence is clamped to [0, 100] and frequency floored at 1; a pattern
    reaching zero occurrences is deactivated explicitly, never here. The
    caller's pattern is left untouched.

    Args:
        pattern: The current pattern.
        confidence_delta: Change to the confidence score.
        frequency_delta: Change to the frequency count.
        thresholds: Tier table to apply.

    Returns:
        A copy with confidence, frequency and strength replaced together.
    """
    new_confidence = clamp_confidence(pattern.confidence_score + confidence_delta)
    new_frequency = max(MIN_ACTIVE_FREQUENCY, pattern.frequency_count + frequency_delta)
    new_strength = classify(new_confidence, new_frequency, thresholds)

    if new_strength != pattern.strength:
        logger.debug(
            "Pattern %s strength %s -> %s (confidence=%.1f, frequency=%d)",
            pattern.id,
            pattern.strength.value,
            new_strength.value,
            new_confidence,
            new_frequency,
        )

    return pattern.model_copy(
        update={
            "confidence_score": new_confidence,
            "frequency_count": new_frequency,
            "strength": new_strength,
            "last_detected_at": datetime.now(),
        }
    )
