"""Feedback weight table and lookup."""

import logging
from collections.abc import Iterable, Iterator

from maturion.models.feedback import FeedbackWeight

logger = logging.getLogger(__name__)

DEFAULT_MULTIPLIER = 1.0

# Weights an organization starts with (and returns to on reset)
DEFAULT_FEEDBACK_WEIGHTS: tuple[FeedbackWeight, ...] = (
    FeedbackWeight(feedback_type="rejected", feedback_category="accuracy", weight_multiplier=3.0, is_critical=True),
    FeedbackWeight(feedback_type="rejected", feedback_category="hallucination", weight_multiplier=5.0, is_critical=True),
    FeedbackWeight(feedback_type="rejected", feedback_category="relevance", weight_multiplier=2.5, is_critical=True),
    FeedbackWeight(feedback_type="needs_correction", feedback_category="grammar", weight_multiplier=1.0),
    FeedbackWeight(feedback_type="needs_correction", feedback_category="clarity", weight_multiplier=1.5),
    FeedbackWeight(feedback_type="approved", feedback_category="accuracy", weight_multiplier=0.5),
)


class FeedbackWeightTable:
    """One organization's weights, keyed by (feedback_type, feedback_category)."""

    def __init__(self, weights: Iterable[FeedbackWeight] = ()) -> None:
        self._weights: dict[tuple[str, str], FeedbackWeight] = {}
        for weight in weights:
            self.upsert(weight)

    @classmethod
    def with_defaults(cls) -> "FeedbackWeightTable":
        return cls(DEFAULT_FEEDBACK_WEIGHTS)

    def upsert(self, weight: FeedbackWeight) -> None:
        self._weights[weight.key] = weight

    def remove(self, feedback_type: str, feedback_category: str) -> bool:
        return self._weights.pop((feedback_type, feedback_category), None) is not None

    def get(self, feedback_type: str, feedback_category: str) -> FeedbackWeight | None:
        return self._weights.get((feedback_type, feedback_category))

    def critical_weights(self) -> list[FeedbackWeight]:
        return [w for w in self._weights.values() if w.is_critical]

    def reset_to_defaults(self) -> None:
        self._weights.clear()
        for weight in DEFAULT_FEEDBACK_WEIGHTS:
            self.upsert(weight)
        logger.info("Feedback weights reset to %d defaults", len(DEFAULT_FEEDBACK_WEIGHTS))

    def __iter__(self) -> Iterator[FeedbackWeight]:
        return iter(self._weights.values())

    def __len__(self) -> int:
        return len(self._weights)


def weight_for(
    feedback_type: str,
    feedback_category: str,
    table: FeedbackWeightTable,
    default: float = DEFAULT_MULTIPLIER,
) -> float:
    """Return the multiplier for a feedback type/category pair.

    A missing row is the normal case for organizations that never customized
    their weights, so it falls back to ``default`` instead of raising.
    """
    weight = table.get(feedback_type, feedback_category)
    if weight is None:
        return default
    return weight.weight_multiplier
