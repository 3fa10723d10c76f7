"""Feedback weighting and event models."""

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class FeedbackWeight(BaseModel):
    """Per-organization multiplier for one (feedback_type, feedback_category) pair."""

    feedback_type: str
    feedback_category: str
    weight_multiplier: float = Field(default=1.0, gt=0)
    is_critical: bool = False  # never dropped by low-priority pruning
    applies_to_content_types: list[str] = Field(default_factory=list)

    @property
    def key(self) -> tuple[str, str]:
        return (self.feedback_type, self.feedback_category)


class FeedbackEvent(BaseModel):
    """A user feedback event that corroborates or contradicts a pattern."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    pattern_id: str
    feedback_type: str  # "approved", "rejected", "needs_correction"
    feedback_category: str  # "accuracy", "hallucination", "clarity", ...
    confidence_delta: float = 0.0
    frequency_delta: int = 0
    submitted_at: datetime = Field(default_factory=datetime.now)
