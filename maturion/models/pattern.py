"""Learning pattern data model."""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field


class PatternStrength(str, Enum):
    """How well-evidenced a pattern is, weakest first."""

    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"
    CRITICAL = "critical"


class ValidationStatus(str, Enum):
    """Human review state of a pattern."""

    UNVALIDATED = "unvalidated"
    HUMAN_APPROVED = "human_approved"
    HUMAN_REJECTED = "human_rejected"
    AUTO_VALIDATED = "auto_validated"


class LearningPattern(BaseModel):
    """A recurring signal detected in user feedback.

    ``strength`` is derived from ``(confidence_score, frequency_count)`` and
    only ever changes together with them.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    organization_id: str
    pattern_type: str
    pattern_category: str
    pattern_text: str
    confidence_score: float = Field(default=50.0, ge=0, le=100)
    frequency_count: int = Field(default=1, ge=0)
    strength: PatternStrength = PatternStrength.WEAK
    validation_status: ValidationStatus = ValidationStatus.UNVALIDATED
    validated_by: str | None = None
    validated_at: datetime | None = None
    suppression_rule: str | None = None
    replacement_suggestion: str | None = None
    learning_weight: float = 1.0
    is_active: bool = True
    source_feedback_ids: list[str] = Field(default_factory=list)
    affected_domains: list[str] = Field(default_factory=list)
    first_detected_at: datetime = Field(default_factory=datetime.now)
    last_detected_at: datetime = Field(default_factory=datetime.now)
    version: int = 1  # row version for optimistic concurrency
