"""Learning rule configuration models.

Each rule type carries its own typed settings record, selected by the
``rule_type`` tag, instead of a free-form parameter bag.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union
from uuid import uuid4

from pydantic import BaseModel, Field


class RuleType(str, Enum):
    PATTERN_DETECTION = "pattern_detection"
    CONFIDENCE_THRESHOLD = "confidence_threshold"
    AUTO_VALIDATION = "auto_validation"
    SUPPRESSION_TRIGGER = "suppression_trigger"


class PatternDetectionSettings(BaseModel):
    """Promote a signal to a pattern once it recurs often enough."""

    rule_type: Literal["pattern_detection"] = "pattern_detection"
    min_frequency: int = Field(default=3, ge=1)
    min_confidence: float = Field(default=75.0, ge=0, le=100)
    validation_threshold: float = Field(default=80.0, ge=0, le=100)


class ConfidenceThresholdSettings(BaseModel):
    """Hold back content below an accuracy floor."""

    rule_type: Literal["confidence_threshold"] = "confidence_threshold"
    min_accuracy: float = Field(default=90.0, ge=0, le=100)
    require_human_review: bool = True


class AutoValidationSettings(BaseModel):
    """Validate patterns that match the organization's sector closely enough."""

    rule_type: Literal["auto_validation"] = "auto_validation"
    sector_match_threshold: float = Field(default=85.0, ge=0, le=100)
    cross_validation_required: bool = True


class SuppressionTriggerSettings(BaseModel):
    """Suppress content that keeps getting rejected or losing confidence."""

    rule_type: Literal["suppression_trigger"] = "suppression_trigger"
    rejection_frequency: int = Field(default=5, ge=1)
    confidence_decline_threshold: float = Field(default=-20.0, le=0)


RuleSettings = Annotated[
    Union[
        PatternDetectionSettings,
        ConfidenceThresholdSettings,
        AutoValidationSettings,
        SuppressionTriggerSettings,
    ],
    Field(discriminator="rule_type"),
]


class LearningRule(BaseModel):
    """A per-organization learning rule and its trigger bookkeeping."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    organization_id: str
    rule_name: str
    rule_category: str  # "content_quality", "sector_alignment", ...
    settings: RuleSettings
    is_enabled: bool = True
    applies_to_content_types: list[str] = Field(default_factory=list)
    applies_to_domains: list[str] = Field(default_factory=list)
    priority_level: int = Field(default=5, ge=1, le=10)
    auto_activation_enabled: bool = False
    last_triggered_at: datetime | None = None
    trigger_count: int = Field(default=0, ge=0)
    effectiveness_score: float | None = None
    created_by: str | None = None
    updated_by: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def rule_type(self) -> RuleType:
        return RuleType(self.settings.rule_type)
