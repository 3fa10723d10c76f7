"""Data models for Maturion Core."""

from maturion.models.chunk import BatchStatus, ChunkBatch, TextChunk
from maturion.models.context import OrganizationContext
from maturion.models.document import ExtractedDocument
from maturion.models.feedback import FeedbackEvent, FeedbackWeight
from maturion.models.pattern import LearningPattern, PatternStrength, ValidationStatus
from maturion.models.rule import (
    AutoValidationSettings,
    ConfidenceThresholdSettings,
    LearningRule,
    PatternDetectionSettings,
    RuleSettings,
    RuleType,
    SuppressionTriggerSettings,
)
from maturion.models.snapshot import ModelSnapshot, ModelState, SnapshotType

__all__ = [
    "AutoValidationSettings",
    "BatchStatus",
    "ChunkBatch",
    "ConfidenceThresholdSettings",
    "ExtractedDocument",
    "FeedbackEvent",
    "FeedbackWeight",
    "LearningPattern",
    "LearningRule",
    "ModelSnapshot",
    "ModelState",
    "OrganizationContext",
    "PatternDetectionSettings",
    "PatternStrength",
    "RuleSettings",
    "RuleType",
    "SnapshotType",
    "SuppressionTriggerSettings",
    "TextChunk",
    "ValidationStatus",
]
