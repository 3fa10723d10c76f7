"""Learning model snapshot data model."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

from maturion.models.pattern import LearningPattern
from maturion.models.rule import LearningRule


class SnapshotType(str, Enum):
    MANUAL = "manual"
    AUTOMATED = "automated"
    MILESTONE = "milestone"
    PRE_ACTIVATION = "pre_activation"


class ModelState(BaseModel):
    """The active patterns and enabled rules captured by a snapshot."""

    patterns: list[LearningPattern] = Field(default_factory=list)
    rules: list[LearningRule] = Field(default_factory=list)


class ModelSnapshot(BaseModel):
    """A point-in-time copy of an organization's learning state."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    organization_id: str
    snapshot_name: str
    snapshot_type: SnapshotType = SnapshotType.MANUAL
    snapshot_reason: str | None = None
    pattern_count: int = Field(default=0, ge=0)
    active_rules_count: int = Field(default=0, ge=0)
    model_state: ModelState = Field(default_factory=ModelState)
    performance_metrics: dict[str, Any] = Field(default_factory=dict)
    is_baseline: bool = False
    rollback_available: bool = True
    created_by: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
