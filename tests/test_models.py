"""Tests for data models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from maturion.models import (
    ChunkBatch,
    FeedbackWeight,
    LearningPattern,
    OrganizationContext,
    PatternStrength,
    TextChunk,
    ValidationStatus,
)


class TestTextChunk:
    def test_create_chunk(self) -> None:
        chunk = TextChunk(index=0, content="hello", start_offset=0, end_offset=5)
        assert chunk.length == 5
        assert chunk.document_id is None

    def test_offsets_must_match_content(self) -> None:
        with pytest.raises(ValidationError):
            TextChunk(index=0, content="hello", start_offset=0, end_offset=4)

    def test_chunk_is_immutable(self) -> None:
        chunk = TextChunk(index=0, content="abc", start_offset=0, end_offset=3)
        with pytest.raises(ValidationError):
            chunk.content = "xyz"  # type: ignore[misc]

    def test_negative_index_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TextChunk(index=-1, content="", start_offset=0, end_offset=0)


class TestChunkBatch:
    def test_batch_defaults(self) -> None:
        batch = ChunkBatch(document_id="doc-1", chunk_size=2000, overlap=200)
        assert batch.status.value == "pending_approval"
        assert batch.is_approved is False
        assert batch.total_chunks == 0
        assert batch.reconstruct_text() == ""
        assert batch.id

    def test_reconstruct_text(self) -> None:
        chunks = [
            TextChunk(index=0, content="abcdef", start_offset=0, end_offset=6),
            TextChunk(index=1, content="efghij", start_offset=4, end_offset=10),
            TextChunk(index=2, content="ijk", start_offset=8, end_offset=11),
        ]
        batch = ChunkBatch(document_id="d", chunks=chunks, chunk_size=6, overlap=2)
        assert batch.reconstruct_text() == "abcdefghijk"


class TestLearningPattern:
    def test_create_pattern_defaults(self) -> None:
        pattern = LearningPattern(
            organization_id="org-1",
            pattern_type="terminology",
            pattern_category="accuracy",
            pattern_text="uses 'audit' where 'assessment' is meant",
        )
        assert pattern.strength == PatternStrength.WEAK
        assert pattern.validation_status == ValidationStatus.UNVALIDATED
        assert pattern.is_active is True
        assert pattern.frequency_count == 1
        assert pattern.version == 1
        assert isinstance(pattern.first_detected_at, datetime)
        assert pattern.id

    def test_confidence_range_enforced(self) -> None:
        with pytest.raises(ValidationError):
            LearningPattern(
                organization_id="o",
                pattern_type="t",
                pattern_category="c",
                pattern_text="x",
                confidence_score=101,
            )

    def test_pattern_serialization(self) -> None:
        pattern = LearningPattern(
            organization_id="o",
            pattern_type="t",
            pattern_category="c",
            pattern_text="x",
            strength=PatternStrength.STRONG,
        )
        data = pattern.model_dump()
        assert data["strength"] == PatternStrength.STRONG
        restored = LearningPattern(**data)
        assert restored == pattern

    def test_strength_values(self) -> None:
        assert [s.value for s in PatternStrength] == ["weak", "moderate", "strong", "critical"]


class TestFeedbackWeight:
    def test_key(self) -> None:
        weight = FeedbackWeight(feedback_type="rejected", feedback_category="accuracy")
        assert weight.key == ("rejected", "accuracy")
        assert weight.weight_multiplier == 1.0
        assert weight.is_critical is False

    def test_multiplier_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            FeedbackWeight(feedback_type="a", feedback_category="b", weight_multiplier=0)


class TestOrganizationContext:
    def test_context_is_frozen(self) -> None:
        context = OrganizationContext(organization_id="org-1", user_id="user-1")
        with pytest.raises(ValidationError):
            context.user_id = "someone-else"  # type: ignore[misc]
