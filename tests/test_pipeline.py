"""Tests for the ingestion pipeline and its approval gate."""

from pathlib import Path

import pytest

from maturion.config import ChunkingConfig
from maturion.exceptions import ApprovalRequiredError
from maturion.ingestion.pipeline import IngestionPipeline
from maturion.models.chunk import BatchStatus, ChunkBatch
from maturion.models.context import OrganizationContext
from maturion.storage.chunks import ChunkRepository
from maturion.storage.database import initialize_database


class RecordingSink:
    def __init__(self) -> None:
        self.batches: list[ChunkBatch] = []

    def store(self, batch: ChunkBatch) -> None:
        self.batches.append(batch)


@pytest.fixture
def context() -> OrganizationContext:
    return OrganizationContext(organization_id="org-1", user_id="admin-1")


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def pipeline(sink: RecordingSink) -> IngestionPipeline:
    return IngestionPipeline(ChunkingConfig(chunk_size=100, overlap=20), sink)


@pytest.fixture
def document(tmp_path: Path) -> Path:
    f = tmp_path / "policy.txt"
    f.write_text("Physical Security Policy\n" + "Gates are locked at night. " * 20, encoding="utf-8")
    return f


class TestIngestionPipeline:
    def test_prepare_returns_pending_batch(
        self, pipeline: IngestionPipeline, sink: RecordingSink, document: Path
    ) -> None:
        batch = pipeline.prepare(document)
        assert batch.status == BatchStatus.PENDING_APPROVAL
        assert batch.total_chunks > 1
        assert batch.reconstruct_text() == document.read_text(encoding="utf-8")
        assert sink.batches == []

    def test_commit_requires_approval(
        self, pipeline: IngestionPipeline, sink: RecordingSink, document: Path
    ) -> None:
        batch = pipeline.prepare(document)
        with pytest.raises(ApprovalRequiredError):
            pipeline.commit(batch)
        assert sink.batches == []

    def test_rejected_batch_cannot_be_committed(
        self,
        pipeline: IngestionPipeline,
        sink: RecordingSink,
        document: Path,
        context: OrganizationContext,
    ) -> None:
        rejected = pipeline.reject(pipeline.prepare(document), context)
        assert rejected.status == BatchStatus.REJECTED
        with pytest.raises(ApprovalRequiredError):
            pipeline.commit(rejected)

    def test_approved_batch_forwarded(
        self,
        pipeline: IngestionPipeline,
        sink: RecordingSink,
        document: Path,
        context: OrganizationContext,
    ) -> None:
        batch = pipeline.prepare(document)
        approved = pipeline.approve(batch, context)
        assert approved.reviewed_by == "admin-1"
        assert approved.reviewed_at is not None
        assert batch.status == BatchStatus.PENDING_APPROVAL

        pipeline.commit(approved)
        assert sink.batches == [approved]

    def test_sqlite_sink(
        self, tmp_path: Path, document: Path, context: OrganizationContext
    ) -> None:
        db_path = tmp_path / "maturion.db"
        initialize_database(db_path)
        repository = ChunkRepository(db_path)
        pipeline = IngestionPipeline(ChunkingConfig(chunk_size=100, overlap=20), repository)

        approved = pipeline.approve(pipeline.prepare(document), context)
        pipeline.commit(approved)
        assert repository.chunks_for_document(approved.document_id) == approved.chunks
