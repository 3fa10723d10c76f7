"""Document ingestion workflow with a human-approval gate."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Protocol

from maturion.config import ChunkingConfig
from maturion.exceptions import ApprovalRequiredError
from maturion.ingestion.chunker import DocumentChunker
from maturion.ingestion.parser import DocumentParser
from maturion.models.chunk import BatchStatus, ChunkBatch
from maturion.models.context import OrganizationContext

logger = logging.getLogger(__name__)


class ChunkSink(Protocol):
    """Downstream collaborator (embedding / vector storage) for approved batches."""

    def store(self, batch: ChunkBatch) -> None: ...


class IngestionPipeline:
    """Parse, chunk, and hold chunk batches until a reviewer approves them.

    Args:
        config: Chunking configuration.
        sink: Receives approved batches on commit.
        parser: Optional parser override.
    """

    def __init__(
        self,
        config: ChunkingConfig,
        sink: ChunkSink,
        parser: DocumentParser | None = None,
    ) -> None:
        self._chunker = DocumentChunker(config)
        self._parser = parser or DocumentParser()
        self._sink = sink

    def prepare(self, file_path: str | Path) -> ChunkBatch:
        """Extract and chunk a file; the batch starts pending approval."""
        document = self._parser.parse(file_path)
        return self._chunker.chunk(document)

    def approve(self, batch: ChunkBatch, context: OrganizationContext) -> ChunkBatch:
        logger.info("Chunk batch %s approved by %s", batch.id, context.user_id)
        return self._review(batch, context, BatchStatus.APPROVED)

    def reject(self, batch: ChunkBatch, context: OrganizationContext) -> ChunkBatch:
        logger.info("Chunk batch %s rejected by %s", batch.id, context.user_id)
        return self._review(batch, context, BatchStatus.REJECTED)

    def commit(self, batch: ChunkBatch) -> None:
        """Forward an approved batch to the sink.

        Raises:
            ApprovalRequiredError: If the batch has not been approved.
        """
        if not batch.is_approved:
            raise ApprovalRequiredError(
                f"Chunk batch {batch.id} is {batch.status.value}; approval required"
            )
        self._sink.store(batch)
        logger.info("Committed %d chunks for document %s", batch.total_chunks, batch.document_id)

    def _review(
        self, batch: ChunkBatch, context: OrganizationContext, status: BatchStatus
    ) -> ChunkBatch:
        return batch.model_copy(
            update={
                "status": status,
                "reviewed_by": context.user_id,
                "reviewed_at": datetime.now(),
            }
        )
