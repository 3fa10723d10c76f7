"""SQLite sink for approved chunk batches."""

import logging
from pathlib import Path

from maturion.exceptions import ApprovalRequiredError
from maturion.models.chunk import ChunkBatch, TextChunk
from maturion.storage.database import get_connection

logger = logging.getLogger(__name__)


class ChunkRepository:
    """Stores approved chunk batches for the embedding job to pick up.

    Args:
        db_path: Path to an initialized SQLite database.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = db_path

    def store(self, batch: ChunkBatch) -> None:
        """Insert the batch and all of its chunks in one transaction.

        Raises:
            ApprovalRequiredError: If the batch has not been approved.
        """
        if not batch.is_approved:
            raise ApprovalRequiredError(f"Chunk batch {batch.id} has not been approved")

        conn = get_connection(self._db_path)
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO chunk_batches
                        (id, document_id, chunk_size, overlap, source_length,
                         reviewed_by, reviewed_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        batch.id,
                        batch.document_id,
                        batch.chunk_size,
                        batch.overlap,
                        batch.source_length,
                        batch.reviewed_by,
                        batch.reviewed_at.isoformat() if batch.reviewed_at else None,
                    ),
                )
                conn.executemany(
                    """
                    INSERT INTO document_chunks
                        (batch_id, chunk_index, content, start_offset, end_offset)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    [
                        (batch.id, c.index, c.content, c.start_offset, c.end_offset)
                        for c in batch.chunks
                    ],
                )
        finally:
            conn.close()
        logger.debug("Stored %d chunks for batch %s", batch.total_chunks, batch.id)

    def chunks_for_document(self, document_id: str) -> list[TextChunk]:
        """Return the chunks of the most recently stored batch for a document.

        A re-chunked and re-approved document supersedes its earlier batches,
        so the result always covers the source text exactly once.
        """
        conn = get_connection(self._db_path)
        try:
            rows = conn.execute(
                """
                SELECT * FROM document_chunks
                WHERE batch_id = (
                    SELECT id FROM chunk_batches
                    WHERE document_id = ?
                    ORDER BY rowid DESC
                    LIMIT 1
                )
                ORDER BY chunk_index
                """,
                (document_id,),
            ).fetchall()
        finally:
            conn.close()
        return [
            TextChunk(
                index=row["chunk_index"],
                content=row["content"],
                start_offset=row["start_offset"],
                end_offset=row["end_offset"],
                document_id=document_id,
            )
            for row in rows
        ]
