"""Fixed-size sliding-window text chunker."""

import logging

from maturion.config import ChunkingConfig
from maturion.exceptions import InvalidConfiguration
from maturion.models.chunk import ChunkBatch, TextChunk
from maturion.models.document import ExtractedDocument

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 2000
DEFAULT_OVERLAP = 200


def validate_chunking(chunk_size: int, overlap: int) -> None:
    """Reject parameters that would make the window stall or misbehave.

    Raises:
        InvalidConfiguration: If chunk_size <= 0, overlap < 0, or
            overlap >= chunk_size.
    """
    if chunk_size <= 0:
        raise InvalidConfiguration(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0:
        raise InvalidConfiguration(f"overlap must not be negative, got {overlap}")
    if overlap >= chunk_size:
        raise InvalidConfiguration(
            f"overlap ({overlap}) must be smaller than chunk_size ({chunk_size})"
        )


def chunk_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_OVERLAP,
    document_id: str | None = None,
) -> list[TextChunk]:
    """Split text into overlapping windows of at most chunk_size characters.

    Consecutive chunks share exactly ``overlap`` characters. The last chunk
    ends at the end of the text and may be shorter than chunk_size. Empty
    text produces no chunks.

    Args:
        text: The source text.
        chunk_size: Maximum characters per chunk.
        overlap: Characters repeated at the start of each following chunk.
        document_id: Optional source document ID stamped on each chunk.

    Returns:
        Chunks in source order, indexed from 0.

    Raises:
        InvalidConfiguration: If the parameters are invalid.
    """
    validate_chunking(chunk_size, overlap)

    chunks: list[TextChunk] = []
    text_length = len(text)
    start = 0

    while start < text_length:
        end = min(start + chunk_size, text_length)
        chunks.append(
            TextChunk(
                index=len(chunks),
                content=text[start:end],
                start_offset=start,
                end_offset=end,
                document_id=document_id,
            )
        )
        if end == text_length:
            break
        start = end - overlap

    return chunks


class DocumentChunker:
    """Turns extracted documents into chunk batches pending approval.

    Args:
        config: ChunkingConfig with chunk_size, overlap and max_chunks.
    """

    def __init__(self, config: ChunkingConfig) -> None:
        validate_chunking(config.chunk_size, config.overlap)
        if config.max_chunks is not None and config.max_chunks <= 0:
            raise InvalidConfiguration(
                f"max_chunks must be positive when set, got {config.max_chunks}"
            )
        self._config = config

    def chunk(self, document: ExtractedDocument) -> ChunkBatch:
        """Chunk a document's text into a new ChunkBatch.

        Args:
            document: The extracted document.

        Returns:
            A ChunkBatch in pending_approval status.
        """
        chunks = chunk_text(
            document.text,
            chunk_size=self._config.chunk_size,
            overlap=self._config.overlap,
            document_id=document.id,
        )

        max_chunks = self._config.max_chunks
        if max_chunks is not None and len(chunks) > max_chunks:
            logger.warning(
                "Document %s produced %d chunks; keeping the first %d",
                document.id,
                len(chunks),
                max_chunks,
            )
            chunks = chunks[:max_chunks]

        batch = ChunkBatch(
            document_id=document.id,
            chunks=chunks,
            chunk_size=self._config.chunk_size,
            overlap=self._config.overlap,
            source_length=len(document.text),
        )
        logger.info(
            "Chunked %s into %d chunks (avg %.0f chars)",
            document.title,
            batch.total_chunks,
            batch.average_chunk_size,
        )
        return batch
