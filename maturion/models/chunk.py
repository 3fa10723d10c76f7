"""Chunk data models."""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TextChunk(BaseModel):
    """A contiguous window of a source document's text."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    content: str
    start_offset: int = Field(ge=0)
    end_offset: int = Field(ge=0)
    document_id: str | None = None

    @model_validator(mode="after")
    def _check_offsets(self) -> "TextChunk":
        if self.end_offset - self.start_offset != len(self.content):
            raise ValueError(
                f"Offsets [{self.start_offset}, {self.end_offset}) do not match "
                f"content length {len(self.content)}"
            )
        return self

    @property
    def length(self) -> int:
        return len(self.content)


class BatchStatus(str, Enum):
    """Approval state of a chunk batch."""

    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"


class ChunkBatch(BaseModel):
    """All chunks produced from one document, awaiting human approval.

    Nothing is forwarded to embedding or storage until the batch is
    approved.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    document_id: str
    chunks: list[TextChunk] = Field(default_factory=list)
    chunk_size: int
    overlap: int
    source_length: int = 0
    status: BatchStatus = BatchStatus.PENDING_APPROVAL
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def total_chunks(self) -> int:
        return len(self.chunks)

    @property
    def average_chunk_size(self) -> float:
        if not self.chunks:
            return 0.0
        return sum(c.length for c in self.chunks) / len(self.chunks)

    @property
    def largest_chunk(self) -> int:
        return max((c.length for c in self.chunks), default=0)

    @property
    def smallest_chunk(self) -> int:
        return min((c.length for c in self.chunks), default=0)

    @property
    def is_approved(self) -> bool:
        return self.status == BatchStatus.APPROVED

    def reconstruct_text(self) -> str:
        """Rebuild the covered source text by dropping the overlapping prefixes.

        Each chunk after the first starts at the previous chunk's
        ``end_offset - overlap``, so only the part past the previous end is new.
        """
        parts: list[str] = []
        covered = 0
        for chunk in self.chunks:
            parts.append(chunk.content[covered - chunk.start_offset:])
            covered = chunk.end_offset
        return "".join(parts)
