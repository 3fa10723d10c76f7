"""Extracted document model for the ingestion pipeline."""

from uuid import uuid4

from pydantic import BaseModel, Field


class ExtractedDocument(BaseModel):
    """Plain text extracted from an uploaded file.

    The text is what the chunker operates on; offsets in the resulting
    chunks refer to positions in ``text``.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str
    source_path: str
    file_format: str  # "pdf", "txt", "docx"
    text: str
    extraction_method: str = ""  # "pymupdf", "python-docx", "utf-8", "chardet"
    warnings: list[str] = Field(default_factory=list)
