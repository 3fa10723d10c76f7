"""Document ingestion: text extraction, chunking and approval."""

from maturion.ingestion.chunker import DocumentChunker, chunk_text
from maturion.ingestion.parser import DocumentParser
from maturion.ingestion.pipeline import IngestionPipeline

__all__ = ["DocumentChunker", "DocumentParser", "IngestionPipeline", "chunk_text"]
