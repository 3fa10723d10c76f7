"""Entry point: extract and chunk a document, printing the pending batch."""

import argparse
import logging
from pathlib import Path

from maturion.config import configure_logging, load_config
from maturion.ingestion.chunker import DocumentChunker
from maturion.ingestion.parser import DocumentParser
from maturion.storage.database import initialize_database

logger = logging.getLogger(__name__)


def main() -> None:
    """Load configuration, prepare storage, and chunk the given document."""
    arg_parser = argparse.ArgumentParser(description="Chunk a document for review.")
    arg_parser.add_argument("document", type=Path)
    arg_parser.add_argument("--config", default="config.yaml")
    args = arg_parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.logging)

    # Ensure required directories exist
    Path(config.storage.documents_dir).mkdir(parents=True, exist_ok=True)
    initialize_database(config.storage.sqlite_path)

    document = DocumentParser().parse(args.document)
    batch = DocumentChunker(config.chunking).chunk(document)

    print(f"Document: {document.title} ({document.file_format}, {len(document.text)} chars)")
    for warning in document.warnings:
        print(f"  warning: {warning}")
    print(
        f"Chunks: {batch.total_chunks} | avg {batch.average_chunk_size:.0f} | "
        f"largest {batch.largest_chunk} | smallest {batch.smallest_chunk}"
    )
    print(f"Batch {batch.id} is {batch.status.value}")


if __name__ == "__main__":
    main()
