"""Document text extraction for PDF, TXT/Markdown and DOCX uploads."""

import logging
import re
from pathlib import Path

import chardet

from maturion.models.document import ExtractedDocument

logger = logging.getLogger(__name__)

# Supported file extensions mapped to format identifiers
SUPPORTED_FORMATS: dict[str, str] = {
    ".pdf": "pdf",
    ".txt": "txt",
    ".md": "txt",
    ".docx": "docx",
}


class DocumentParser:
    """Extracts plain text from uploaded documents."""

    def parse(self, file_path: str | Path) -> ExtractedDocument:
        """Parse a file into an ExtractedDocument.

        Args:
            file_path: Path to the document.

        Returns:
            An ExtractedDocument with the text and extraction metadata.

        Raises:
            FileNotFoundError: If file_path does not exist.
            ValueError: If the file format is not supported.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        file_format = self._detect_format(path)

        dispatch = {
            "pdf": self._parse_pdf,
            "txt": self._parse_txt,
            "docx": self._parse_docx,
        }
        text, method = dispatch[file_format](path)

        warnings: list[str] = []
        if not text.strip():
            logger.warning("No text extracted from %s", path)
            warnings.append("No text extracted")

        return ExtractedDocument(
            title=self._extract_title_from_text(text, path),
            source_path=str(path),
            file_format=file_format,
            text=text,
            extraction_method=method,
            warnings=warnings,
        )

    def _detect_format(self, file_path: Path) -> str:
        ext = file_path.suffix.lower()
        if ext not in SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported file format: '{ext}'. "
                f"Supported: {', '.join(SUPPORTED_FORMATS.keys())}"
            )
        return SUPPORTED_FORMATS[ext]

    def _parse_pdf(self, file_path: Path) -> tuple[str, str]:
        """Extract text from a PDF file using pymupdf (fitz).

        Returns:
            Page texts joined by newlines, and the extraction method.
        """
        import fitz  # type: ignore[import-untyped]

        try:
            with fitz.open(str(file_path)) as doc:
                pages = []
                for page in doc:
                    text = page.get_text("text")
                    if text.strip():
                        pages.append(text)
                return "\n".join(pages), "pymupdf"
        except Exception:
            logger.exception("Failed to parse PDF: %s", file_path)
            return "", "pymupdf"

    def _parse_txt(self, file_path: Path) -> tuple[str, str]:
        """Read a plain text or Markdown file with encoding detection.

        Tries UTF-8 first, then uses chardet for fallback detection.
        """
        try:
            return file_path.read_text(encoding="utf-8"), "utf-8"
        except UnicodeDecodeError:
            pass

        raw_bytes = file_path.read_bytes()
        detected = chardet.detect(raw_bytes)
        encoding = detected.get("encoding") or "utf-8"
        confidence = detected.get("confidence", 0)

        if confidence < 0.7:
            logger.warning(
                "Low confidence encoding detection for %s: %s (%.0f%%)",
                file_path,
                encoding,
                confidence * 100,
            )

        try:
            return raw_bytes.decode(encoding), "chardet"
        except (UnicodeDecodeError, LookupError):
            logger.error("Failed to decode file: %s", file_path)
            return raw_bytes.decode("utf-8", errors="replace"), "utf-8-replace"

    def _parse_docx(self, file_path: Path) -> tuple[str, str]:
        """Extract text from a DOCX file using python-docx.

        Paragraph boundaries become double newlines.
        """
        import docx

        try:
            doc = docx.Document(str(file_path))
            paragraphs = [para.text for para in doc.paragraphs if para.text.strip()]
            return "\n\n".join(paragraphs), "python-docx"
        except Exception:
            logger.exception("Failed to parse DOCX: %s", file_path)
            return "", "python-docx"

    def _extract_title_from_text(self, text: str, file_path: Path) -> str:
        """Use the first short, mostly-alphabetic line as the title.

        Falls back to the filename stem.
        """
        if not text.strip():
            return file_path.stem

        for line in text.strip().split("\n")[:5]:
            stripped = line.strip()
            if stripped and len(stripped) <= 100:
                alpha_chars = len(re.findall(r"[^\W\d_]", stripped))
                if alpha_chars / len(stripped) > 0.5:
                    return stripped

        return file_path.stem
