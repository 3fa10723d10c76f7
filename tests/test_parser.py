"""Tests for the document parser."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from maturion.ingestion.parser import SUPPORTED_FORMATS, DocumentParser


@pytest.fixture
def parser() -> DocumentParser:
    return DocumentParser()


class TestDocumentParserTxt:
    """Tests for plain text and Markdown parsing."""

    def test_parse_utf8_file(self, parser: DocumentParser, tmp_path: Path) -> None:
        content = "Access Control Policy\nAll visitors must sign in at reception."
        f = tmp_path / "policy.txt"
        f.write_text(content, encoding="utf-8")

        result = parser.parse(f)
        assert result.text == content
        assert result.file_format == "txt"
        assert result.extraction_method == "utf-8"
        assert result.warnings == []

    def test_parse_markdown_as_txt(self, parser: DocumentParser, tmp_path: Path) -> None:
        f = tmp_path / "notes.md"
        f.write_text("Risk Register\n\n- item one", encoding="utf-8")

        result = parser.parse(f)
        assert result.file_format == "txt"
        assert "item one" in result.text

    def test_parse_utf16_file(self, parser: DocumentParser, tmp_path: Path) -> None:
        content = "Leadership and governance maturity"
        f = tmp_path / "utf16.txt"
        f.write_bytes(content.encode("utf-16"))

        result = parser.parse(f)
        assert "governance" in result.text
        assert result.extraction_method == "chardet"

    def test_parse_empty_file_warns(self, parser: DocumentParser, tmp_path: Path) -> None:
        f = tmp_path / "empty.txt"
        f.write_text("", encoding="utf-8")

        result = parser.parse(f)
        assert result.text == ""
        assert result.warnings == ["No text extracted"]
        assert result.title == "empty"


class TestDocumentParserPdf:
    """Tests for PDF parsing (mocked fitz)."""

    def test_parse_pdf_extracts_text(self, parser: DocumentParser, tmp_path: Path) -> None:
        pdf_path = tmp_path / "audit.pdf"
        pdf_path.touch()

        mock_page = MagicMock()
        mock_page.get_text.return_value = "Perimeter Security\nFences are inspected monthly."

        mock_doc = MagicMock()
        mock_doc.__iter__ = lambda self: iter([mock_page])
        mock_doc.__enter__ = lambda self: self
        mock_doc.__exit__ = MagicMock(return_value=False)

        mock_fitz = MagicMock()
        mock_fitz.open.return_value = mock_doc

        with patch.dict("sys.modules", {"fitz": mock_fitz}):
            result = parser.parse(pdf_path)

        assert "Fences are inspected" in result.text
        assert result.file_format == "pdf"
        assert result.extraction_method == "pymupdf"
        assert result.title == "Perimeter Security"

    def test_parse_pdf_corrupt_logs_error(
        self, parser: DocumentParser, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        pdf_path = tmp_path / "corrupt.pdf"
        pdf_path.touch()

        mock_fitz = MagicMock()
        mock_fitz.open.side_effect = RuntimeError("Corrupt PDF")

        with patch.dict("sys.modules", {"fitz": mock_fitz}):
            result = parser.parse(pdf_path)

        assert result.text == ""
        assert "No text extracted" in result.warnings
        assert "Failed to parse PDF" in caplog.text


class TestDocumentParserDocx:
    """Tests for DOCX parsing (mocked python-docx)."""

    def test_parse_docx_extracts_paragraphs(
        self, parser: DocumentParser, tmp_path: Path
    ) -> None:
        docx_path = tmp_path / "standard.docx"
        docx_path.touch()

        mock_para1 = MagicMock()
        mock_para1.text = "Mini Performance Standard 1"
        mock_para2 = MagicMock()
        mock_para2.text = "Criteria: documented process exists"
        mock_para_empty = MagicMock()
        mock_para_empty.text = "  "

        mock_doc = MagicMock()
        mock_doc.paragraphs = [mock_para1, mock_para_empty, mock_para2]

        mock_docx_mod = MagicMock()
        mock_docx_mod.Document.return_value = mock_doc

        with patch.dict("sys.modules", {"docx": mock_docx_mod}):
            result = parser.parse(docx_path)

        assert result.text == "Mini Performance Standard 1\n\nCriteria: documented process exists"
        assert result.file_format == "docx"
        assert result.extraction_method == "python-docx"


class TestDetectFormat:
    def test_supported_extensions(self, parser: DocumentParser) -> None:
        for ext, fmt in SUPPORTED_FORMATS.items():
            assert parser._detect_format(Path(f"doc{ext}")) == fmt

    def test_unsupported_extension_raises(self, parser: DocumentParser) -> None:
        with pytest.raises(ValueError, match="Unsupported file format"):
            parser._detect_format(Path("doc.xyz"))

    def test_case_insensitive(self, parser: DocumentParser) -> None:
        assert parser._detect_format(Path("doc.PDF")) == "pdf"
        assert parser._detect_format(Path("doc.Docx")) == "docx"


class TestExtractTitle:
    def test_title_from_first_line(self, parser: DocumentParser) -> None:
        text = "Incident Response Plan\nSection 1"
        assert parser._extract_title_from_text(text, Path("plan.pdf")) == "Incident Response Plan"

    def test_skips_numeric_lines(self, parser: DocumentParser) -> None:
        text = "2024-01-01\nIncident Response Plan"
        assert parser._extract_title_from_text(text, Path("plan.pdf")) == "Incident Response Plan"

    def test_title_fallback_to_filename(self, parser: DocumentParser) -> None:
        assert parser._extract_title_from_text("", Path("my_policy.pdf")) == "my_policy"


class TestParserErrors:
    def test_nonexistent_file_raises(self, parser: DocumentParser) -> None:
        with pytest.raises(FileNotFoundError):
            parser.parse("/nonexistent/file.txt")

    def test_unsupported_format_raises(self, parser: DocumentParser, tmp_path: Path) -> None:
        f = tmp_path / "doc.html"
        f.touch()
        with pytest.raises(ValueError, match="Unsupported file format"):
            parser.parse(f)
