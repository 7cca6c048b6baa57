"""Tests for the book parser pipeline."""

import asyncio
from datetime import datetime, timezone
from itertools import count
from pathlib import Path
from unittest.mock import MagicMock

import docx
import pytest

from docbook.config import AppConfig, ParserConfig
from docbook.errors import ConversionError
from docbook.ingestion.converter import ConversionResult
from docbook.ingestion.parser import SUPPORTED_FORMATS, BookParser

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "sample_markup"


@pytest.fixture
def parser() -> BookParser:
    counter = count(1)
    return BookParser(
        id_factory=lambda: str(next(counter)),
        clock=lambda: datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def _write_docx(path: Path) -> Path:
    document = docx.Document()
    document.add_paragraph("Preface text")
    document.add_heading("Getting Started", level=1)
    document.add_paragraph("Hello")
    document.add_heading("Setup", level=2)
    document.add_paragraph("World")
    document.add_heading("Next Steps", level=1)
    document.add_paragraph("Done")
    document.save(str(path))
    return path


class TestBookParserDocx:
    """Tests for DOCX parsing through the real converter."""

    def test_parse_docx_chapters(self, parser: BookParser, tmp_path: Path) -> None:
        result = parser.parse(_write_docx(tmp_path / "My Book.docx"))

        assert result.title == "My Book"
        assert result.file_format == "docx"
        assert result.source_name == "My Book.docx"
        assert [c.title for c in result.chapters] == [
            "Introduction",
            "Getting Started",
            "Next Steps",
        ]
        assert [s.id for s in result.chapters[1].sections] == ["s2-1"]
        assert result.chapters[1].content == "Hello\n\nWorld"

    def test_raw_html_is_normalized_markup(self, parser: BookParser, tmp_path: Path) -> None:
        result = parser.parse(_write_docx(tmp_path / "book.docx"))

        assert result.raw_html.startswith('<p style="font-size: 14px;')
        assert "<h1 style=" in result.raw_html
        assert result.json_data is not None
        assert len(result.json_data.pages[0].elements) == 7
        assert result.json_data.title == "book"

    def test_parse_bytes(self, parser: BookParser, tmp_path: Path) -> None:
        data = _write_docx(tmp_path / "book.docx").read_bytes()
        result = parser.parse_bytes(data, "Other.DOCX")

        assert result.title == "Other"
        assert len(result.chapters) == 3

    def test_invalid_docx_raises_conversion_error(
        self, parser: BookParser, tmp_path: Path
    ) -> None:
        bad = tmp_path / "broken.docx"
        bad.write_bytes(b"not a zip archive")

        with pytest.raises(ConversionError):
            parser.parse(bad)

    def test_uses_injected_converter(self) -> None:
        converter = MagicMock()
        converter.convert.return_value = ConversionResult(markup="<h1>Only</h1><p>x</p>")

        result = BookParser(converter=converter).parse_bytes(b"bytes", "a.docx")

        converter.convert.assert_called_once_with(b"bytes")
        assert [c.title for c in result.chapters] == ["Only"]


class TestBookParserHtml:
    """Tests for HTML markup input."""

    def test_parse_html_fixture(self, parser: BookParser) -> None:
        result = parser.parse(FIXTURES_DIR / "sample_book.html")

        assert result.file_format == "html"
        assert result.title == "sample_book"
        assert [c.title for c in result.chapters] == [
            "Introduction",
            "The Beginning",
            "The Middle",
        ]

    def test_h3_lost_through_normalization(self, parser: BookParser) -> None:
        result = parser.parse(FIXTURES_DIR / "sample_book.html")
        html_content = result.chapters[1].html_content

        assert "<h3>" not in html_content
        assert "Thunder</p>" in html_content

    def test_segment_original_markup(self) -> None:
        config = AppConfig(parser=ParserConfig(segment_normalized=False))
        result = BookParser(config).parse(FIXTURES_DIR / "sample_book.html")

        assert "<h3>Thunder</h3>" in result.chapters[1].html_content
        assert result.raw_html.startswith("<p>A short foreword")

    def test_full_document_body_extracted(self, parser: BookParser, tmp_path: Path) -> None:
        f = tmp_path / "page.html"
        f.write_text(
            "<html><head><title>x</title><script>alert(1)</script></head>"
            "<body><h1>Chapter</h1><p>Body</p></body></html>",
            encoding="utf-8",
        )
        result = parser.parse(f)

        assert [c.title for c in result.chapters] == ["Chapter"]
        assert result.chapters[0].content == "Body"

    def test_windows_1252_html(self, parser: BookParser, tmp_path: Path) -> None:
        f = tmp_path / "legacy.htm"
        f.write_bytes("<h1>Café</h1><p>Crème brûlée for everyone</p>".encode("windows-1252"))

        result = parser.parse(f)
        assert "Crème" in result.chapters[0].content

    def test_empty_html_yields_content_chapter(self, parser: BookParser, tmp_path: Path) -> None:
        f = tmp_path / "empty.html"
        f.write_text("", encoding="utf-8")

        result = parser.parse(f)
        assert len(result.chapters) == 1
        assert result.chapters[0].title == "Content"
        assert result.chapters[0].content == ""

    def test_parse_markup_example(self, parser: BookParser) -> None:
        result = parser.parse_markup(
            "<h1>Intro</h1><p>Hello</p><h2>Setup</h2><p>World</p>", "Example"
        )
        chapter = result.chapters[0]

        assert (chapter.id, chapter.title, chapter.content) == ("ch1", "Intro", "Hello\n\nWorld")
        assert [(s.id, s.title) for s in chapter.sections] == [("s1-1", "Setup")]


class TestBookParserAsync:
    def test_parse_async(self, parser: BookParser) -> None:
        result = asyncio.run(parser.parse_async(FIXTURES_DIR / "sample_book.html"))
        assert len(result.chapters) == 3

    @pytest.mark.asyncio
    async def test_concurrent_parses_are_independent(self, tmp_path: Path) -> None:
        a = tmp_path / "a.html"
        b = tmp_path / "b.html"
        a.write_text("<h1>A</h1><p>a</p>", encoding="utf-8")
        b.write_text("<h1>B</h1><h1>C</h1>", encoding="utf-8")
        parser = BookParser()

        first, second = await asyncio.gather(parser.parse_async(a), parser.parse_async(b))

        assert [c.title for c in first.chapters] == ["A"]
        assert [c.title for c in second.chapters] == ["B", "C"]


class TestDetectFormat:
    """Tests for format detection from file extension."""

    def test_supported_extensions(self, parser: BookParser) -> None:
        for ext, fmt in SUPPORTED_FORMATS.items():
            assert parser._detect_format(Path(f"book{ext}")) == fmt

    def test_unsupported_extension_raises(self, parser: BookParser) -> None:
        with pytest.raises(ValueError, match="Unsupported file format"):
            parser._detect_format(Path("book.pdf"))

    def test_case_insensitive(self, parser: BookParser) -> None:
        assert parser._detect_format(Path("book.DOCX")) == "docx"
        assert parser._detect_format(Path("book.Htm")) == "html"


class TestParserErrors:
    """Tests for error handling."""

    def test_nonexistent_file_raises(self, parser: BookParser) -> None:
        with pytest.raises(FileNotFoundError):
            parser.parse("/nonexistent/file.docx")

    def test_unsupported_format_raises(self, parser: BookParser, tmp_path: Path) -> None:
        f = tmp_path / "book.txt"
        f.touch()
        with pytest.raises(ValueError, match="Unsupported file format"):
            parser.parse(f)

    def test_unsupported_bytes_format_raises(self, parser: BookParser) -> None:
        with pytest.raises(ValueError):
            parser.parse_bytes(b"x", "book.odt")
