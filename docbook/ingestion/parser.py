"""Book file parser turning DOCX and HTML files into chapters."""

import asyncio
import logging
from pathlib import Path

import chardet
from bs4 import BeautifulSoup

from docbook.config import AppConfig
from docbook.ingestion.converter import DocxConverter
from docbook.ingestion.normalizer import (
    Clock,
    IdFactory,
    html_to_model,
    model_to_html,
    new_id,
    utc_now,
)
from docbook.ingestion.segmenter import segment
from docbook.models.book import ParsedBook

logger = logging.getLogger(__name__)

# Supported file extensions mapped to format identifiers
SUPPORTED_FORMATS: dict[str, str] = {
    ".docx": "docx",
    ".html": "html",
    ".htm": "html",
}


class BookParser:
    """Parses book files into a structured ParsedBook representation.

    DOCX files go through the document converter; HTML files are taken as
    already-converted markup. The markup is projected into the normalized
    book model, re-serialized, and segmented into chapters.

    Args:
        config: AppConfig with converter, layout and parser settings.
        converter: Document converter. Defaults to a DocxConverter built
            from ``config.converter``.
        id_factory: Source of unique ids for the normalized model.
        clock: Source of timestamps for the normalized model.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        converter: DocxConverter | None = None,
        id_factory: IdFactory = new_id,
        clock: Clock = utc_now,
    ) -> None:
        self._config = config or AppConfig()
        self._converter = converter or DocxConverter(self._config.converter)
        self._id_factory = id_factory
        self._clock = clock

    def parse(self, file_path: str | Path) -> ParsedBook:
        """Parse a book file into a ParsedBook structure.

        Args:
            file_path: Path to the book file.

        Returns:
            A ParsedBook containing chapters, markup and the normalized model.

        Raises:
            FileNotFoundError: If file_path does not exist.
            ValueError: If the file format is not supported.
            ConversionError: If the document cannot be converted.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        self._detect_format(path)
        return self.parse_bytes(path.read_bytes(), path.name)

    async def parse_async(self, file_path: str | Path) -> ParsedBook:
        """Parse a book file without blocking the event loop.

        Each call is independent; concurrent calls share no state.
        """
        return await asyncio.to_thread(self.parse, file_path)

    def parse_bytes(self, data: bytes, filename: str) -> ParsedBook:
        """Parse in-memory document bytes.

        Args:
            data: Raw file content.
            filename: Original file name, used for format detection and title.

        Returns:
            A ParsedBook.

        Raises:
            ValueError: If the file format is not supported.
            ConversionError: If the document cannot be converted.
        """
        name = Path(filename)
        file_format = self._detect_format(name)

        if file_format == "docx":
            markup = self._converter.convert(data).markup
        else:
            markup = self._extract_body(self._decode_markup(data, filename))

        return self.parse_markup(markup, name.stem, file_format=file_format, source_name=filename)

    def parse_markup(
        self,
        markup: str,
        title: str,
        file_format: str = "html",
        source_name: str = "",
    ) -> ParsedBook:
        """Build a ParsedBook from converter-produced markup.

        Args:
            markup: HTML fragment.
            title: Book title.
            file_format: Format of the source the markup came from.
            source_name: Original file name, if any.

        Returns:
            A ParsedBook with at least one chapter.
        """
        model = html_to_model(
            markup,
            title,
            layout=self._config.layout,
            id_factory=self._id_factory,
            clock=self._clock,
        )
        processed = model_to_html(model) if self._config.parser.segment_normalized else markup
        chapters = segment(processed)

        logger.info(
            "Parsed '%s': %d chapters, %d elements",
            title,
            len(chapters),
            sum(len(page.elements) for page in model.pages),
        )

        return ParsedBook(
            title=title,
            chapters=chapters,
            raw_html=processed,
            json_data=model,
            file_format=file_format,
            source_name=source_name,
        )

    def _detect_format(self, file_path: Path) -> str:
        """Determine file format from extension.

        Args:
            file_path: Path to the file.

        Returns:
            Format string ("docx", "html").

        Raises:
            ValueError: If extension is not supported.
        """
        ext = file_path.suffix.lower()
        if ext not in SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported file format: '{ext}'. "
                f"Supported: {', '.join(SUPPORTED_FORMATS.keys())}"
            )
        return SUPPORTED_FORMATS[ext]

    def _decode_markup(self, raw_bytes: bytes, filename: str) -> str:
        """Decode HTML bytes with encoding detection.

        Tries UTF-8 first, then uses chardet for fallback detection.

        Args:
            raw_bytes: The file content.
            filename: File name, for log messages.

        Returns:
            The decoded markup.
        """
        try:
            return raw_bytes.decode("utf-8")
        except UnicodeDecodeError:
            pass

        detected = chardet.detect(raw_bytes)
        encoding = detected.get("encoding") or "utf-8"
        confidence = detected.get("confidence", 0)

        if confidence < 0.7:
            logger.warning(
                "Low confidence encoding detection for %s: %s (%.0f%%)",
                filename,
                encoding,
                confidence * 100,
            )

        try:
            return raw_bytes.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            try:
                return raw_bytes.decode("windows-1252")
            except UnicodeDecodeError:
                logger.error("Failed to decode file: %s", filename)
                return raw_bytes.decode("utf-8", errors="replace")

    def _extract_body(self, markup: str) -> str:
        """Return the body content of a full HTML document.

        Fragments are returned unchanged. Scripts and styles are removed
        from full documents.
        """
        if "<body" not in markup.lower():
            return markup

        soup = BeautifulSoup(markup, "html.parser")
        for tag in soup(["script", "style"]):
            tag.decompose()
        return soup.body.decode_contents() if soup.body else markup
