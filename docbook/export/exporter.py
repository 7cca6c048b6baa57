"""Export of parsed books to PDF, HTML, JSON and the original DOCX."""

import html
import logging
from collections.abc import Callable
from pathlib import Path

from bs4 import BeautifulSoup

from docbook.config import ExportConfig
from docbook.errors import ExportError, ExportNotAvailableError
from docbook.models.book import ParsedBook

logger = logging.getLogger(__name__)

# Export formats mapped to file extensions
EXPORT_FORMATS: dict[str, str] = {
    "pdf": ".pdf",
    "epub": ".epub",
    "docx": ".docx",
    "html": ".html",
    "json": ".json",
}

# Renders a print-ready HTML document to a PDF file.
PdfRenderer = Callable[[str, Path, ExportConfig], None]


class BookExporter:
    """Writes a ParsedBook to disk in one of the supported formats.

    PDF rendering is delegated to ``pdf_renderer``; this class only builds
    the print document it receives.

    Args:
        config: ExportConfig with the output directory and print styling.
        pdf_renderer: Callable that writes the PDF for a print document.
    """

    def __init__(
        self,
        config: ExportConfig | None = None,
        pdf_renderer: PdfRenderer | None = None,
    ) -> None:
        self._config = config or ExportConfig()
        self._pdf_renderer = pdf_renderer

    def export(
        self,
        book: ParsedBook,
        fmt: str,
        *,
        output_dir: str | Path | None = None,
        source_bytes: bytes | None = None,
        source_name: str | None = None,
    ) -> Path:
        """Export a book and return the written file path.

        Args:
            book: The parsed book.
            fmt: One of EXPORT_FORMATS.
            output_dir: Target directory. Defaults to the configured one.
            source_bytes: Original document bytes, required for "docx".
            source_name: File name for the "docx" passthrough. Defaults to
                the book's source name.

        Returns:
            Path of the written file.

        Raises:
            ValueError: If the format is unknown.
            ExportNotAvailableError: If the format is not implemented yet.
            ExportError: If the export cannot be produced.
        """
        fmt = fmt.lower()
        if fmt not in EXPORT_FORMATS:
            raise ValueError(
                f"Unsupported export format: '{fmt}'. "
                f"Supported: {', '.join(EXPORT_FORMATS.keys())}"
            )
        if fmt == "epub":
            raise ExportNotAvailableError(
                "EPUB export is currently under development. Please try PDF or DOCX."
            )

        target_dir = Path(output_dir or self._config.output_dir)
        target_dir.mkdir(parents=True, exist_ok=True)

        if fmt == "docx":
            if source_bytes is None:
                raise ExportError("No DOCX file available")
            target = target_dir / (source_name or book.source_name or f"{book.title}.docx")
            target.write_bytes(source_bytes)
        elif fmt == "json":
            if book.json_data is None:
                raise ExportError("No normalized model available for JSON export")
            target = target_dir / f"{book.title}.json"
            target.write_text(book.json_data.to_json(), encoding="utf-8")
        elif fmt == "html":
            target = target_dir / f"{book.title}.html"
            target.write_text(self.build_print_html(book.title, book.raw_html), encoding="utf-8")
        else:
            if not book.raw_html:
                raise ExportError("No content available for PDF generation")
            if self._pdf_renderer is None:
                raise ExportError("No PDF renderer configured")
            target = target_dir / f"{book.title}.pdf"
            self._pdf_renderer(
                self.build_print_html(book.title, book.raw_html), target, self._config
            )

        logger.info("Exported '%s' as %s to %s", book.title, fmt, target)
        return target

    def build_print_html(self, title: str, raw_html: str) -> str:
        """Wrap book markup in the print layout used for PDF and HTML export.

        The title is centred above the content and images are scaled to the
        page width.
        """
        cfg = self._config
        soup = BeautifulSoup(
            f'<div style="padding: {cfg.padding_px}px; font-family: {cfg.font_family}; '
            f'line-height: {cfg.line_height};">'
            f'<h1 style="text-align: center; margin-bottom: 40px;">'
            f"{html.escape(title, quote=False)}</h1>"
            f"{raw_html}</div>",
            "html.parser",
        )
        wrapper = soup.find("div")
        for img in wrapper.find_all("img"):
            img["style"] = "max-width: 100%; height: auto"
        return str(wrapper)
