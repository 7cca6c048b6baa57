"""DOCX to HTML conversion using python-docx."""

import base64
import html
import io
import logging

import docx
from docx.table import Table
from docx.text.hyperlink import Hyperlink
from docx.text.paragraph import Paragraph
from docx.text.run import Run
from pydantic import BaseModel, Field

from docbook.config import ConverterConfig
from docbook.errors import ConversionError

logger = logging.getLogger(__name__)

# Paragraph styles mapped when the default style map is enabled. The
# configured style map takes precedence over these.
DEFAULT_STYLE_MAP: dict[str, str] = {
    "Heading 1": "h1",
    "Heading 2": "h2",
    "Heading 3": "h3",
    "Heading 4": "h4",
    "Heading 5": "h5",
    "Heading 6": "h6",
}

# Paragraph style prefixes rendered as list items, with their list tag.
LIST_STYLE_PREFIXES: dict[str, str] = {
    "List Bullet": "ul",
    "List Number": "ol",
}

PLAIN_STYLES = frozenset({"", "Normal", "Body Text", "List Paragraph"})

CONVERSION_FAILED_MESSAGE = (
    "Failed to parse the document. Please ensure it's a valid DOCX file."
)


class ConversionResult(BaseModel):
    """Markup produced from a document, with converter warnings."""

    markup: str
    messages: list[str] = Field(default_factory=list)


class DocxConverter:
    """Converts DOCX bytes into an HTML fragment.

    Paragraph styles are mapped to block tags through the style map, bold,
    italic and underline runs become ``strong``, ``em`` and ``u``, tables
    become ``table`` markup and images are inlined as base64 data URIs.

    Args:
        config: ConverterConfig with the style map and empty paragraph policy.
    """

    def __init__(self, config: ConverterConfig | None = None) -> None:
        self._config = config or ConverterConfig()
        style_map = dict(DEFAULT_STYLE_MAP) if self._config.include_default_style_map else {}
        style_map.update(self._config.style_map)
        self._style_map = style_map

    def convert(self, data: bytes) -> ConversionResult:
        """Convert DOCX bytes to markup.

        Args:
            data: Raw bytes of a DOCX package.

        Returns:
            ConversionResult with the HTML fragment.

        Raises:
            ConversionError: If the bytes are not a readable DOCX document.
        """
        messages: list[str] = []
        try:
            document = docx.Document(io.BytesIO(data))
            markup = self._convert_body(document, messages)
        except Exception as exc:
            logger.exception("Failed to convert DOCX (%d bytes)", len(data))
            raise ConversionError(CONVERSION_FAILED_MESSAGE) from exc

        for message in messages:
            logger.debug("Converter: %s", message)
        return ConversionResult(markup=markup, messages=messages)

    def _convert_body(self, document, messages: list[str]) -> str:
        parts: list[str] = []
        open_list: str | None = None

        for block in document.iter_inner_content():
            if isinstance(block, Table):
                if open_list:
                    parts.append(f"</{open_list}>")
                    open_list = None
                parts.append(self._convert_table(block))
                continue

            list_tag = self._list_tag(block)
            if list_tag is None and open_list:
                parts.append(f"</{open_list}>")
                open_list = None

            inner = self._inline_markup(block)
            if self._is_empty(block, inner) and not self._config.preserve_empty_paragraphs:
                continue

            if list_tag is not None:
                if open_list != list_tag:
                    if open_list:
                        parts.append(f"</{open_list}>")
                    parts.append(f"<{list_tag}>")
                    open_list = list_tag
                parts.append(f"<li>{inner}</li>")
            else:
                parts.append(self._wrap_block(block, inner, messages))

        if open_list:
            parts.append(f"</{open_list}>")
        return "".join(parts)

    def _style_name(self, paragraph: Paragraph) -> str:
        style = paragraph.style
        return style.name if style is not None and style.name else ""

    def _list_tag(self, paragraph: Paragraph) -> str | None:
        style_name = self._style_name(paragraph)
        for prefix, tag in LIST_STYLE_PREFIXES.items():
            if style_name.startswith(prefix):
                return tag
        return None

    def _wrap_block(self, paragraph: Paragraph, inner: str, messages: list[str]) -> str:
        style_name = self._style_name(paragraph)
        target = self._style_map.get(style_name)
        if target is None:
            if style_name not in PLAIN_STYLES:
                message = f"Unrecognised paragraph style: '{style_name}'"
                if message not in messages:
                    messages.append(message)
            target = "p"

        tag, _, css_class = target.partition(".")
        if css_class:
            return f'<{tag} class="{css_class}">{inner}</{tag}>'
        return f"<{tag}>{inner}</{tag}>"

    def _is_empty(self, paragraph: Paragraph, inner: str) -> bool:
        return not paragraph.text.strip() and "<img" not in inner

    def _inline_markup(self, paragraph: Paragraph) -> str:
        """Render the runs and hyperlinks of a paragraph as inline markup."""
        parts: list[str] = []
        for item in paragraph.iter_inner_content():
            if isinstance(item, Hyperlink):
                text = "".join(self._run_markup(run, paragraph) for run in item.runs)
                href = html.escape(item.url or "")
                parts.append(f'<a href="{href}">{text}</a>')
            elif isinstance(item, Run):
                parts.append(self._run_markup(item, paragraph))
        return "".join(parts)

    def _run_markup(self, run: Run, paragraph: Paragraph) -> str:
        markup = html.escape(run.text, quote=False)
        if markup:
            if run.underline:
                markup = f"<u>{markup}</u>"
            if run.italic:
                markup = f"<em>{markup}</em>"
            if run.bold:
                markup = f"<strong>{markup}</strong>"
        return markup + "".join(self._run_images(run, paragraph))

    def _run_images(self, run: Run, paragraph: Paragraph) -> list[str]:
        images: list[str] = []
        for rel_id in run._element.xpath(".//a:blip/@r:embed"):
            image_part = paragraph.part.related_parts[rel_id]
            encoded = base64.b64encode(image_part.blob).decode("ascii")
            images.append(f'<img src="data:{image_part.content_type};base64,{encoded}" />')
        return images

    def _convert_table(self, table: Table) -> str:
        rows: list[str] = []
        for row in table.rows:
            cells: list[str] = []
            for cell in row.cells:
                paragraphs = [
                    f"<p>{inner}</p>"
                    for inner in (self._inline_markup(p) for p in cell.paragraphs)
                    if inner.strip()
                ]
                cells.append(f"<td>{''.join(paragraphs)}</td>")
            rows.append(f"<tr>{''.join(cells)}</tr>")
        return f"<table>{''.join(rows)}</table>"
