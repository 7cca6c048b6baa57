"""Projection between markup and the normalized page/element book model."""

import html
import logging
import re
from collections.abc import Callable
from datetime import datetime, timezone
from uuid import uuid4

from docbook.config import ElementKindLayout, LayoutConfig
from docbook.ingestion.markup import parse_fragment, top_level_elements
from docbook.models.document import BookElement, BookModel, BookPage, ElementPosition

logger = logging.getLogger(__name__)

# Element kind by source tag; anything not listed is "text".
KIND_BY_TAG: dict[str, str] = {"h1": "heading", "h2": "subheading"}

# Output tag by element kind; anything not listed is "p".
TAG_BY_KIND: dict[str, str] = {"heading": "h1", "subheading": "h2"}

# CSS property names for the style keys the normalizer emits.
STYLE_PROPERTIES: dict[str, str] = {
    "fontSize": "font-size",
    "fontWeight": "font-weight",
    "color": "color",
    "fontFamily": "font-family",
}

_CAMEL_BOUNDARY_RE = re.compile(r"([A-Z])")

IdFactory = Callable[[], str]
Clock = Callable[[], datetime]


def new_id() -> str:
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def classify_tag(tag_name: str) -> str:
    """Return the element kind for an HTML tag name."""
    return KIND_BY_TAG.get(tag_name.lower(), "text")


def css_property(style_key: str) -> str:
    """Convert a camelCase style key to its hyphenated CSS property name."""
    known = STYLE_PROPERTIES.get(style_key)
    if known is not None:
        return known
    return _CAMEL_BOUNDARY_RE.sub(r"-\1", style_key).lower()


def html_to_model(
    markup: str,
    title: str,
    *,
    layout: LayoutConfig | None = None,
    id_factory: IdFactory = new_id,
    clock: Clock = utc_now,
) -> BookModel:
    """Project markup into a single-page normalized book model.

    Each top-level element becomes one BookElement. Kind comes from the tag,
    styles and geometry come from ``layout`` only, and the vertical offset
    grows by a fixed per-kind amount. Text nodes at the top level are
    skipped.

    Args:
        markup: HTML fragment to project.
        title: Book title.
        layout: Layout constants. Defaults to LayoutConfig().
        id_factory: Source of unique ids for the book, page and elements.
        clock: Source of the creation timestamp.

    Returns:
        A BookModel with exactly one page.
    """
    layout = layout or LayoutConfig()
    elements: list[BookElement] = []
    y_position = layout.top_offset

    for node in top_level_elements(parse_fragment(markup)):
        kind = classify_tag(node.name)
        kind_layout = _kind_layout(layout, kind)
        elements.append(
            BookElement(
                id=f"element-{id_factory()}",
                type=kind,
                content=node.get_text(),
                styles={
                    "fontSize": kind_layout.font_size,
                    "fontWeight": kind_layout.font_weight,
                    "color": layout.text_color,
                    "fontFamily": layout.font_family,
                },
                position=ElementPosition(
                    x=layout.left_inset,
                    y=y_position,
                    width=layout.content_width,
                    height=kind_layout.height,
                ),
            )
        )
        y_position += kind_layout.advance

    logger.debug("Normalized %d elements for '%s'", len(elements), title)

    now = clock()
    page = BookPage(
        id=f"page-{id_factory()}",
        title="Page 1",
        order=0,
        created_at=now,
        updated_at=now,
        elements=elements,
    )
    return BookModel(
        book_id=f"book-{id_factory()}",
        title=title,
        created_at=now,
        updated_at=now,
        pages=[page],
    )


def model_to_html(model: BookModel) -> str:
    """Serialize a normalized book model back to markup.

    Emits ``<tag style="...">content</tag>`` per element, pages first then
    elements, with no separators. Positions are not carried over.
    """
    parts: list[str] = []
    for page in model.pages:
        for element in page.elements:
            tag = TAG_BY_KIND.get(element.type, "p")
            style = "; ".join(
                f"{css_property(key)}: {value}" for key, value in element.styles.items()
            )
            content = html.escape(element.content, quote=False)
            parts.append(f'<{tag} style="{html.escape(style)}">{content}</{tag}>')
    return "".join(parts)


def _kind_layout(layout: LayoutConfig, kind: str) -> ElementKindLayout:
    if kind == "heading":
        return layout.heading
    if kind == "subheading":
        return layout.subheading
    return layout.text
