"""Heading-driven segmentation of markup into chapters and sections."""

import logging
from dataclasses import dataclass, field
from functools import reduce

from bs4 import Tag

from docbook.ingestion.markup import parse_fragment, top_level_elements
from docbook.models.book import Chapter, Section

logger = logging.getLogger(__name__)

CHAPTER_TAG = "h1"
SECTION_TAG = "h2"
SUBSECTION_TAG = "h3"

INTRODUCTION_TITLE = "Introduction"
FALLBACK_TITLE = "Content"
PARAGRAPH_SEPARATOR = "\n\n"


@dataclass
class _SegmentState:
    """Accumulator threaded through the segmentation pass."""

    chapters: list[Chapter] = field(default_factory=list)
    current: Chapter | None = None
    chapter_index: int = 0
    section_index: int = 0
    content_buffer: list[str] = field(default_factory=list)
    html_buffer: list[str] = field(default_factory=list)


def segment(markup: str) -> list[Chapter]:
    """Split markup into an ordered list of chapters.

    Walks the top-level elements once, in document order. ``h1`` opens a
    chapter, ``h2`` records a section in the open chapter, ``h3`` is kept
    as body markup, and anything else is chapter body. Content before the
    first ``h1`` goes into an implicit "Introduction" chapter.

    Args:
        markup: HTML fragment to segment.

    Returns:
        At least one Chapter. When the markup has no ``h1`` anywhere, a single
        "Content" chapter holds the whole input unsegmented.
    """
    container = parse_fragment(markup)
    state = reduce(_consume, top_level_elements(container), _SegmentState())
    chapters = _flush(state).chapters

    if container.find(CHAPTER_TAG) is None:
        logger.debug("No <%s> found; using a single fallback chapter", CHAPTER_TAG)
        return [
            Chapter(
                id="ch1",
                title=FALLBACK_TITLE,
                content=container.get_text().strip(),
                html_content=markup,
            )
        ]
    return chapters


def _consume(state: _SegmentState, node: Tag) -> _SegmentState:
    """Fold one top-level element into the segmentation state."""
    tag_name = node.name.lower()
    text = node.get_text().strip()

    if tag_name == CHAPTER_TAG:
        _flush(state)
        _open_chapter(state, text or f"Chapter {state.chapter_index + 1}")
    elif tag_name == SECTION_TAG and state.current is not None:
        state.section_index += 1
        state.current.sections.append(
            Section(
                id=f"s{state.chapter_index}-{state.section_index}",
                title=text or f"Section {state.section_index}",
            )
        )
        state.html_buffer.append(f"<h2>{node.decode_contents()}</h2>")
    elif tag_name == SUBSECTION_TAG and state.current is not None:
        state.html_buffer.append(f"<h3>{node.decode_contents()}</h3>")
    elif tag_name in (SECTION_TAG, SUBSECTION_TAG):
        # No chapter to attach to yet.
        logger.debug("Dropping <%s> found before the first chapter", tag_name)
    elif state.current is not None:
        state.content_buffer.append(text)
        state.html_buffer.append(str(node))
    elif text:
        _open_chapter(state, INTRODUCTION_TITLE)
        state.content_buffer.append(text)
        state.html_buffer.append(str(node))

    return state


def _open_chapter(state: _SegmentState, title: str) -> None:
    state.chapter_index += 1
    state.section_index = 0
    state.current = Chapter(id=f"ch{state.chapter_index}", title=title)


def _flush(state: _SegmentState) -> _SegmentState:
    """Close the open chapter, if any, and clear the buffers."""
    if state.current is not None:
        state.current.content = PARAGRAPH_SEPARATOR.join(state.content_buffer)
        state.current.html_content = "".join(state.html_buffer)
        state.chapters.append(state.current)
        state.current = None
    state.content_buffer = []
    state.html_buffer = []
    return state
