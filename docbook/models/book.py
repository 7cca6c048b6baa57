"""Parsed book data models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from docbook.models.document import BookModel


class Section(BaseModel):
    """A table-of-contents entry inside a chapter.

    The section's markup stays inline in the parent chapter's
    ``html_content``; the section itself only carries an id and a title.
    """

    id: str  # "s<chapter>-<section>"
    title: str


class Chapter(BaseModel):
    """A chapter opened by a primary heading (or synthesized)."""

    id: str  # "ch<N>"
    title: str
    content: str = ""  # Plain text, paragraphs separated by blank lines
    html_content: str = ""
    sections: list[Section] = Field(default_factory=list)


class ParsedBook(BaseModel):
    """The result of parsing a document into chapters."""

    title: str
    chapters: list[Chapter] = Field(default_factory=list)
    raw_html: str = ""
    json_data: BookModel | None = None
    file_format: str = "docx"  # "docx", "html"
    source_name: str = ""
