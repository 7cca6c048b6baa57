"""Data models for the DOCX book builder."""

from docbook.models.book import Chapter, ParsedBook, Section
from docbook.models.document import (
    BookElement,
    BookModel,
    BookPage,
    BoxSpacing,
    ElementPosition,
    GlobalSettings,
    PageNumbering,
    PageSize,
)

__all__ = [
    "BookElement",
    "BookModel",
    "BookPage",
    "BoxSpacing",
    "Chapter",
    "ElementPosition",
    "GlobalSettings",
    "PageNumbering",
    "PageSize",
    "ParsedBook",
    "Section",
]
