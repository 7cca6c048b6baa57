"""Normalized page/element book model.

Field names are snake_case in Python and camelCase in the serialized JSON
record (``model_dump(by_alias=True)``). Every default is a literal
presentation constant; none of them is derived from the source document.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ElementType = Literal["heading", "subheading", "text"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PageSize(_CamelModel):
    name: str = "A4"
    width: int = 794
    height: int = 1123
    width_mm: int = 210
    height_mm: int = 297


class BoxSpacing(_CamelModel):
    top: int = 0
    bottom: int = 0
    left: int = 0
    right: int = 0


class PageNumbering(_CamelModel):
    enabled: bool = True
    format: str = "english"
    position: str = "bottom-center"
    prefix: str = "— "
    suffix: str = " —"
    start_from: int = 1
    font_size: str = "14px"


class GlobalSettings(_CamelModel):
    """Book-wide styling defaults."""

    background_color: str = "#ffffff"
    background_image: str = ""
    background_image_opacity: float = 1
    background_image_size: str = "cover"
    background_image_position: str = "center"
    default_font_family: str = "Inter, system-ui, sans-serif"
    default_font_size: str = "14px"
    default_line_height: str = "1.5"
    default_text_color: str = "#333333"
    margins: BoxSpacing = Field(
        default_factory=lambda: BoxSpacing(top=32, bottom=32, left=48, right=48)
    )
    padding: BoxSpacing = Field(
        default_factory=lambda: BoxSpacing(top=16, bottom=16, left=0, right=0)
    )
    border_radius: int = 0
    shadow: bool = True
    shadow_color: str = "#000000"
    shadow_opacity: float = 0.1
    page_numbering: PageNumbering = Field(default_factory=PageNumbering)


class ElementPosition(_CamelModel):
    x: int
    y: int
    width: int
    height: int


class BookElement(_CamelModel):
    """A single positioned, styled content block."""

    id: str
    type: ElementType
    content: str
    styles: dict[str, str] = Field(default_factory=dict)  # camelCase CSS keys
    position: ElementPosition


class BookPage(_CamelModel):
    id: str
    title: str
    order: int = 0
    created_at: datetime
    updated_at: datetime
    elements: list[BookElement] = Field(default_factory=list)


class BookModel(_CamelModel):
    """The normalized book: a single page holding every element in order."""

    book_id: str
    title: str
    page_size: PageSize = Field(default_factory=PageSize)
    global_settings: GlobalSettings = Field(default_factory=GlobalSettings)
    zoom: float = 1
    total_pages: int = 1
    created_at: datetime
    updated_at: datetime
    pages: list[BookPage] = Field(default_factory=list)

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize to the camelCase JSON record used for export and copy."""
        return self.model_dump_json(by_alias=True, indent=indent)
