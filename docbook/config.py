"""Configuration loader for the DOCX book builder."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "DOCX Book Builder"
    version: str = "1.0.0"
    log_level: str = "INFO"


class ConverterConfig(BaseModel):
    """DOCX to HTML conversion configuration.

    ``style_map`` maps Word paragraph style names to an HTML tag, optionally
    followed by a class name (``"h1.title"``).
    """

    style_map: dict[str, str] = Field(
        default_factory=lambda: {
            "Heading 1": "h1",
            "Heading 2": "h2",
            "Heading 3": "h3",
            "Title": "h1.title",
        }
    )
    include_default_style_map: bool = True
    preserve_empty_paragraphs: bool = False


class ElementKindLayout(BaseModel):
    """Style and geometry applied to one kind of normalized element."""

    font_size: str
    font_weight: str
    height: int
    advance: int


class LayoutConfig(BaseModel):
    """Fixed layout constants used by the structural normalizer."""

    left_inset: int = 48
    content_width: int = 698
    top_offset: int = 50
    text_color: str = "#333333"
    font_family: str = "Inter, system-ui, sans-serif"
    heading: ElementKindLayout = Field(
        default_factory=lambda: ElementKindLayout(
            font_size="24px", font_weight="bold", height=40, advance=60
        )
    )
    subheading: ElementKindLayout = Field(
        default_factory=lambda: ElementKindLayout(
            font_size="20px", font_weight="bold", height=32, advance=48
        )
    )
    text: ElementKindLayout = Field(
        default_factory=lambda: ElementKindLayout(
            font_size="14px", font_weight="normal", height=24, advance=36
        )
    )


class ParserConfig(BaseModel):
    """Pipeline wiring options."""

    # Segment the markup re-serialized from the normalized model rather
    # than the converter output.
    segment_normalized: bool = True


class ExportConfig(BaseModel):
    """Export configuration."""

    output_dir: str = "./exports"
    font_family: str = "serif"
    line_height: str = "1.6"
    padding_px: int = 40
    pdf_margin_mm: int = 10
    pdf_page_format: str = "a4"
    pdf_orientation: str = "portrait"
    pdf_image_quality: float = 0.98
    pdf_scale: int = 2


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    converter: ConverterConfig = Field(default_factory=ConverterConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    output_dir = os.getenv("DOCBOOK_OUTPUT_DIR")
    if output_dir:
        config.export.output_dir = output_dir

    return config
