"""Entry point: parse a DOCX or HTML book and write its exports."""

import argparse
import logging
import sys

from docbook.config import load_config
from docbook.errors import ConversionError, ExportError
from docbook.export.exporter import BookExporter
from docbook.ingestion.parser import BookParser

logger = logging.getLogger("docbook")


def main(argv: list[str] | None = None) -> int:
    """Parse the given book and export it as JSON and HTML."""
    arg_parser = argparse.ArgumentParser(description="Convert a DOCX book into chapters.")
    arg_parser.add_argument("path", help="DOCX or HTML file to parse")
    arg_parser.add_argument("--config", default="config.yaml", help="YAML config file")
    arg_parser.add_argument("--output-dir", default=None, help="Export directory")
    args = arg_parser.parse_args(argv)

    config = load_config(args.config)
    logging.basicConfig(
        level=config.app.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        book = BookParser(config).parse(args.path)
    except ConversionError as exc:
        logger.error("%s", exc)
        return 1

    for chapter in book.chapters:
        print(f"{chapter.id}  {chapter.title}")
        for section in chapter.sections:
            print(f"    {section.id}  {section.title}")

    exporter = BookExporter(config.export)
    try:
        for fmt in ("json", "html"):
            exporter.export(book, fmt, output_dir=args.output_dir)
    except ExportError as exc:
        logger.error("Export failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
