"""Book export."""

from docbook.export.exporter import EXPORT_FORMATS, BookExporter

__all__ = ["EXPORT_FORMATS", "BookExporter"]
