"""Exceptions raised across the conversion and export boundaries."""


class ConversionError(RuntimeError):
    """Raised when document bytes cannot be converted to markup."""


class ExportError(RuntimeError):
    """Raised when a parsed book cannot be written in the requested format."""


class ExportNotAvailableError(ExportError):
    """Raised for export formats that are not implemented yet."""
