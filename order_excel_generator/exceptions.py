# order_excel_generator/exceptions.py
# Errors surfaced to callers of the order document generator.

from typing import Optional


class OrderExcelError(Exception):
    """Base class for every error raised by the generator."""


class TemplateLoadError(OrderExcelError):
    """The template bytes could not be read as a workbook with a usable sheet."""


class TemplateNotFoundError(OrderExcelError):
    """No anchor row carrying the marker token exists in the sheet."""

    def __init__(self, marker: str, message: Optional[str] = None):
        self.marker = marker
        super().__init__(message or f"No template row containing the placeholder {marker} was found in the sheet")


class AmbiguousTemplateError(TemplateNotFoundError):
    """More than one row carries the marker token and strict mode is on."""

    def __init__(self, marker: str, rows):
        self.rows = list(rows)
        super().__init__(marker, f"Placeholder {marker} found in several rows {self.rows}; expected exactly one template row")


class SerializationError(OrderExcelError):
    """The mutated workbook could not be written back to bytes."""


class ConfigError(OrderExcelError):
    """The generator configuration file is unreadable or invalid."""


class NamespaceConflictError(OrderExcelError, ValueError):
    """A placeholder key is declared both as a header field and a line field."""

    def __init__(self, keys):
        self.keys = sorted(keys)
        super().__init__(f"Placeholder keys present in both header and line namespaces: {', '.join(self.keys)}")
