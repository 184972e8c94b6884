"""Exceptions raised by the analyzer."""

from typing import Any


class AuditError(Exception):
    """Base class for analyzer failures."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human readable description
            context: Extra structured data (file, line, ...)

        """
        super().__init__(message)
        self.context = context or {}


class SourceParseError(AuditError):
    """Raised when a source file cannot be parsed into a clean syntax tree."""


class CatalogLoadError(AuditError):
    """Raised when a catalog file is unreadable or not a JSON object."""
