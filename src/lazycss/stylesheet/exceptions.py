"""
Custom exceptions for lazycss stylesheet handling.
"""

from typing import Any


class StylesheetError(Exception):
    """Base exception for stylesheet-related errors."""

    def __init__(self, message: str = "", path: str | None = None,
                 cause: BaseException | None = None):
        super().__init__(message)
        self.path = path
        self.cause = cause

    @property
    def is_not_found(self) -> bool:
        """Check if the error was caused by a missing file."""
        return isinstance(self.cause, FileNotFoundError)


class ReadError(StylesheetError):
    """A stylesheet source could not be read (missing, unreadable, bad encoding)."""
    pass


class ParseError(StylesheetError):
    """Malformed stylesheet syntax."""

    def __init__(self, message: str, line: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.line = line


class StatError(StylesheetError):
    """Modification time of a file could not be retrieved."""
    pass


class CompileError(StylesheetError):
    """The compiler rejected the source."""

    def __init__(self, message: str, details: list[Any] | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.details = details or []


class WriteError(StylesheetError):
    """Compiled output could not be persisted."""
    pass
