"""Domain-specific errors for genmock."""

from __future__ import annotations


class GenMockError(Exception):
    """Base error for genmock."""


class ConfigError(GenMockError):
    """Raised when generation options are missing or inconsistent."""


class InputError(GenMockError):
    """Raised when the source file cannot be read."""


class ParseError(GenMockError):
    """Raised when Go source cannot be parsed."""

    def __init__(self, message: str, *, filename: str | None = None, line: int = 0, column: int = 0):
        self.filename = filename
        self.line = line
        self.column = column
        where = filename or "<source>"
        if line:
            where = f"{where}:{line}:{column}"
        super().__init__(f"{where}: {message}")


class InterfaceNotFoundError(GenMockError):
    """Raised when the requested interface is not declared in the source unit."""


class UnresolvedEmbedError(GenMockError):
    """Raised when an embedded interface cannot be resolved within the source unit."""


class UnsupportedTypeShapeError(GenMockError):
    """Raised when a local type appears somewhere a qualifier cannot be attached."""


class ImportConflictError(GenMockError):
    """Raised when the generated file would need two imports under one name or one path."""


class FormatError(GenMockError):
    """Raised when the optional gofmt pass fails."""


class OutputError(GenMockError):
    """Raised when the generated file cannot be written."""
