"""Go source model: parse Go declarations and print generated Go code."""

from __future__ import annotations

from .gofmt import gofmt
from .parse import parse
from .printer import format_file

__all__ = [
    "format_file",
    "gofmt",
    "parse",
]
