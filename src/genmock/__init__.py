"""genmock: generate call-tracking mock implementations of Go interfaces."""

from __future__ import annotations

from . import errors
from .config import GenerateOptions, TrackerRuntime, Visibility
from .generate import GeneratedMock, generate_mock, render_mock, write_mock

__all__ = [
    "GenerateOptions",
    "GeneratedMock",
    "TrackerRuntime",
    "Visibility",
    "errors",
    "generate_mock",
    "render_mock",
    "write_mock",
]
