from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

from .errors import ConfigError
from .gosource.model import default_import_name

DEFAULT_TRACKER_IMPORT = "github.com/philpearl/ut"


class Visibility(enum.Enum):
    """Naming convention for the generated constructor.

    Chosen explicitly rather than read off the mock name's first letter.
    """

    EXPORTED = "exported"
    UNEXPORTED = "unexported"


@dataclass(frozen=True)
class TrackerRuntime:
    """The Go call-tracking package every generated mock delegates to."""

    import_path: str = DEFAULT_TRACKER_IMPORT
    interface: str = "CallTracker"
    constructor: str = "NewCallRecords"

    @property
    def package(self) -> str:
        return default_import_name(self.import_path)


def default_tracker_runtime() -> TrackerRuntime:
    """Return the tracker runtime to generate against.

    Override the import path with `GENMOCK_TRACKER_IMPORT`.
    """
    override = os.environ.get("GENMOCK_TRACKER_IMPORT")
    if override:
        return TrackerRuntime(import_path=override)
    return TrackerRuntime()


@dataclass(frozen=True)
class GenerateOptions:
    filename: Path
    interface: str
    package: str
    outfile: Path | None = None
    mock_name: str | None = None
    visibility: Visibility = Visibility.EXPORTED
    # Import path of the package declaring the interface. Needed when the
    # mock lives in another package and the interface uses local types.
    source_import: str | None = None
    qualifier: str | None = None
    tracker: TrackerRuntime = field(default_factory=default_tracker_runtime)
    gofmt: bool = False

    def resolved(self) -> "GenerateOptions":
        """Validate and fill in defaults the same way the CLI does."""
        if str(self.filename) in {"", "."}:
            raise ConfigError("filename must be specified")
        if not self.interface:
            raise ConfigError("interface must be specified")
        if not self.package:
            raise ConfigError("package must be specified")
        if not self.package.isidentifier():
            raise ConfigError(f"invalid package name: {self.package!r}")
        if self.mock_name is not None and not self.mock_name.isidentifier():
            raise ConfigError(f"invalid mock name: {self.mock_name!r}")
        if self.qualifier is not None and not self.qualifier.isidentifier():
            raise ConfigError(f"invalid qualifier: {self.qualifier!r}")

        return replace(self, outfile=self.output_path, mock_name=self.mock_type_name)

    @property
    def mock_type_name(self) -> str:
        return self.mock_name if self.mock_name is not None else "Mock" + self.interface

    @property
    def output_path(self) -> Path:
        if self.outfile is not None:
            return Path(self.outfile)
        return Path(f"mock{self.interface.lower()}.go")
