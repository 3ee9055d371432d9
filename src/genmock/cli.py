from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from pathlib import Path

from .config import GenerateOptions, TrackerRuntime, Visibility, default_tracker_runtime
from .errors import GenMockError

EXIT_FAILURE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="genmock")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version", help="Print genmock version.")

    p_gen = sub.add_parser("generate", help="Generate a mock implementation of a Go interface.")
    p_gen.add_argument(
        "--filename",
        required=True,
        help="The file that contains the interface definition.",
    )
    p_gen.add_argument("--interface", required=True, help="The interface to create a mock for.")
    p_gen.add_argument("--package", required=True, help="Package name to use for the mock file.")
    p_gen.add_argument(
        "--outfile",
        default=None,
        help="The file to create the mock in (default: mock<interface>.go in the current directory).",
    )
    p_gen.add_argument("--mock", default=None, help="Name for the mock type (default: Mock<interface>).")
    p_gen.add_argument(
        "--visibility",
        choices=[v.value for v in Visibility],
        default=Visibility.EXPORTED.value,
        help="Constructor naming: exported (NewX) or unexported (newX).",
    )
    p_gen.add_argument(
        "--source-import",
        default=None,
        help="Import path of the interface's package; required when the mock lives in another "
        "package and the interface uses types declared next to it.",
    )
    p_gen.add_argument(
        "--qualifier",
        default=None,
        help="Identifier used to qualify the interface's local types (default: its package name).",
    )
    p_gen.add_argument(
        "--tracker-import",
        default=None,
        help="Import path of the call-tracking package (default: GENMOCK_TRACKER_IMPORT or "
        "github.com/philpearl/ut).",
    )
    p_gen.add_argument("--gofmt", action="store_true", help="Pass the output through gofmt.")
    p_gen.add_argument("--stdout", action="store_true", help="Print the mock instead of writing --outfile.")
    p_gen.add_argument("-v", "--verbose", action="store_true", help="Log pipeline details to stderr.")
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _options(args: argparse.Namespace) -> GenerateOptions:
    tracker = default_tracker_runtime()
    if args.tracker_import:
        tracker = TrackerRuntime(import_path=args.tracker_import)
    return GenerateOptions(
        filename=Path(args.filename),
        interface=args.interface,
        package=args.package,
        outfile=Path(args.outfile) if args.outfile else None,
        mock_name=args.mock,
        visibility=Visibility(args.visibility),
        source_import=args.source_import,
        qualifier=args.qualifier,
        tracker=tracker,
        gofmt=bool(args.gofmt),
    )


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(bool(getattr(args, "verbose", False)))

    if args.cmd == "version":
        try:
            print(importlib.metadata.version("genmock"))
        except importlib.metadata.PackageNotFoundError:
            print("0.0.0")
        return

    if args.cmd == "generate":
        from .generate import render_mock, write_mock

        try:
            opts = _options(args)
            if args.stdout:
                sys.stdout.write(render_mock(opts))
            else:
                write_mock(opts)
        except GenMockError as e:
            print(f"genmock: error: {e}", file=sys.stderr)
            raise SystemExit(EXIT_FAILURE) from None
        return
