"""The generation pipeline: flatten, qualify, synthesize, scaffold, resolve imports, emit.

Each stage is a pure transformation of the previous stage's output; any
failure raises before anything is written.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import GenerateOptions
from .emit import build_file, render, write_file
from .errors import ConfigError, InputError
from .flatten import duplicate_method_names, flatten_interface
from .gosource.model import ImportSpec, SourceUnit
from .gosource.parse import parse
from .gosource.syntax import GoFile
from .imports import resolve_imports
from .qualify import LocalTypes, qualify_signatures
from .scaffold import FMT_IMPORT, TESTING_IMPORT, build_scaffold, check_method_names, constructor_name
from .synth import MethodImpl, synthesize_method

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedMock:
    mock_name: str
    tracker: str
    constructor: str
    methods: list[MethodImpl]
    imports: list[ImportSpec]
    file: GoFile


def load_source(path: Path) -> SourceUnit:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"cannot read {path}: {e}") from e
    return parse(text, filename=str(path))


def generate_mock(options: GenerateOptions, *, unit: SourceUnit | None = None) -> GeneratedMock:
    """Build the mock for `options.interface` without writing anything."""
    opts = options.resolved()
    if unit is None:
        unit = load_source(opts.filename)

    methods = flatten_interface(unit, opts.interface)
    check_method_names([m.name for m in methods], opts.tracker)
    dups = duplicate_method_names(methods)
    if dups:
        logger.warning(
            "interface %s has duplicate methods %s; they are generated as-is",
            opts.interface,
            ", ".join(dups),
        )

    qualifier = None
    if opts.package != unit.package:
        qualifier = opts.qualifier or unit.package
    qualified = qualify_signatures(methods, scope=LocalTypes.from_unit(unit), qualifier=qualifier)

    required = [ImportSpec(TESTING_IMPORT), ImportSpec(FMT_IMPORT)]
    if qualified.added:
        if not opts.source_import:
            raise ConfigError(
                f"interface {opts.interface} uses types declared in package {unit.package}; "
                "pass --source-import so the mock can import them"
            )
        required.append(ImportSpec(opts.source_import, alias=qualifier))

    impls = [synthesize_method(sig, mock_name=opts.mock_type_name) for sig in qualified.signatures]
    scaffold = build_scaffold(
        opts.mock_type_name,
        [m.name for m in qualified.signatures],
        visibility=opts.visibility,
        tracker=opts.tracker,
    )
    decls = [*scaffold, *(impl.decl() for impl in impls)]

    imports = resolve_imports(
        unit.imports,
        decls,
        required=required,
        always=[ImportSpec(opts.tracker.import_path)],
    )
    logger.debug("mock %s: %d methods, %d imports", opts.mock_type_name, len(impls), len(imports))

    return GeneratedMock(
        mock_name=opts.mock_type_name,
        tracker=opts.tracker.interface,
        constructor=constructor_name(opts.mock_type_name, opts.visibility),
        methods=impls,
        imports=imports,
        file=build_file(opts.package, imports, decls),
    )


def render_mock(options: GenerateOptions) -> str:
    return render(generate_mock(options).file, use_gofmt=options.gofmt)


def write_mock(options: GenerateOptions) -> Path:
    """Generate the mock and write it to `options.outfile`."""
    opts = options.resolved()
    text = render_mock(opts)
    return write_file(opts.output_path, text)
