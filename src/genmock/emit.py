from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Sequence

from .errors import OutputError
from .gosource.gofmt import gofmt
from .gosource.model import ImportSpec
from .gosource.printer import format_file
from .gosource.syntax import Decl, GoFile

logger = logging.getLogger(__name__)

GENERATED_HEADER = "Code generated by genmock. DO NOT EDIT."


def build_file(package: str, imports: Sequence[ImportSpec], decls: Sequence[Decl]) -> GoFile:
    return GoFile(package=package, imports=tuple(imports), decls=tuple(decls), header=GENERATED_HEADER)


def render(file: GoFile, *, use_gofmt: bool = False) -> str:
    text = format_file(file)
    if use_gofmt:
        text = gofmt(text)
    return text


def write_file(path: Path, text: str) -> Path:
    """Write generated source to `path` atomically.

    The text lands in a temporary file next to the target and is renamed into
    place, so a failed write never leaves a truncated mock behind.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=path.name + ".", dir=str(path.parent))
    except OSError as e:
        raise OutputError(f"cannot write {path}: {e}") from e
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        # mkstemp creates owner-only files; generated sources are shared.
        os.chmod(tmp, 0o644)
        os.replace(tmp, path)
    except OSError as e:
        raise OutputError(f"cannot write {path}: {e}") from e
    finally:
        try:
            if os.path.exists(tmp):
                os.unlink(tmp)
        except OSError:
            pass
    logger.info("wrote %s (%d bytes)", path, len(text.encode("utf-8")))
    return path
