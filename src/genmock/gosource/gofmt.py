from __future__ import annotations

import subprocess

from ..errors import FormatError


def gofmt(source_text: str, *, binary: str = "gofmt") -> str:
    """Run source text through `gofmt` and return the formatted text.

    The printer already emits gofmt layout; this pass is opt-in for callers who
    want the toolchain's exact output.
    """
    try:
        proc = subprocess.run(
            [binary],
            input=source_text.encode("utf-8"),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
        )
    except FileNotFoundError as e:
        raise FormatError(
            f"gofmt not found (`{binary}` is missing from PATH). "
            "Install Go or drop --gofmt to use the built-in printer."
        ) from e

    stdout = (proc.stdout or b"").decode("utf-8", errors="replace")
    if proc.returncode != 0:
        stderr = (proc.stderr or b"").decode("utf-8", errors="replace")
        raise FormatError(f"gofmt failed\n{stderr.strip()}")
    return stdout
