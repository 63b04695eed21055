"""Compile and execute steps of a test case."""
from __future__ import annotations

from pathlib import Path
from typing import Sequence

from .base import CommandResult, run_command


def compile_source(argv: Sequence[str], output: Path) -> CommandResult:
    """Run a compiler invocation that should produce ``output``.

    Compilation has no time bound. A binary left over from an earlier run
    is removed first so a failing compile never leaves a stale one behind.
    """

    output.unlink(missing_ok=True)
    return run_command(argv)


def run_binary(binary: Path, capture: Path, *, timeout: float) -> CommandResult:
    """Execute ``binary`` with stdout redirected into ``capture``.

    The capture file is always recreated, even when the binary is missing.
    """

    capture.parent.mkdir(parents=True, exist_ok=True)
    with capture.open("wb") as handle:
        return run_command([str(binary.absolute())], timeout=timeout, stdout=handle)
