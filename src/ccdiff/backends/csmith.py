"""csmith random program generator."""
from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from ccdiff.core.models import Language

from .base import CommandResult, run_command


class GeneratorError(RuntimeError):
    """Raised when the program generator fails; aborts the campaign."""


def language_flags(language: Language, std_version: str) -> tuple[str, ...]:
    """csmith switches selecting the output language."""

    if language is Language.C:
        return tuple()
    if std_version == "11":
        return ("--lang-cpp", "--cpp11")
    return ("--lang-cpp",)


class CsmithGenerator:
    """Creates reproducible source files from a seed value."""

    def __init__(self, command: Sequence[str] = ("csmith",), options: Sequence[str] = ()) -> None:
        self.command = tuple(command)
        self.options = tuple(options)

    def argv(self, seed: int, output: Path) -> List[str]:
        return [*self.command, "--float", *self.options, "--seed", str(seed), "--output", str(output)]

    def generate(self, seed: int, output: Path) -> CommandResult | None:
        """Write the program for ``seed`` to ``output``.

        Existing files are reused as-is; returns ``None`` in that case.
        """

        if output.exists():
            return None
        output.parent.mkdir(parents=True, exist_ok=True)
        result = run_command(self.argv(seed, output))
        if not result.ok:
            raise GeneratorError(
                f"generator failed for seed {seed} (exit code {result.returncode}): "
                f"{result.stderr or ' '.join(result.argv)}"
            )
        if not output.exists():
            raise GeneratorError(f"generator produced no output for seed {seed}: {output}")
        return result
