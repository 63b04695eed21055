"""Blocking wrapper around external commands."""
from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Optional, Sequence, Tuple

# Exit statuses used by coreutils timeout(1) and the shell.
TIMEOUT_EXIT_CODE = 124
NOT_FOUND_EXIT_CODE = 127


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured diagnostics of one command."""

    argv: Tuple[str, ...]
    returncode: int
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out


def run_command(
    argv: Sequence[str],
    *,
    cwd: Optional[Path] = None,
    timeout: Optional[float] = None,
    stdout: Optional[IO[bytes]] = None,
) -> CommandResult:
    """Run ``argv`` to completion.

    ``stdout`` receives the program output when given, otherwise it is
    captured and dropped. A command that cannot be started reports exit
    code 127; one killed on ``timeout`` reports 124.
    """

    rendered = tuple(str(part) for part in argv)
    try:
        proc = subprocess.run(
            list(rendered),
            cwd=str(cwd) if cwd else None,
            stdout=stdout if stdout is not None else subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        return CommandResult(
            argv=rendered,
            returncode=TIMEOUT_EXIT_CODE,
            stderr=_decode(exc.stderr),
            timed_out=True,
        )
    except OSError as exc:
        return CommandResult(argv=rendered, returncode=NOT_FOUND_EXIT_CODE, stderr=str(exc))
    return CommandResult(argv=rendered, returncode=proc.returncode, stderr=_decode(proc.stderr))


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace").strip()
