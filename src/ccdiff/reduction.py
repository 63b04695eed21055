"""Interestingness scripts for test case reducers such as creduce.

Scripts are written beside the failing source and only use seed-relative
paths, so they keep working when copied together with the source.

A run script exits 0 ("interesting") while the reduced program still
fails at run time and 1 when it compiles badly or runs cleanly.
"""
from __future__ import annotations

import os
import shlex
import stat
from pathlib import Path
from typing import List, Sequence

from ccdiff.core.models import Role, ToolchainDescriptor
from ccdiff.core.naming import ArtifactPaths

SHEBANG = "#!/bin/sh"
EXECUTABLE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def shell_join(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(part)) for part in argv)


def format_timeout(timeout: float) -> str:
    if float(timeout).is_integer():
        return str(int(timeout))
    return f"{timeout:g}"


class ReductionScriptWriter:
    """Emits ``_cc.sh`` and ``_run.sh`` scripts for one campaign."""

    def __init__(self, toolchains: ToolchainDescriptor, *, timeout: float) -> None:
        self.toolchains = toolchains
        self.timeout = timeout

    def compile_command(self, paths: ArtifactPaths, role: Role) -> List[str]:
        toolchain = self.toolchains.toolchain(role)
        return self.toolchains.compile_argv(
            toolchain,
            paths.local(paths.language.source_suffix),
            "-o",
            paths.local(f"_{role.value}"),
        )

    def write_compile_script(self, paths: ArtifactPaths, role: Role) -> Path:
        """Script repeating the failing compile of ``role``."""

        lines = [SHEBANG, shell_join(self.compile_command(paths, role))]
        return _write_executable(paths.compile_script(role), lines)

    def write_run_script(self, paths: ArtifactPaths, role: Role) -> Path:
        """Script checking whether a reduced source still fails at run time."""

        toolchain = self.toolchains.toolchain(role)
        script = paths.run_script(role)
        source = paths.local(paths.language.source_suffix)
        reduced = paths.local(paths.reduced_suffix)
        reduced_binary = paths.local(f"_reduced_{role.value}")
        reduced_output = paths.local(f"_reduced_{role.value}.txt")
        usage = "creduce" if role is Role.REFERENCE else "creduce [--timing]"

        lines = [
            SHEBANG,
            f"# use: {usage} ./{script.name} {paths.case_id}{paths.reduced_suffix}",
            "",
            f"if [ ! -f {shlex.quote(reduced)} ] ; then",
            f"#COPY cp {shlex.quote(source)} {shlex.quote(reduced)}",
        ]
        if role is Role.TEST:
            reference_preprocess = self.toolchains.compile_argv(
                self.toolchains.reference, source, "-E", "-o", reduced
            )
            lines.append(f"#REF {shell_join(reference_preprocess)}")
        lines.append(shell_join(self.toolchains.compile_argv(toolchain, source, "-E", "-o", reduced)))
        lines += [
            "fi",
            "",
            shell_join(self.toolchains.compile_argv(toolchain, reduced, "-o", reduced_binary)),
            "if [ $? -ne 0 ] ; then exit 1",
            "fi",
            "",
            f"timeout {format_timeout(self.timeout)} {shlex.quote(reduced_binary)} >{shlex.quote(reduced_output)}",
            "if [ $? -ne 0 ] ; then exit 0",
            "fi",
            "exit 1",
        ]
        return _write_executable(script, lines)


def _write_executable(path: Path, lines: Sequence[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    os.chmod(path, path.stat().st_mode | EXECUTABLE_BITS)
    return path
