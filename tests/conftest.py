from __future__ import annotations

import sys
import textwrap
from pathlib import Path
from typing import Iterable, Optional

import pytest

from ccdiff.core.models import CampaignSettings, Language, Toolchain, ToolchainDescriptor

COMPILER_FLAGS = ("-std=c99", "-O0", "-g", "-lm", "-w", "-I/usr/include/csmith")

FAKE_CSMITH = """\
#!{python}
import pathlib
import sys

FAIL = {fail!r}

args = sys.argv[1:]
seed = args[args.index("--seed") + 1]
output = pathlib.Path(args[args.index("--output") + 1])
with open({log!r}, "a") as log:
    log.write(" ".join(args) + "\\n")
if seed in FAIL:
    sys.stderr.write("csmith: cannot generate seed " + seed + "\\n")
    sys.exit(2)
output.write_text("/* seed %s */\\nint main(void) {{ return 0; }}\\n" % seed)
"""

# Compiles a "program" into a shell script. The seed is taken from the
# source file name, so reduced sources (00003_reduced.c) behave like the
# original until they contain the word FIXED.
FAKE_COMPILER = """\
#!{python}
import os
import pathlib
import sys

FAIL_COMPILE = {fail_compile!r}
FAIL_RUN = {fail_run!r}
HANG = {hang!r}
MISMATCH = {mismatch!r}

args = sys.argv[1:]
index = args.index("-o")
output = pathlib.Path(args[index + 1])
rest = args[:index] + args[index + 2:]
source = pathlib.Path(next(arg for arg in rest if arg.endswith((".c", ".cpp"))))
seed = source.name.split("_")[0].split(".")[0]
text = source.read_text()
if "-E" in args:
    output.write_text(text)
    sys.exit(0)
if seed in FAIL_COMPILE and "FIXED" not in text:
    sys.stderr.write("error: cannot compile " + seed + "\\n")
    sys.exit(1)
if "FIXED" in text:
    body = "echo fixed"
elif seed in HANG:
    body = "exec sleep 30"
elif seed in FAIL_RUN:
    body = "echo partial\\nexit 3"
elif seed in MISMATCH:
    body = "echo checksum = " + seed + "-wrong"
else:
    body = "echo checksum = " + seed
output.write_text("#!/bin/sh\\n" + body + "\\n")
os.chmod(output, 0o755)
"""


class Toolbox:
    """Writes fake csmith/compiler executables into a temporary directory."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        self.csmith_log = root / "csmith.log"

    def csmith(self, *, fail: Iterable[int] = ()) -> Path:
        script = FAKE_CSMITH.format(
            python=sys.executable,
            fail=tuple(f"{seed}" for seed in fail),
            log=str(self.csmith_log),
        )
        return self._write("csmith", script)

    def compiler(
        self,
        name: str,
        *,
        fail_compile: Iterable[int] = (),
        fail_run: Iterable[int] = (),
        hang: Iterable[int] = (),
        mismatch: Iterable[int] = (),
    ) -> Path:
        script = FAKE_COMPILER.format(
            python=sys.executable,
            fail_compile=_ids(fail_compile),
            fail_run=_ids(fail_run),
            hang=_ids(hang),
            mismatch=_ids(mismatch),
        )
        return self._write(name, script)

    def settings(
        self,
        workdir: Path,
        *,
        reference: Path,
        test: Path,
        csmith: Optional[Path] = None,
        explicit: bool = True,
        timeout: float = 2.0,
        debug: bool = False,
    ) -> CampaignSettings:
        toolchains = ToolchainDescriptor(
            language=Language.C,
            std_version="99",
            reference=Toolchain(command=(str(reference),)),
            test=Toolchain(command=(str(test),)),
            compiler_flags=COMPILER_FLAGS,
        )
        return CampaignSettings(
            toolchains=toolchains,
            workdir=workdir,
            workdir_explicit=explicit,
            generator=(str(csmith or self.csmith()),),
            timeout=timeout,
            debug=debug,
        )

    def _write(self, name: str, content: str) -> Path:
        path = self.root / name
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        path.chmod(0o755)
        return path


def _ids(seeds: Iterable[int]) -> tuple:
    return tuple(f"{seed:05d}" for seed in seeds)


@pytest.fixture
def toolbox(tmp_path: Path) -> Toolbox:
    return Toolbox(tmp_path / "tools")


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    return tmp_path / "work"

