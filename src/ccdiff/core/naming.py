"""Deterministic artifact paths for one seed."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from .models import Language, Role


def case_id(seed: int) -> str:
    """Render ``seed`` as the zero-padded case identifier (``00042``)."""

    return f"{seed:05d}"


@dataclass(frozen=True)
class ArtifactPaths:
    """The family of files belonging to one test case."""

    workdir: Path
    case_id: str
    language: Language

    @classmethod
    def for_seed(cls, workdir: Path, seed: int, language: Language) -> "ArtifactPaths":
        return cls(workdir=Path(workdir), case_id=case_id(seed), language=language)

    def _path(self, suffix: str) -> Path:
        return self.workdir / f"{self.case_id}{suffix}"

    @property
    def source(self) -> Path:
        return self._path(self.language.source_suffix)

    @property
    def ref_binary(self) -> Path:
        return self._path("_ref")

    @property
    def test_binary(self) -> Path:
        return self._path("_tst")

    @property
    def ref_output(self) -> Path:
        return self._path("_ref.txt")

    @property
    def test_output(self) -> Path:
        return self._path("_tst.txt")

    @property
    def ref_compile_script(self) -> Path:
        return self._path("_ref_cc.sh")

    @property
    def test_compile_script(self) -> Path:
        return self._path("_tst_cc.sh")

    @property
    def ref_run_script(self) -> Path:
        return self._path("_ref_run.sh")

    @property
    def test_run_script(self) -> Path:
        return self._path("_tst_run.sh")

    def binary(self, role: Role) -> Path:
        return self.ref_binary if role is Role.REFERENCE else self.test_binary

    def output(self, role: Role) -> Path:
        return self.ref_output if role is Role.REFERENCE else self.test_output

    def compile_script(self, role: Role) -> Path:
        return self.ref_compile_script if role is Role.REFERENCE else self.test_compile_script

    def run_script(self, role: Role) -> Path:
        return self.ref_run_script if role is Role.REFERENCE else self.test_run_script

    def local(self, suffix: str) -> str:
        """Seed-relative name, valid from inside the working directory."""

        return f"./{self.case_id}{suffix}"

    @property
    def reduced_suffix(self) -> str:
        return f"_reduced{self.language.source_suffix}"

    def removable(self) -> Tuple[Path, ...]:
        """Artifacts deleted when a seed passes."""

        return (
            self.source,
            self.ref_binary,
            self.ref_output,
            self.test_binary,
            self.test_output,
        )

    def scripts(self) -> Tuple[Path, ...]:
        return (
            self.ref_compile_script,
            self.test_compile_script,
            self.ref_run_script,
            self.test_run_script,
        )
