"""Core dataclasses shared across ccdiff subsystems."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List, Optional, Sequence, Tuple


DEFAULT_TIMEOUT_S = 8.0


class Language(enum.Enum):
    """Source language of a campaign."""

    C = "c"
    CXX = "c++"

    @property
    def source_suffix(self) -> str:
        return ".c" if self is Language.C else ".cpp"

    @property
    def std_prefix(self) -> str:
        return self.value

    @property
    def default_std_version(self) -> str:
        return "99" if self is Language.C else "03"

    @property
    def label(self) -> str:
        return "C" if self is Language.C else "C++"


class Role(enum.Enum):
    """Which of the two compilers a step belongs to."""

    REFERENCE = "ref"
    TEST = "tst"

    @property
    def label(self) -> str:
        return "REF" if self is Role.REFERENCE else "TEST"


class Failure(enum.Enum):
    """Independent failure reasons that can be observed for one seed."""

    REF_COMPILE = "ref_compile_failed"
    TEST_COMPILE = "test_compile_failed"
    REF_RUN = "ref_run_failed"
    TEST_RUN = "test_run_failed"
    OUTPUT_MISMATCH = "output_mismatch"


@dataclass(frozen=True)
class Toolchain:
    """A compiler command line for one role (reference or test)."""

    command: Tuple[str, ...]
    flags: Tuple[str, ...] = tuple()

    def label(self) -> str:
        return " ".join(self.command)

    def flags_label(self) -> str:
        return " ".join(self.flags)


@dataclass(frozen=True)
class ToolchainDescriptor:
    """Language mode plus the reference/test compilers of a campaign."""

    language: Language
    std_version: str
    reference: Toolchain
    test: Toolchain
    compiler_flags: Tuple[str, ...] = tuple()
    generator_flags: Tuple[str, ...] = tuple()

    @property
    def std_name(self) -> str:
        return f"{self.language.std_prefix}{self.std_version}"

    @property
    def std_flag(self) -> str:
        return f"-std={self.std_name}"

    def toolchain(self, role: Role) -> Toolchain:
        return self.reference if role is Role.REFERENCE else self.test

    def compile_argv(self, toolchain: Toolchain, *args: str) -> List[str]:
        """Return the full compiler invocation for ``toolchain`` and ``args``."""

        return [*toolchain.command, *self.compiler_flags, *toolchain.flags, *args]


@dataclass(frozen=True)
class CampaignSettings:
    """Immutable configuration for one campaign over a seed range."""

    toolchains: ToolchainDescriptor
    workdir: Path
    workdir_explicit: bool = False
    generator: Tuple[str, ...] = ("csmith",)
    generator_options: Tuple[str, ...] = tuple()
    timeout: float = DEFAULT_TIMEOUT_S
    debug: bool = False

    @property
    def language(self) -> Language:
        return self.toolchains.language


@dataclass
class CaseResult:
    """Outcome of executing a single seed."""

    seed: int
    case_id: str
    source: Path
    failures: FrozenSet[Failure] = frozenset()
    details: List[str] = field(default_factory=list)
    scripts: List[Path] = field(default_factory=list)
    duration_s: float = 0.0

    @property
    def passed(self) -> bool:
        return not self.failures

    @property
    def status(self) -> str:
        return "passed" if self.passed else "failed"


@dataclass(frozen=True)
class CampaignTotals:
    """Running counters of a campaign."""

    passed: int = 0
    failed: int = 0

    @property
    def reported(self) -> int:
        return self.passed + self.failed

    def add(self, result: CaseResult) -> "CampaignTotals":
        if result.passed:
            return CampaignTotals(passed=self.passed + 1, failed=self.failed)
        return CampaignTotals(passed=self.passed, failed=self.failed + 1)


@dataclass
class CampaignResult:
    """Aggregated outcome of a campaign."""

    results: Sequence[CaseResult]
    totals: CampaignTotals
    cleanup: bool
    workdir_removed: bool = False
    duration_s: float = 0.0
    aborted: Optional[str] = None

    @property
    def all_ok(self) -> bool:
        return self.totals.failed == 0
