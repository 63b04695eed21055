"""Campaign driver: generate, compile twice, run twice, compare."""
from __future__ import annotations

import time
from pathlib import Path
from typing import List, Optional, Set

from ccdiff.backends import CommandResult, CsmithGenerator, GeneratorError, compile_source, run_binary
from ccdiff.backends.base import NOT_FOUND_EXIT_CODE
from ccdiff.reduction import ReductionScriptWriter, format_timeout, shell_join
from ccdiff.reporting.base import ReportManager, Reporter

from .comparator import compare_captures
from .models import CampaignResult, CampaignSettings, CampaignTotals, CaseResult, Failure, Role
from .naming import ArtifactPaths
from .seeds import SeedRange

COMPILE_FAILURES = {Role.REFERENCE: Failure.REF_COMPILE, Role.TEST: Failure.TEST_COMPILE}
RUN_FAILURES = {Role.REFERENCE: Failure.REF_RUN, Role.TEST: Failure.TEST_RUN}


class CampaignRunner:
    """Executes every seed of a range sequentially.

    Seeds are independent: all stages of a seed run even after an earlier
    stage failed, and a failing seed never stops the campaign. Only a
    failing generator aborts it.
    """

    def __init__(
        self,
        settings: CampaignSettings,
        *,
        reporter: Optional[Reporter] = None,
        generator: Optional[CsmithGenerator] = None,
    ) -> None:
        self._settings = settings
        self._reporter = reporter or ReportManager([])
        self._generator = generator or CsmithGenerator(
            settings.generator,
            (*settings.toolchains.generator_flags, *settings.generator_options),
        )
        self._scripts = ReductionScriptWriter(settings.toolchains, timeout=settings.timeout)

    def run(self, seeds: SeedRange) -> CampaignResult:
        start = time.perf_counter()
        settings = self._settings
        settings.workdir.mkdir(parents=True, exist_ok=True)
        self._reporter.on_start(settings, seeds)
        results: List[CaseResult] = []
        totals = CampaignTotals()
        cleanup = not settings.workdir_explicit
        total = len(seeds)
        for index, seed in enumerate(seeds, start=1):
            try:
                result = self.run_seed(seed)
            except GeneratorError as exc:
                campaign = CampaignResult(
                    results=results,
                    totals=totals,
                    cleanup=False,
                    duration_s=time.perf_counter() - start,
                    aborted=str(exc),
                )
                self._reporter.on_bail_out(str(exc), campaign)
                raise
            results.append(result)
            totals = totals.add(result)
            if not result.passed:
                cleanup = False
            self._reporter.on_case_result(result, index, total)
        removed = self._remove_workdir() if cleanup else False
        campaign = CampaignResult(
            results=results,
            totals=totals,
            cleanup=cleanup,
            workdir_removed=removed,
            duration_s=time.perf_counter() - start,
        )
        self._reporter.on_complete(campaign)
        return campaign

    def run_seed(self, seed: int) -> CaseResult:
        """Process one seed and classify its outcome."""

        start = time.perf_counter()
        paths = ArtifactPaths.for_seed(self._settings.workdir, seed, self._settings.language)
        self._generate(seed, paths)

        failures: Set[Failure] = set()
        details: List[str] = []
        scripts: List[Path] = []
        for role in (Role.REFERENCE, Role.TEST):
            if not self._compile(paths, role, details):
                failures.add(COMPILE_FAILURES[role])
                scripts.append(self._scripts.write_compile_script(paths, role))
        for role in (Role.REFERENCE, Role.TEST):
            if not self._run(paths, role, details):
                failures.add(RUN_FAILURES[role])
                scripts.append(self._scripts.write_run_script(paths, role))
        if not self._compare(paths, details):
            failures.add(Failure.OUTPUT_MISMATCH)

        if not failures:
            # Scripts left by an earlier failing run of this seed are stale.
            for path in (*paths.removable(), *paths.scripts()):
                path.unlink(missing_ok=True)
        return CaseResult(
            seed=seed,
            case_id=paths.case_id,
            source=paths.source,
            failures=frozenset(failures),
            details=details,
            scripts=scripts,
            duration_s=time.perf_counter() - start,
        )

    def _generate(self, seed: int, paths: ArtifactPaths) -> None:
        if paths.source.exists():
            return
        self._trace(shell_join(self._generator.argv(seed, paths.source)))
        self._generator.generate(seed, paths.source)

    def _compile(self, paths: ArtifactPaths, role: Role, details: List[str]) -> bool:
        toolchains = self._settings.toolchains
        binary = paths.binary(role)
        argv = toolchains.compile_argv(toolchains.toolchain(role), str(paths.source), "-o", str(binary))
        self._trace(f"{role.label:<4} compile: {shell_join(argv)}")
        result = compile_source(argv, binary)
        if result.ok:
            return True
        details.append(f"compile {role.label}: {paths.source}")
        details.append(f"  {shell_join(argv)}")
        details.extend(f"  {line}" for line in result.stderr.splitlines())
        return False

    def _run(self, paths: ArtifactPaths, role: Role, details: List[str]) -> bool:
        binary = paths.binary(role)
        capture = paths.output(role)
        self._trace(f"run: {binary} >{capture}")
        result = run_binary(binary, capture, timeout=self._settings.timeout)
        if result.ok:
            if self._settings.debug:
                self._trace(f"res: {_read_text(capture)}")
            return True
        details.append(f"run {binary}: {self._describe(result)}")
        return False

    def _compare(self, paths: ArtifactPaths, details: List[str]) -> bool:
        comparison = compare_captures(paths.ref_output, paths.test_output)
        if comparison.passed:
            return True
        details.append(f"diff -u {paths.ref_output} {paths.test_output}")
        for line in comparison.diff_lines:
            self._trace(line)
        return False

    def _describe(self, result: CommandResult) -> str:
        if result.timed_out:
            return f"timed out after {format_timeout(self._settings.timeout)}s"
        if result.stderr and result.returncode == NOT_FOUND_EXIT_CODE:
            return result.stderr
        return f"exit code {result.returncode}"

    def _remove_workdir(self) -> bool:
        workdir = self._settings.workdir
        try:
            workdir.rmdir()
        except OSError as exc:
            self._trace(f"working directory kept: {exc}")
            return False
        return True

    def _trace(self, message: str) -> None:
        if self._settings.debug:
            self._reporter.on_trace(message)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace").strip()
    except OSError:
        return ""
