from __future__ import annotations

import json
from pathlib import Path

import colorama
import pytest
from colorama import Fore, Style
from jsonschema import ValidationError, validate

from ccdiff.core.models import CampaignResult, CampaignTotals, CaseResult, Failure
from ccdiff.core.seeds import SeedRange
from ccdiff.reporting import JsonReporter, ReportManager, TapReporter
from ccdiff.reporting.schema import JSON_SCHEMA_V1


def _results(workdir: Path) -> list[CaseResult]:
    return [
        CaseResult(seed=0, case_id="00000", source=workdir / "00000.c", duration_s=0.01),
        CaseResult(
            seed=1,
            case_id="00001",
            source=workdir / "00001.c",
            failures=frozenset({Failure.OUTPUT_MISMATCH, Failure.TEST_RUN}),
            details=[f"run {workdir}/00001_tst: exit code 3", "diff -u a b"],
            scripts=[workdir / "00001_tst_run.sh"],
            duration_s=0.02,
        ),
    ]


def _campaign(results: list[CaseResult]) -> CampaignResult:
    totals = CampaignTotals()
    for result in results:
        totals = totals.add(result)
    return CampaignResult(results=results, totals=totals, cleanup=totals.failed == 0, duration_s=0.5)


def test_tap_stream(toolbox, workdir: Path, capsys) -> None:
    settings = toolbox.settings(workdir, reference=Path("gcc"), test=Path("clang"))
    reporter = TapReporter()
    results = _results(workdir)
    reporter.on_start(settings, SeedRange(0, 1))
    for index, result in enumerate(results, start=1):
        reporter.on_case_result(result, index, len(results))
    reporter.on_complete(_campaign(results))

    lines = capsys.readouterr().out.splitlines()
    assert "# using csmith seed range:  0 to 1" in lines
    assert "# using language standard:  c99" in lines
    assert "# using reference compiler: gcc" in lines
    assert "# using testing compiler:   clang" in lines
    assert f"ok 1 - {workdir}/00000.c" in lines
    assert f"not ok 2 - {workdir}/00001.c" in lines
    assert f"# run {workdir}/00001_tst: exit code 3" in lines
    assert lines[-3:] == ["# 1 test succeeded", "# 1 test failed", "1..2"]
    assert reporter.count == 2


def test_tap_all_ok_and_plural(toolbox, workdir: Path, capsys) -> None:
    settings = toolbox.settings(workdir, reference=Path("gcc"), test=Path("clang"))
    reporter = TapReporter()
    results = [
        CaseResult(seed=seed, case_id=f"{seed:05d}", source=workdir / f"{seed:05d}.c") for seed in (4, 5)
    ]
    reporter.on_start(settings, SeedRange(4, 5))
    for index, result in enumerate(results, start=1):
        reporter.on_case_result(result, index, 2)
    reporter.on_complete(_campaign(results))
    lines = capsys.readouterr().out.splitlines()
    assert lines[-4:] == ["# 2 tests succeeded", "# 0 tests failed", "# All OK", "1..2"]


def test_tap_colour_wraps_tokens() -> None:
    reporter = TapReporter(use_color=True)
    try:
        assert reporter._styled("ok", passed=True) == f"{Fore.GREEN}ok{Style.RESET_ALL}"
        assert reporter._styled("not ok", passed=False) == f"{Fore.RED}not ok{Style.RESET_ALL}"
    finally:
        colorama.deinit()
    assert TapReporter()._styled("ok", passed=True) == "ok"


def test_tap_bail_out(capsys) -> None:
    TapReporter().on_bail_out("csmith failed", _campaign([]))
    assert capsys.readouterr().out == "Bail out! csmith failed\n"


def test_json_reporter_writes_valid_file(toolbox, workdir: Path, tmp_path: Path) -> None:
    settings = toolbox.settings(workdir, reference=Path("gcc"), test=Path("clang"))
    path = tmp_path / "reports" / "run.json"
    reporter = JsonReporter(str(path))
    manager = ReportManager([reporter])
    results = _results(workdir)
    manager.on_start(settings, SeedRange(0, 1))
    for index, result in enumerate(results, start=1):
        manager.on_case_result(result, index, len(results))
    manager.on_complete(_campaign(results))

    payload = json.loads(path.read_text())
    validate(instance=payload, schema=JSON_SCHEMA_V1)
    assert payload["generated_at"].endswith("Z")
    summary = payload["summary"]
    assert summary["total"] == 2
    assert summary["failed"] == 1
    assert summary["std"] == "c99"
    assert summary["aborted"] is None
    failing = payload["cases"][1]
    assert failing["id"] == "00001"
    assert failing["status"] == "failed"
    assert failing["failures"] == ["test_run_failed", "output_mismatch"]
    assert failing["scripts"] == [str(workdir / "00001_tst_run.sh")]


def test_json_reporter_records_bail_out(toolbox, workdir: Path, tmp_path: Path) -> None:
    settings = toolbox.settings(workdir, reference=Path("gcc"), test=Path("clang"))
    path = tmp_path / "run.json"
    reporter = JsonReporter(str(path))
    reporter.on_start(settings, SeedRange(0, 3))
    campaign = CampaignResult(results=[], totals=CampaignTotals(), cleanup=False, aborted="csmith failed")
    reporter.on_bail_out("csmith failed", campaign)
    payload = json.loads(path.read_text())
    assert payload["summary"]["aborted"] == "csmith failed"
    assert payload["cases"] == []


def test_schema_rejects_unknown_failure() -> None:
    payload = {
        "schema_version": "1.0.0",
        "generated_at": "2024-01-01T00:00:00Z",
        "summary": {
            "total": 1,
            "passed": 0,
            "failed": 1,
            "first_seed": 0,
            "last_seed": 0,
            "std": "c99",
            "reference": "gcc",
            "test": "clang",
            "workdir": "/tmp/csmith",
            "workdir_removed": False,
            "duration_s": 0.1,
        },
        "cases": [
            {
                "seed": 0,
                "id": "00000",
                "status": "failed",
                "source": "/tmp/csmith/00000.c",
                "failures": ["segfault"],
                "duration_ms": 1.0,
            }
        ],
    }
    with pytest.raises(ValidationError):
        validate(instance=payload, schema=JSON_SCHEMA_V1)
