from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from click.testing import CliRunner

from ccdiff import __version__
from ccdiff.cli.main import cli

_CLEARED = (
    "CC",
    "CXX",
    "CFLAGS",
    "CXXFLAGS",
    "REFCC",
    "REFCXX",
    "REFCCFLAGS",
    "REFCXXFLAGS",
    "TESTCC",
    "TESTCXX",
    "TESTCCFLAGS",
    "TESTCXXFLAGS",
    "HOSTCC",
    "HOSTCXX",
    "BUILDCC",
    "BUILDCXX",
    "CSMITH_BIN",
    "CSMITH_OPTIONS",
    "CSMITH_INCLUDE",
    "RUNTIME_DIR",
    "XDG_RUNTIME_DIR",
    "DEBUG",
)


def _env(**values: str) -> dict:
    env = {name: None for name in _CLEARED}
    env.update(values)
    return env


def _tool_env(toolbox, workdir: Path, compiler: Optional[dict] = None) -> dict:
    return _env(
        REFCC=str(toolbox.compiler("refcc")),
        TESTCC=str(toolbox.compiler("testcc", **(compiler or {}))),
        CSMITH_BIN=str(toolbox.csmith()),
        RUNTIME_DIR=str(workdir),
    )


def test_cli_help_short_flag_exits_nonzero() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["-h"], env=_env(CC="clang"))
    assert result.exit_code == 1
    assert "Usage:" in result.output
    assert "REFCC" in result.output
    assert "testing compiler:   clang" in result.output


def test_cli_help_without_compiler_still_prints() -> None:
    result = CliRunner().invoke(cli, ["--help"], env=_env())
    assert result.exit_code == 1
    assert "No test compiler found" in result.output


def test_cli_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_run_all_ok(toolbox, workdir: Path) -> None:
    result = CliRunner().invoke(cli, ["0", "2"], env=_tool_env(toolbox, workdir))
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert "# 3 tests succeeded" in lines
    assert "# All OK" in lines
    assert lines[-1] == "1..3"
    assert workdir.exists()


def test_cli_failures_do_not_change_exit_status(toolbox, workdir: Path) -> None:
    env = _tool_env(toolbox, workdir, compiler={"mismatch": [1]})
    result = CliRunner().invoke(cli, ["1"], env=env)
    assert result.exit_code == 0
    assert "not ok 1 - " in result.output
    assert "# 1 test failed" in result.output


def test_cli_negative_seed_counts_from_zero(toolbox, workdir: Path) -> None:
    result = CliRunner().invoke(cli, ["-2"], env=_tool_env(toolbox, workdir))
    assert result.exit_code == 0, result.output
    assert "# using csmith seed range:  0 to 2" in result.output
    assert result.output.splitlines()[-1] == "1..3"


def test_cli_missing_test_compiler(workdir: Path) -> None:
    result = CliRunner().invoke(cli, ["0"], env=_env(RUNTIME_DIR=str(workdir)))
    assert result.exit_code == 1
    assert "No test compiler found" in result.output
    assert not workdir.exists()


def test_cli_rejects_unsupported_cxx_standard() -> None:
    result = CliRunner().invoke(cli, ["--std", "c++17", "0"], env=_env(CXX="clang++"))
    assert result.exit_code == 1
    assert "c++ version not supported: 17" in result.output


def test_cli_rejects_bad_seed() -> None:
    result = CliRunner().invoke(cli, ["ten"], env=_env(CC="clang"))
    assert result.exit_code == 1
    assert "Invalid seed value 'ten'" in result.output


def test_cli_generator_failure_bails_out(toolbox, workdir: Path) -> None:
    env = _tool_env(toolbox, workdir)
    env["CSMITH_BIN"] = str(toolbox.csmith(fail=[0]))
    result = CliRunner().invoke(cli, ["0"], env=env)
    assert result.exit_code == 1
    assert "Bail out!" in result.output


def test_cli_json_report_and_debug(toolbox, workdir: Path, tmp_path: Path) -> None:
    report = tmp_path / "report.json"
    result = CliRunner().invoke(
        cli,
        ["--debug", "--json-report", str(report), "3"],
        env=_tool_env(toolbox, workdir),
    )
    assert result.exit_code == 0, result.output
    assert "# REF  compile:" in result.output
    payload = json.loads(report.read_text())
    assert payload["summary"]["total"] == 1
    assert payload["summary"]["first_seed"] == 3
    assert payload["cases"][0]["status"] == "passed"


def test_cli_profile_names_workdir(toolbox, tmp_path: Path) -> None:
    env = _tool_env(toolbox, tmp_path / "unused")
    env["RUNTIME_DIR"] = None
    env["XDG_RUNTIME_DIR"] = str(tmp_path)
    result = CliRunner().invoke(cli, ["--profile", "csmith_c11", "0"], env=env)
    assert result.exit_code == 0, result.output
    assert f"# using working directory:  {tmp_path / 'csmith_c11'}" in result.output
    assert "# using language standard:  c11" in result.output
    assert not (tmp_path / "csmith_c11").exists()
