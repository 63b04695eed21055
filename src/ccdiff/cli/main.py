"""CLI entry point for ccdiff."""
from __future__ import annotations

import os
import sys
from typing import Mapping, Optional, Tuple

import click

from ccdiff import __version__
from ccdiff.backends import GeneratorError
from ccdiff.config import ConfigError, Overrides, load_profiles, resolve_settings, select_profile
from ccdiff.core.runner import CampaignRunner
from ccdiff.core.seeds import DEFAULT_FIRST_SEED, DEFAULT_LAST_SEED, parse_seed_range
from ccdiff.reporting import JsonReporter, ReportManager, Reporter, TapReporter


CONTEXT_SETTINGS = {
    # Negative seed values such as "-50" are arguments, not options.
    "ignore_unknown_options": True,
}

ENVIRONMENT_HELP = (
    ("DEBUG", "print commands before running them"),
    ("CSMITH_BIN", "csmith binary"),
    ("CSMITH_OPTIONS", "additional options for csmith"),
    ("CSMITH_INCLUDE", "csmith include path for the compilers"),
    ("RUNTIME_DIR", "working directory (kept after the run)"),
    ("REFCC", "c reference compiler [ $HOSTCC | $BUILDCC | gcc ]"),
    ("REFCXX", "c++ reference compiler [ $HOSTCXX | $BUILDCXX | g++ ]"),
    ("REFCCFLAGS", "extra flags for the c reference compiler"),
    ("REFCXXFLAGS", "extra flags for the c++ reference compiler"),
    ("TESTCC", "c compiler to test [ $CC ]"),
    ("TESTCXX", "c++ compiler to test [ $CXX ]"),
    ("TESTCCFLAGS", "extra flags for the c compiler to test [ $CFLAGS ]"),
    ("TESTCXXFLAGS", "extra flags for the c++ compiler to test [ $CXXFLAGS ]"),
)


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"ccdiff {__version__}")
    raise click.exceptions.Exit()


def _print_help(ctx: click.Context, __: click.Parameter, value: bool) -> None:
    """Show usage plus the defaults resolved from the environment; exits 1."""

    if not value or ctx.resilient_parsing:
        return
    click.echo(ctx.get_help())
    click.echo("")
    click.echo(describe_environment(os.environ))
    ctx.exit(1)


def describe_environment(env: Mapping[str, str]) -> str:
    lines = [
        f"Seed range defaults to {DEFAULT_FIRST_SEED} - {DEFAULT_LAST_SEED}; "
        "a single value runs only that seed.",
        "",
        "Environment variables:",
    ]
    for name, description in ENVIRONMENT_HELP:
        current = env.get(name)
        suffix = f" (currently: {current})" if current else ""
        lines.append(f"  {name:<15}{description}{suffix}")
    lines.append("")
    try:
        settings = resolve_settings(env)
    except ConfigError as exc:
        lines.append(f"Resolved configuration: unavailable ({exc})")
        return "\n".join(lines)
    toolchains = settings.toolchains
    lines += [
        "Resolved configuration:",
        f"  language standard:  {toolchains.std_name}",
        f"  csmith binary:      {' '.join(settings.generator)}",
        f"  working directory:  {settings.workdir}",
        f"  reference compiler: {toolchains.reference.label()} {toolchains.reference.flags_label()}".rstrip(),
        f"  testing compiler:   {toolchains.test.label()} {toolchains.test.flags_label()}".rstrip(),
        f"  run timeout:        {settings.timeout:g}s",
    ]
    return "\n".join(lines)


@click.command(context_settings=CONTEXT_SETTINGS, add_help_option=False)
@click.argument("seeds", nargs=-1, type=click.UNPROCESSED)
@click.option(
    "-h",
    "--help",
    is_flag=True,
    callback=_print_help,
    expose_value=False,
    is_eager=True,
    help="Show this message and the resolved defaults, then exit.",
)
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the ccdiff version and exit.",
)
@click.option("--debug", is_flag=True, help="Print every command before running it (also DEBUG=1).")
@click.option("--profile", "profile_name", type=str, help="Toolchain profile, e.g. csmith_c11.gcc.-strict.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML file with named toolchain profiles.",
)
@click.option("--std", type=str, help="Language standard: c99, c11, c++03, c++11 ...")
@click.option("--timeout", type=float, help="Seconds each compiled program may run (default 8).")
@click.option("--runtime-dir", type=str, help="Working directory; kept after the run.")
@click.option("--csmith", "generator", type=str, help="csmith binary.")
@click.option("--csmith-options", "generator_options", type=str, help="Additional csmith options.")
@click.option("--csmith-include", "include", type=str, help="csmith include path for the compilers.")
@click.option("--ref-cc", "reference", type=str, help="Reference compiler command.")
@click.option("--ref-flags", "reference_flags", type=str, help="Extra flags for the reference compiler.")
@click.option("--test-cc", "test", type=str, help="Compiler under test.")
@click.option("--test-flags", "test_flags", type=str, help="Extra flags for the compiler under test.")
@click.option("--json-report", type=click.Path(dir_okay=False), help="Also write a JSON report to this path.")
@click.option("--color/--no-color", default=False, show_default=True, help="Colour ok/not ok tokens.")
def cli(
    seeds: Tuple[str, ...],
    debug: bool,
    profile_name: Optional[str],
    config_path: Optional[str],
    std: Optional[str],
    timeout: Optional[float],
    runtime_dir: Optional[str],
    generator: Optional[str],
    generator_options: Optional[str],
    include: Optional[str],
    reference: Optional[str],
    reference_flags: Optional[str],
    test: Optional[str],
    test_flags: Optional[str],
    json_report: Optional[str],
    color: bool,
) -> None:
    """Compare a C/C++ compiler under test against a reference compiler.

    csmith generates one reproducible program per seed in
    [FIRST_SEED] [-] [LAST_SEED]. Results are reported as TAP.
    """

    overrides = Overrides(
        std=std,
        runtime_dir=runtime_dir,
        timeout=timeout,
        debug=debug,
        generator=generator,
        generator_options=generator_options,
        include=include,
        reference=reference,
        reference_flags=reference_flags,
        test=test,
        test_flags=test_flags,
    )
    try:
        table = load_profiles(config_path) if config_path else None
        profile = select_profile(profile_name, table)
        settings = resolve_settings(os.environ, profile=profile, overrides=overrides)
        seed_range = parse_seed_range(seeds)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    reporters: list[Reporter] = [TapReporter(use_color=color)]
    if json_report:
        reporters.append(JsonReporter(json_report))
    runner = CampaignRunner(settings, reporter=ReportManager(reporters))
    try:
        runner.run(seed_range)
    except GeneratorError as exc:
        raise click.ClickException(str(exc)) from exc


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="ccdiff", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
