"""Test Anything Protocol reporter streaming to stdout."""
from __future__ import annotations

import click
from colorama import Fore, Style, init as colorama_init

from ccdiff.core.models import CampaignResult, CampaignSettings, CaseResult
from ccdiff.core.seeds import SeedRange

from .base import Reporter


class TapReporter(Reporter):
    """Emits one ``ok``/``not ok`` line per seed, then a summary and the plan."""

    def __init__(self, *, use_color: bool = False) -> None:
        self._use_color = use_color
        self._count = 0
        if use_color:
            colorama_init()

    @property
    def count(self) -> int:
        return self._count

    def on_start(self, settings: CampaignSettings, seeds: SeedRange) -> None:
        self._count = 0
        toolchains = settings.toolchains
        self._diag(f"using csmith binary:      {' '.join(settings.generator)}")
        options = (*toolchains.generator_flags, *settings.generator_options)
        if options:
            self._diag(f"using csmith options:     {' '.join(options)}")
        self._diag(f"using csmith seed range:  {seeds.label()}")
        self._diag(f"using working directory:  {settings.workdir}")
        self._diag(f"using language standard:  {toolchains.std_name}")
        self._diag(f"using reference compiler: {toolchains.reference.label()}")
        self._diag(f"using reference flags:    {toolchains.reference.flags_label()}")
        self._diag(f"using testing compiler:   {toolchains.test.label()}")
        self._diag(f"using testing flags:      {toolchains.test.flags_label()}")

    def on_trace(self, message: str) -> None:
        self._diag(message)

    def on_case_result(self, result: CaseResult, index: int, total: int) -> None:
        self._count += 1
        token = "ok" if result.passed else "not ok"
        click.echo(f"{self._styled(token, passed=result.passed)} {self._count} - {result.source}")
        for detail in result.details:
            self._diag(detail)

    def on_bail_out(self, reason: str, campaign: CampaignResult) -> None:
        click.echo(f"Bail out! {reason}")

    def on_complete(self, campaign: CampaignResult) -> None:
        totals = campaign.totals
        self._diag(_plural(totals.passed, "succeeded"))
        self._diag(_plural(totals.failed, "failed"))
        if totals.failed == 0:
            self._diag("All OK")
        click.echo(f"1..{self._count}")

    def _diag(self, message: str) -> None:
        for line in message.splitlines() or [""]:
            click.echo(f"# {line}".rstrip())

    def _styled(self, token: str, *, passed: bool) -> str:
        if not self._use_color:
            return token
        color = Fore.GREEN if passed else Fore.RED
        return f"{color}{token}{Style.RESET_ALL}"


def _plural(count: int, verb: str) -> str:
    noun = "test" if count == 1 else "tests"
    return f"{count} {noun} {verb}"
