"""Reporter interface definitions."""
from __future__ import annotations

from typing import List, Sequence

from ccdiff.core.models import CampaignResult, CampaignSettings, CaseResult
from ccdiff.core.seeds import SeedRange


class Reporter:
    """Interface for output renderers."""

    def on_start(self, settings: CampaignSettings, seeds: SeedRange) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def on_trace(self, message: str) -> None:
        """Debug tracing; ignored unless a reporter renders it."""

    def on_case_result(self, result: CaseResult, index: int, total: int) -> None:  # pragma: no cover
        raise NotImplementedError

    def on_bail_out(self, reason: str, campaign: CampaignResult) -> None:  # pragma: no cover
        raise NotImplementedError

    def on_complete(self, campaign: CampaignResult) -> None:  # pragma: no cover
        raise NotImplementedError


class ReportManager(Reporter):
    """Dispatches lifecycle callbacks to multiple reporters."""

    def __init__(self, reporters: Sequence[Reporter]) -> None:
        self._reporters = list(reporters)

    def on_start(self, settings: CampaignSettings, seeds: SeedRange) -> None:
        for reporter in self._reporters:
            reporter.on_start(settings, seeds)

    def on_trace(self, message: str) -> None:
        for reporter in self._reporters:
            reporter.on_trace(message)

    def on_case_result(self, result: CaseResult, index: int, total: int) -> None:
        for reporter in self._reporters:
            reporter.on_case_result(result, index, total)

    def on_bail_out(self, reason: str, campaign: CampaignResult) -> None:
        for reporter in self._reporters:
            reporter.on_bail_out(reason, campaign)

    def on_complete(self, campaign: CampaignResult) -> None:
        for reporter in self._reporters:
            reporter.on_complete(campaign)

    def reporters(self) -> List[Reporter]:
        return list(self._reporters)
