"""JSON reporter emitting structured campaign results."""
from __future__ import annotations

import datetime as dt
import json
import pathlib
from typing import Any, Dict

from jsonschema import validate

from ccdiff.core.models import CampaignResult, CampaignSettings, CaseResult, Failure
from ccdiff.core.seeds import SeedRange

from .base import Reporter
from .schema import JSON_SCHEMA_V1, SCHEMA_VERSION


class JsonReporter(Reporter):
    """Writes results to a JSON file validated against the schema."""

    def __init__(self, path: str) -> None:
        self._path = pathlib.Path(path)
        self._records: list[Dict[str, Any]] = []
        self._settings: CampaignSettings | None = None
        self._seeds: SeedRange | None = None

    def on_start(self, settings: CampaignSettings, seeds: SeedRange) -> None:
        self._settings = settings
        self._seeds = seeds
        self._records.clear()

    def on_case_result(self, result: CaseResult, index: int, total: int) -> None:
        self._records.append(_case_to_dict(result))

    def on_bail_out(self, reason: str, campaign: CampaignResult) -> None:
        self.on_complete(campaign)

    def on_complete(self, campaign: CampaignResult) -> None:
        if self._settings is None or self._seeds is None:
            return
        payload = {
            "schema_version": SCHEMA_VERSION,
            "generated_at": dt.datetime.now(dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "summary": _build_summary(self._settings, self._seeds, campaign),
            "cases": self._records,
        }
        validate(instance=payload, schema=JSON_SCHEMA_V1)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:  # pragma: no cover - filesystem protection
            raise RuntimeError(f"Failed to write JSON report to {self._path}: {exc}") from exc


def _build_summary(settings: CampaignSettings, seeds: SeedRange, campaign: CampaignResult) -> Dict[str, Any]:
    toolchains = settings.toolchains
    return {
        "total": campaign.totals.reported,
        "passed": campaign.totals.passed,
        "failed": campaign.totals.failed,
        "first_seed": seeds.first,
        "last_seed": seeds.last,
        "std": toolchains.std_name,
        "reference": " ".join((*toolchains.reference.command, *toolchains.reference.flags)),
        "test": " ".join((*toolchains.test.command, *toolchains.test.flags)),
        "workdir": str(settings.workdir),
        "workdir_removed": campaign.workdir_removed,
        "duration_s": campaign.duration_s,
        "aborted": campaign.aborted,
    }


def _case_to_dict(result: CaseResult) -> Dict[str, Any]:
    return {
        "seed": result.seed,
        "id": result.case_id,
        "status": result.status,
        "source": str(result.source),
        "duration_ms": result.duration_s * 1000,
        "failures": [failure.value for failure in Failure if failure in result.failures],
        "details": list(result.details),
        "scripts": [str(path) for path in result.scripts],
    }
