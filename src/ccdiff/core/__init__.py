"""Core models and helpers exposed at the package level."""
from .models import (
    CampaignResult,
    CampaignSettings,
    CampaignTotals,
    CaseResult,
    Failure,
    Language,
    Role,
    Toolchain,
    ToolchainDescriptor,
)
from .naming import ArtifactPaths, case_id
from .seeds import SeedRange, SeedRangeError, parse_seed_range

__all__ = [
    "ArtifactPaths",
    "CampaignResult",
    "CampaignSettings",
    "CampaignTotals",
    "CaseResult",
    "Failure",
    "Language",
    "Role",
    "SeedRange",
    "SeedRangeError",
    "Toolchain",
    "ToolchainDescriptor",
    "case_id",
    "parse_seed_range",
]
