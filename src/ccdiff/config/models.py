"""Data models for campaign configuration."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

DEFAULT_PROFILE_NAME = "csmith"


class ConfigError(ValueError):
    """Invalid configuration; fatal before any seed runs."""


@dataclass(frozen=True)
class Profile:
    """Named toolchain preset, e.g. ``csmith_c11.gcc.-strict``."""

    name: str = DEFAULT_PROFILE_NAME
    std: Optional[str] = None
    reference: Sequence[str] = field(default_factory=tuple)
    reference_flags: Sequence[str] = field(default_factory=tuple)
    test: Sequence[str] = field(default_factory=tuple)
    test_flags: Sequence[str] = field(default_factory=tuple)
    timeout: Optional[float] = None


@dataclass(frozen=True)
class Overrides:
    """Explicit command line settings; each wins over the environment."""

    std: Optional[str] = None
    runtime_dir: Optional[str] = None
    timeout: Optional[float] = None
    debug: bool = False
    generator: Optional[str] = None
    generator_options: Optional[str] = None
    include: Optional[str] = None
    reference: Optional[str] = None
    reference_flags: Optional[str] = None
    test: Optional[str] = None
    test_flags: Optional[str] = None
