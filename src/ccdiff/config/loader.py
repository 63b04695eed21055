"""Toolchain profiles from dotted names and YAML profile tables."""
from __future__ import annotations

import shlex
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from jsonschema import Draft7Validator

from .models import DEFAULT_PROFILE_NAME, ConfigError, Profile

_COMMAND = {"anyOf": [{"type": "string", "minLength": 1}, {"type": "array", "minItems": 1, "items": {"type": "string"}}]}
_FLAGS = {"anyOf": [{"type": "string"}, {"type": "array", "items": {"type": "string"}}]}

PROFILES_SCHEMA = {
    "type": "object",
    "required": ["profiles"],
    "properties": {
        "profiles": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "std": {"type": "string", "pattern": "^c(\\+\\+)?[0-9]*$"},
                    "reference": _COMMAND,
                    "reference_flags": _FLAGS,
                    "test": _COMMAND,
                    "test_flags": _FLAGS,
                    "timeout": {"type": "number", "exclusiveMinimum": 0},
                },
            },
        },
    },
}
_validator = Draft7Validator(PROFILES_SCHEMA)


def parse_profile(name: str) -> Profile:
    """Decode the dotted naming convention ``short[_std][.compiler[.flag...]]``.

    ``csmith_c11.gcc.-strict`` selects C11, ``gcc`` as reference compiler
    and ``-strict`` as its extra flag; the workdir is named ``csmith_c11``.
    A trailing ``.sh`` is ignored.
    """

    text = name.strip()
    if text.endswith(".sh"):
        text = text[: -len(".sh")]
    if not text:
        return Profile()
    parts = text.split(".")
    short = parts[0] or DEFAULT_PROFILE_NAME
    reference = tuple(parts[1:2]) if len(parts) > 1 and parts[1] else tuple()
    flags = tuple(part for part in parts[2:] if part)
    std = None
    if "_" in short:
        std = short.split("_")[1] or None
    return Profile(name=short, std=std, reference=reference, reference_flags=flags)


def load_profiles(path: str) -> Dict[str, Profile]:
    """Load and validate a YAML profile table."""

    profile_path = Path(path).expanduser().resolve()
    try:
        raw = yaml.safe_load(profile_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to read profiles from {profile_path}: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise ConfigError("Profile file must contain a mapping at the top level")
    errors = sorted(_validator.iter_errors(raw), key=lambda e: "/".join(map(str, e.path)))
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ConfigError(f"Profile schema validation failed: {messages}")
    profiles: Dict[str, Profile] = {}
    for name, entry in raw["profiles"].items():
        entry = entry or {}
        timeout = entry.get("timeout")
        profiles[str(name)] = Profile(
            name=str(name),
            std=entry.get("std"),
            reference=_split(entry.get("reference")),
            reference_flags=_split(entry.get("reference_flags")),
            test=_split(entry.get("test")),
            test_flags=_split(entry.get("test_flags")),
            timeout=float(timeout) if timeout is not None else None,
        )
    return profiles


def select_profile(name: Optional[str], table: Optional[Mapping[str, Profile]] = None) -> Profile:
    """Look ``name`` up in ``table``, falling back to the dotted convention."""

    if not name:
        return Profile()
    if table and name in table:
        return table[name]
    return parse_profile(name)


def _split(value: Any) -> tuple[str, ...]:
    if value is None:
        return tuple()
    if isinstance(value, str):
        return tuple(shlex.split(value))
    return tuple(str(part) for part in value)
