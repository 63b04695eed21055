"""Resolve environment, profile and command line into campaign settings."""
from __future__ import annotations

import shlex
from pathlib import Path
from typing import Mapping, Optional, Sequence, Tuple

from ccdiff.backends.csmith import language_flags
from ccdiff.core.models import (
    DEFAULT_TIMEOUT_S,
    CampaignSettings,
    Language,
    Toolchain,
    ToolchainDescriptor,
)

from .models import ConfigError, Overrides, Profile

DEFAULT_GENERATOR = "csmith"
DEFAULT_INCLUDE = "/usr/include/csmith"
DEFAULT_REFERENCE = {Language.C: "gcc", Language.CXX: "g++"}
SUPPORTED_CXX_VERSIONS = ("98", "03", "11")
# -O0 -g: no optimization, debug info; -lm: libm; -w: no warnings.
BASE_COMPILER_FLAGS = ("-O0", "-g", "-lm", "-w")

# Environment variable names per language: explicit, host, build, test, fallback.
_ENV_NAMES = {
    Language.C: {
        "ref": "REFCC",
        "ref_flags": "REFCCFLAGS",
        "fallbacks": (("HOSTCC", "HOSTCCFLAGS"), ("BUILDCC", "BUILDCCFLAGS")),
        "test": ("TESTCC", "CC"),
        "test_flags": ("TESTCCFLAGS", "CFLAGS"),
    },
    Language.CXX: {
        "ref": "REFCXX",
        "ref_flags": "REFCXXFLAGS",
        "fallbacks": (("HOSTCXX", "HOSTCXXFLAGS"), ("BUILDCXX", "BUILDCXXFLAGS")),
        "test": ("TESTCXX", "CXX"),
        "test_flags": ("TESTCXXFLAGS", "CXXFLAGS"),
    },
}


def parse_std(text: str) -> Tuple[Language, str]:
    """Split ``c11``/``c++03``/``c`` into language and version digits."""

    value = text.strip().lower()
    prefix = value.rstrip("0123456789")
    version = value[len(prefix):]
    if prefix == "c":
        language = Language.C
    elif prefix in {"c++", "cxx", "cpp"}:
        language = Language.CXX
    else:
        raise ConfigError(f"language standard not supported: {text}")
    return language, version


def detect_language(env: Mapping[str, str]) -> Optional[Language]:
    """Guess the language from which compiler variables are set."""

    language: Optional[Language] = None
    for name, candidate in (
        ("REFCC", Language.C),
        ("REFCXX", Language.CXX),
        ("TESTCC", Language.C),
        ("TESTCXX", Language.CXX),
    ):
        if env.get(name):
            language = candidate
    if language is None:
        if env.get("CC"):
            language = Language.C
        elif env.get("CXX"):
            language = Language.CXX
    return language


def resolve_settings(
    env: Mapping[str, str],
    *,
    profile: Optional[Profile] = None,
    overrides: Optional[Overrides] = None,
) -> CampaignSettings:
    """Build immutable ``CampaignSettings``; raises ``ConfigError``."""

    profile = profile or Profile()
    overrides = overrides or Overrides()
    language, version = _resolve_std(env, profile, overrides)
    reference = _resolve_reference(env, language, profile, overrides)
    test = _resolve_test(env, language, profile, overrides)
    include = overrides.include or env.get("CSMITH_INCLUDE") or DEFAULT_INCLUDE
    toolchains = ToolchainDescriptor(
        language=language,
        std_version=version,
        reference=reference,
        test=test,
        compiler_flags=(f"-std={language.std_prefix}{version}", *BASE_COMPILER_FLAGS, f"-I{include}"),
        generator_flags=language_flags(language, version),
    )
    runtime_dir = overrides.runtime_dir or env.get("RUNTIME_DIR")
    if runtime_dir:
        workdir = Path(runtime_dir)
    else:
        base = env.get("XDG_RUNTIME_DIR") or "/tmp"
        workdir = Path(base) / profile.name
    timeout = overrides.timeout if overrides.timeout is not None else profile.timeout
    if timeout is None:
        timeout = DEFAULT_TIMEOUT_S
    if timeout <= 0:
        raise ConfigError(f"timeout must be positive, got {timeout}")
    return CampaignSettings(
        toolchains=toolchains,
        workdir=workdir.expanduser().absolute(),
        workdir_explicit=bool(runtime_dir),
        generator=_split(overrides.generator or env.get("CSMITH_BIN") or DEFAULT_GENERATOR),
        generator_options=_split(
            overrides.generator_options if overrides.generator_options is not None else env.get("CSMITH_OPTIONS")
        ),
        timeout=float(timeout),
        debug=overrides.debug or bool(env.get("DEBUG")),
    )


def _resolve_std(env: Mapping[str, str], profile: Profile, overrides: Overrides) -> Tuple[Language, str]:
    std_text = overrides.std or profile.std
    if std_text:
        language, version = parse_std(std_text)
    else:
        language = detect_language(env) or Language.C
        version = ""
    if not version:
        version = language.default_std_version
    if language is Language.CXX and version not in SUPPORTED_CXX_VERSIONS:
        raise ConfigError(f"c++ version not supported: {version}")
    return language, version


def _resolve_reference(
    env: Mapping[str, str], language: Language, profile: Profile, overrides: Overrides
) -> Toolchain:
    names = _ENV_NAMES[language]
    command = _split(overrides.reference) or _split(env.get(names["ref"]))
    flags = _split(overrides.reference_flags) or _split(env.get(names["ref_flags"]))
    if not command:
        # A host or build compiler brings its own flags variable along.
        for compiler_var, flags_var in names["fallbacks"]:
            if env.get(compiler_var):
                command = _split(env[compiler_var])
                flags = _split(overrides.reference_flags) or _split(env.get(flags_var))
                break
    if not command:
        command = tuple(profile.reference)
    if not command:
        command = (DEFAULT_REFERENCE[language],)
    if not flags:
        flags = tuple(profile.reference_flags)
    return Toolchain(command=command, flags=flags)


def _resolve_test(
    env: Mapping[str, str], language: Language, profile: Profile, overrides: Overrides
) -> Toolchain:
    names = _ENV_NAMES[language]
    command = _split(overrides.test) or _first(env, names["test"]) or tuple(profile.test)
    if not command:
        raise ConfigError("No test compiler found")
    flags = _split(overrides.test_flags) or _first(env, names["test_flags"]) or tuple(profile.test_flags)
    return Toolchain(command=command, flags=flags)


def _first(env: Mapping[str, str], names: Sequence[str]) -> Tuple[str, ...]:
    for name in names:
        value = _split(env.get(name))
        if value:
            return value
    return tuple()


def _split(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return tuple()
    return tuple(shlex.split(value))
