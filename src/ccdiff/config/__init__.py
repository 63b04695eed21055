"""Configuration: environment, profiles and command line overrides."""

from .loader import load_profiles, parse_profile, select_profile
from .models import ConfigError, Overrides, Profile
from .resolver import detect_language, parse_std, resolve_settings

__all__ = [
    "ConfigError",
    "Overrides",
    "Profile",
    "detect_language",
    "load_profiles",
    "parse_profile",
    "parse_std",
    "resolve_settings",
    "select_profile",
]
