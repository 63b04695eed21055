"""Reporting exports."""
from .base import ReportManager, Reporter
from .json_reporter import JsonReporter
from .tap import TapReporter

__all__ = [
    "ReportManager",
    "Reporter",
    "JsonReporter",
    "TapReporter",
]
