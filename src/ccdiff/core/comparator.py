"""Utilities for comparing reference and test program outputs."""
from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

DEFAULT_DIFF_LINES = 20


@dataclass
class ComparisonResult:
    """Outcome of comparing two captured output files."""

    passed: bool
    message: Optional[str] = None
    diff_lines: List[str] = field(default_factory=list)


def compare_captures(
    reference: Path,
    test: Path,
    *,
    max_diff_lines: int = DEFAULT_DIFF_LINES,
) -> ComparisonResult:
    """Compare two capture files byte for byte.

    A missing or unreadable capture counts as a mismatch. On mismatch the
    result carries the head of a unified diff for diagnostics.
    """

    try:
        expected = Path(reference).read_bytes()
        actual = Path(test).read_bytes()
    except OSError as exc:
        return ComparisonResult(passed=False, message=f"capture unavailable: {exc}")
    if expected == actual:
        return ComparisonResult(passed=True)
    diff = difflib.unified_diff(
        expected.decode("utf-8", errors="replace").splitlines(),
        actual.decode("utf-8", errors="replace").splitlines(),
        fromfile=str(reference),
        tofile=str(test),
        lineterm="",
    )
    lines: list[str] = []
    for line in diff:
        if len(lines) >= max_diff_lines:
            lines.append("...")
            break
        lines.append(line)
    return ComparisonResult(
        passed=False,
        message=f"output differs ({len(expected)} vs {len(actual)} bytes)",
        diff_lines=lines,
    )
