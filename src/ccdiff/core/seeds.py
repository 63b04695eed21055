"""Seed range parsing for csmith campaigns.

Accepted command line forms::

    ccdiff                 # seeds 0..1000
    ccdiff 42              # only seed 42
    ccdiff 10 20           # seeds 10..20
    ccdiff 10 - 20         # same, with a lone separator
    ccdiff 10-20           # same, hyphenated
    ccdiff -- -50          # seeds 0..50
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

DEFAULT_FIRST_SEED = 0
DEFAULT_LAST_SEED = 1000


class SeedRangeError(ValueError):
    """Raised when seed tokens cannot be interpreted."""


@dataclass(frozen=True)
class SeedRange:
    """Normalized, inclusive and ascending range of seeds."""

    first: int
    last: int

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.first, self.last + 1))

    def __len__(self) -> int:
        return self.last - self.first + 1

    def label(self) -> str:
        return f"{self.first} to {self.last}"


def parse_seed_range(tokens: Sequence[str]) -> SeedRange:
    """Resolve zero to three raw tokens into a normalized ``SeedRange``."""

    args = [str(token).strip() for token in tokens if str(token).strip()]
    first: str = str(DEFAULT_FIRST_SEED)
    last: str = str(DEFAULT_LAST_SEED)
    if args:
        head = args[0]
        if "-" not in head:
            first = head
            if len(args) > 1:
                args.pop(0)
        else:
            parts = head.split("-")
            if parts[0]:
                first = parts[0]
            if parts[1]:
                last = parts[1]
            args.pop(0)
        if args and args[0] == "-":
            args.pop(0)
        if args:
            last = args.pop(0)
        if args:
            raise SeedRangeError(f"Unexpected seed arguments: {' '.join(args)}")
    return normalize_seed_range(_to_int(first), _to_int(last))


def normalize_seed_range(first: int, last: Optional[int] = None) -> SeedRange:
    """Apply the sign and ordering rules to a raw first/last pair.

    A negative ``first`` is a count: the range becomes ``0..abs(first)``
    and any explicit ``last`` is ignored. A negative ``last`` with a
    non-negative ``first`` is used by its absolute value. The bounds are
    swapped when they arrive in descending order.
    """

    if last is None:
        last = DEFAULT_LAST_SEED
    if first < 0:
        first, last = 0, -first
    elif last < 0:
        last = -last
    if first > last:
        first, last = last, first
    return SeedRange(first=first, last=last)


def _to_int(text: str) -> int:
    try:
        return int(text)
    except ValueError as exc:
        raise SeedRangeError(f"Invalid seed value '{text}'") from exc
