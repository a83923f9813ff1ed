"""Relative-age parsing for feed rows.

Turns labels like "5 minutes ago" or "1 day ago" into a rank in minutes so
rows can be compared numerically. Smaller rank means more recent.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from enum import Enum

# Rank given to text we cannot read. Sorts after every real age.
MAX_RANK = sys.maxsize


class TimeUnit(str, Enum):
    """Unit word classification."""

    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    UNKNOWN = "unknown"


# Minutes per unit
_MULTIPLIERS: dict[TimeUnit, int] = {
    TimeUnit.MINUTE: 1,
    TimeUnit.HOUR: 60,
    TimeUnit.DAY: 60 * 24,
}

_LEADING_INT_RE = re.compile(r"[+-]?\d+")


@dataclass(frozen=True)
class AgeParse:
    """Result of reading one age label.

    ``recognized`` is False when the label fell back to MAX_RANK.
    """

    rank: int
    unit: TimeUnit
    recognized: bool


_UNRECOGNIZED = AgeParse(rank=MAX_RANK, unit=TimeUnit.UNKNOWN, recognized=False)


def classify_unit(word: str) -> TimeUnit:
    """Classify a unit word by prefix.

    Matching is case-sensitive, so "minutes", "minute" and "minutely" are all
    MINUTE while "Minutes" is UNKNOWN.

    Args:
        word: The token after the count (e.g., "hours").

    Returns:
        TimeUnit enum value.
    """
    for unit in (TimeUnit.MINUTE, TimeUnit.HOUR, TimeUnit.DAY):
        if word.startswith(unit.value):
            return unit
    return TimeUnit.UNKNOWN


def parse_age(text: object) -> AgeParse:
    """Read a "<n> <unit> ago" label.

    Never raises: anything without a leading integer or a known unit comes
    back unrecognized with rank MAX_RANK.
    """
    if not isinstance(text, str):
        return _UNRECOGNIZED
    parts = text.split()
    if len(parts) < 2:
        return _UNRECOGNIZED

    m = _LEADING_INT_RE.match(parts[0])
    if not m:
        return _UNRECOGNIZED

    unit = classify_unit(parts[1])
    multiplier = _MULTIPLIERS.get(unit)
    if multiplier is None:
        return _UNRECOGNIZED
    # Real ages always sort before the sentinel
    rank = min(int(m.group(0)) * multiplier, MAX_RANK - 1)
    return AgeParse(rank=rank, unit=unit, recognized=True)


def normalize(text: object) -> int:
    """Return the rank in minutes for an age label, or MAX_RANK."""
    return parse_age(text).rank
