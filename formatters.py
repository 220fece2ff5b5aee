"""
Display helpers for numbers, ISO 8601 durations and publish dates.
"""

import re
import math
from typing import Union

import pandas as pd

from errors import MalformedInput

DURATION_RE = re.compile(r"PT(\d+H)?(\d+M)?(\d+S)?")

Number = Union[int, float]


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (2.5 -> 3), unlike round()."""
    return int(math.floor(value + 0.5))


def format_compact_number(num: Number) -> str:
    """Format large numbers with K/M/B suffix, one decimal place."""
    if num >= 1_000_000_000:
        return f"{num / 1_000_000_000:.1f}B"
    elif num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    elif num >= 1_000:
        return f"{num / 1_000:.1f}K"
    return str(num)


def parse_duration(duration: str) -> str:
    """
    Convert an ISO 8601 duration into a clock string.

    Args:
        duration: e.g. "PT1H2M3S"

    Returns:
        "H:MM:SS" when there are hours, otherwise "MM:SS"

    Raises:
        MalformedInput: if the string has no PT[nH][nM][nS] part
    """
    match = DURATION_RE.search(duration or "")
    if not match:
        raise MalformedInput(f"Invalid duration: {duration!r}")

    hours, minutes, seconds = (
        int(part[:-1]) if part else 0 for part in match.groups()
    )

    result = f"{hours}:" if hours > 0 else ""
    return result + f"{minutes:02d}:{seconds:02d}"


def format_publish_date(published_at: str) -> str:
    """Render an API timestamp like 2024-03-07T15:00:00Z as 3/7/2024."""
    if not published_at:
        return ""
    try:
        date = pd.to_datetime(published_at)
    except ValueError as e:
        raise MalformedInput(f"Invalid publish date: {published_at!r}") from e
    return f"{date.month}/{date.day}/{date.year}"
