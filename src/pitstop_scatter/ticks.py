from __future__ import annotations

import math

import pandas as pd

MILLISECONDS_PER_SECOND = 1000
MILLISECONDS_PER_MINUTE = 60 * MILLISECONDS_PER_SECOND


def format_duration(milliseconds: float) -> str:
    """Render a millisecond count as ``M:SS.mmm``.

    Minutes are unpadded and keep counting past 59; fractional milliseconds
    are truncated.

    >>> format_duration(90500)
    '1:30.500'
    """
    if milliseconds < 0 or not math.isfinite(milliseconds):
        raise ValueError(f"Duration must be a finite non-negative value: {milliseconds!r}")
    total = int(milliseconds)
    minutes, remainder = divmod(total, MILLISECONDS_PER_MINUTE)
    seconds, millis = divmod(remainder, MILLISECONDS_PER_SECOND)
    return f"{minutes}:{seconds:02d}.{millis:03d}"


def format_date(value: pd.Timestamp) -> str:
    timestamp = pd.Timestamp(value)
    if timestamp.month == 1 and timestamp.day == 1:
        return f"{timestamp.year}"
    return timestamp.strftime("%b %Y")
