"""Human readable ages for dead sessions."""

from __future__ import annotations

import math
from datetime import datetime, timedelta

# Largest unit first
UNITS = (
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)


def format_elapsed(elapsed: float | timedelta) -> str:
    """Format elapsed time in its largest whole unit.

    >>> format_elapsed(3661)
    '1 hour(s) ago'
    """
    if isinstance(elapsed, timedelta):
        elapsed = elapsed.total_seconds()
    if not math.isfinite(elapsed):
        elapsed = 0
    seconds = max(0, int(elapsed))
    for unit, size in UNITS:
        count = seconds // size
        if count >= 1:
            return f"{count} {unit}(s) ago"
    return "0 second(s) ago"


def format_age(when: datetime, now: datetime | None = None) -> str:
    """Age of ``when`` relative to ``now`` (defaults to the current time)."""
    if now is None:
        now = datetime.now(tz=when.tzinfo)
    return format_elapsed(now - when)
