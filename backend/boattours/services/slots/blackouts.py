# backend/boattours/services/slots/blackouts.py
"""
Blackout evaluation against a snapshot of operator-defined intervals.

- `day` scope: blocks the whole civil day when it covers it entirely
- `time` scope: blocks any departure window it overlaps
"""

from datetime import date, datetime
from typing import Iterable, Optional

from .clock import civil_day_bounds, overlaps
from .domain import BlackoutScope, BlackoutSnapshot


DEFAULT_DAY_REASON = "Day unavailable"
DEFAULT_EMPTY_REASON = "No departure available for this day"


def is_day_blocked(
    day: str | date,
    blackouts: Iterable[BlackoutSnapshot],
    timezone_str: str,
) -> tuple[bool, Optional[str]]:
    """
    Check whether a day-scoped blackout spans the whole civil day.

    Returns:
        (blocked, reason); reason comes from the first covering interval.
    """
    day_start, day_end = civil_day_bounds(day, timezone_str)

    for blackout in blackouts:
        if blackout.scope != BlackoutScope.DAY:
            continue
        if blackout.start_at <= day_start and blackout.end_at >= day_end:
            return True, blackout.reason or DEFAULT_DAY_REASON

    return False, None


def is_window_blocked(
    window_start: datetime,
    window_end: datetime,
    blackouts: Iterable[BlackoutSnapshot],
) -> bool:
    """A window is blocked if it overlaps any interval, whatever its scope."""
    return any(
        overlaps(window_start, window_end, b.start_at, b.end_at)
        for b in blackouts
    )


def advisory_reason(blackouts: list[BlackoutSnapshot]) -> Optional[str]:
    """Message shown when a day with blackouts ends up without departures."""
    if not blackouts:
        return None
    return blackouts[0].reason or DEFAULT_EMPTY_REASON
