# backend/boattours/services/slots/clock.py
"""
Wall-clock conversion in the business's civil timezone.

Every local "YYYY-MM-DD" + "HH:MM" pair is localized with the offset in
force on that date, so a winter request for a summer departure gets the
summer offset.
"""

from datetime import date, datetime, time

import pytz


class InvalidWallClockError(ValueError):
    """Malformed date or time-of-day."""


def parse_day(value: str | date) -> date:
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise InvalidWallClockError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_time(value: str) -> tuple[int, int]:
    try:
        parsed = datetime.strptime(value, "%H:%M")
    except (TypeError, ValueError):
        raise InvalidWallClockError(f"Invalid time {value!r}, expected HH:MM")
    return parsed.hour, parsed.minute


def _localize(naive: datetime, timezone_str: str) -> datetime:
    tz = pytz.timezone(timezone_str)
    return tz.normalize(tz.localize(naive))


def to_instant(day: str | date, time_str: str, timezone_str: str) -> datetime:
    """Local date + time-of-day -> aware UTC instant."""
    hour, minute = parse_time(time_str)
    naive = datetime.combine(parse_day(day), time(hour, minute))
    return _localize(naive, timezone_str).astimezone(pytz.utc)


def civil_day_bounds(day: str | date, timezone_str: str) -> tuple[datetime, datetime]:
    """Instants of 00:00:00.000 and 23:59:59.999 of the civil day, in UTC."""
    target = parse_day(day)
    start = _localize(datetime.combine(target, time.min), timezone_str)
    # pinned to the last millisecond, as a day-scoped blackout must cover it
    end = _localize(
        datetime.combine(target, time(23, 59, 59, 999000)), timezone_str
    )
    return start.astimezone(pytz.utc), end.astimezone(pytz.utc)


def civil_now(timezone_str: str, now: datetime | None = None) -> datetime:
    """Current instant expressed in the civil timezone."""
    now = now or datetime.now(pytz.utc)
    if now.tzinfo is None:
        now = pytz.utc.localize(now)
    return now.astimezone(pytz.timezone(timezone_str))


def civil_today(timezone_str: str, now: datetime | None = None) -> date:
    return civil_now(timezone_str, now).date()


def to_utc_naive(instant: datetime) -> datetime:
    """Aware instant -> naive UTC, the storage representation."""
    return instant.astimezone(pytz.utc).replace(tzinfo=None)


def from_utc_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)


def overlaps(
    a_start: datetime,
    a_end: datetime,
    b_start: datetime,
    b_end: datetime,
) -> bool:
    """True if [a_start, a_end) overlaps [b_start, b_end). Touching edges do not."""
    return a_start < b_end and b_start < a_end
