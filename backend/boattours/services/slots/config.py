# backend/boattours/services/slots/config.py
"""
Static configuration for departure slot allocation.
"""

from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache

import pytz


class ConfigurationError(ValueError):
    """Static tour configuration is unusable (fatal, never degraded)."""


def time_str_to_minutes(time_str: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    hour, minute = time_str.split(":")
    return int(hour) * 60 + int(minute)


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class TourConfig:
    """
    Configuration for the departure engine.

    Attributes:
        timezone: Civil timezone of the business (pytz name)
        open_time / close_time: Operating day bounds, "HH:MM"
        service_windows: Bookable ranges, inclusive on both ends
        departure_interval_minutes: Step of the candidate grid
        tour_duration_minutes: Stored span of a booking
        buffer_minutes: Turnaround added only for conflict checks
        rotation_offsets: One offset per vessel inside the cycle
        min_lead_minutes: Minimum time between now and departure
        horizon_days: How many days ahead departures are offered
        price_*: Unit prices per passenger category
    """
    timezone: str = "Europe/Paris"
    open_time: str = "10:00"
    close_time: str = "18:00"
    service_windows: tuple[tuple[str, str], ...] = (
        ("10:00", "11:45"),
        ("13:30", "17:45"),
    )
    departure_interval_minutes: int = 5
    tour_duration_minutes: int = 25
    buffer_minutes: int = 5
    rotation_offsets: tuple[int, ...] = (0, 10, 20)
    min_lead_minutes: int = 5
    horizon_days: int = 90
    price_adult: float = 9.0
    price_child: float = 4.0
    price_baby: float = 0.0

    def __post_init__(self):
        """Validate configuration."""
        try:
            pytz.timezone(self.timezone)
        except pytz.UnknownTimeZoneError:
            raise ConfigurationError(f"Unknown timezone: {self.timezone}")

        try:
            open_min = time_str_to_minutes(self.open_time)
            close_min = time_str_to_minutes(self.close_time)
            windows = [
                (time_str_to_minutes(start), time_str_to_minutes(end))
                for start, end in self.service_windows
            ]
        except (ValueError, TypeError):
            raise ConfigurationError("Times must be formatted as HH:MM")

        if open_min >= close_min:
            raise ConfigurationError(
                f"open_time {self.open_time} must precede close_time {self.close_time}"
            )
        for start, end in windows:
            if start > end:
                raise ConfigurationError(f"Service window {start}-{end} is reversed")

        if self.departure_interval_minutes <= 0:
            raise ConfigurationError("departure_interval_minutes must be positive")
        if self.tour_duration_minutes <= 0:
            raise ConfigurationError("tour_duration_minutes must be positive")
        if self.buffer_minutes < 0:
            raise ConfigurationError("buffer_minutes cannot be negative")
        if self.min_lead_minutes < 0:
            raise ConfigurationError("min_lead_minutes cannot be negative")

        offsets = self.rotation_offsets
        if not offsets:
            raise ConfigurationError("At least one rotation offset is required")
        if list(offsets) != sorted(set(offsets)):
            raise ConfigurationError("rotation_offsets must be unique and ascending")
        if offsets[0] < 0 or offsets[-1] >= self.cycle_minutes:
            raise ConfigurationError(
                f"rotation_offsets must lie within the {self.cycle_minutes} min cycle"
            )

    @property
    def cycle_minutes(self) -> int:
        """Tour plus turnaround: every vessel departs once per cycle."""
        return self.tour_duration_minutes + self.buffer_minutes

    @property
    def open_minutes(self) -> int:
        return time_str_to_minutes(self.open_time)

    @property
    def close_minutes(self) -> int:
        return time_str_to_minutes(self.close_time)

    @property
    def tour_duration(self) -> timedelta:
        return timedelta(minutes=self.tour_duration_minutes)

    @property
    def conflict_span(self) -> timedelta:
        """Span a departure occupies when checked against other bookings."""
        return timedelta(minutes=self.cycle_minutes)

    @property
    def min_lead(self) -> timedelta:
        return timedelta(minutes=self.min_lead_minutes)

    def in_service_window(self, minutes: int) -> bool:
        for start, end in self.service_windows:
            if time_str_to_minutes(start) <= minutes <= time_str_to_minutes(end):
                return True
        return False


@lru_cache
def get_tour_config() -> TourConfig:
    """
    Get tour configuration (singleton).

    Timezone, lead time and horizon come from process settings;
    the departure grid is fixed for the fleet.
    """
    from ...config import settings

    return TourConfig(
        timezone=settings.tour_timezone,
        min_lead_minutes=settings.min_lead_minutes,
        horizon_days=settings.horizon_days,
    )
