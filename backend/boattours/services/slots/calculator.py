# backend/boattours/services/slots/calculator.py
"""
Departure candidate generation.

Walks the operating day on the departure cadence and keeps a time only if:
✓ it falls inside one of the service windows (inclusive)
✓ it lands on a rotation offset of the cycle (tour + buffer)

Does NOT look at:
✗ Vessels, bookings or blackouts (checked by availability/admission)
✗ The current time (lead time is checked per instant)
"""

from .config import TourConfig, get_tour_config, minutes_to_time_str


def is_aligned(minutes: int, config: TourConfig) -> bool:
    """Time-of-day sits on one of the configured rotation offsets."""
    elapsed = minutes - config.open_minutes
    if elapsed < 0:
        return False
    return elapsed % config.cycle_minutes in config.rotation_offsets


def generate_candidates(config: TourConfig | None = None) -> list[str]:
    """
    Enumerate departure times for a day.

    The grid depends only on static configuration, so every day yields
    the same sequence.

    Returns:
        Ascending list of "HH:MM" strings.
    """
    config = config or get_tour_config()
    step = config.departure_interval_minutes

    candidates: list[str] = []
    t = config.open_minutes
    while t <= config.close_minutes:
        if config.in_service_window(t) and is_aligned(t, config):
            candidates.append(minutes_to_time_str(t))
        t += step

    return candidates
