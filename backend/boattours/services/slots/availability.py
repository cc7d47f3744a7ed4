# backend/boattours/services/slots/availability.py
"""
Availability of departures for a day (read path).

Composes the leaves:
- Candidate grid (calculator)
- Wall-clock conversion and lead time (clock)
- Blackouts (day-wide and per window)
- Stateless rotation (vessel per time-of-day)
- Capacity & language policy (joins)

Nothing here is cached: every call recomputes from the snapshots it is
given, so two calls on the same snapshot return the same slots.
"""

from datetime import date, datetime
from typing import Iterable, Optional, Union

import pytz
from sqlalchemy.orm import Session

from .blackouts import advisory_reason, is_day_blocked, is_window_blocked
from .calculator import generate_candidates
from .capacity import conflicting_bookings, resolve_admission
from .clock import parse_day, parse_time, to_instant
from .config import TourConfig, get_tour_config
from .domain import (
    BlackoutSnapshot,
    BookingSnapshot,
    Departure,
    OpenSlots,
    Party,
    Rejection,
    RejectionCode,
    VesselSnapshot,
)
from .rotation import assign_vessel
from .snapshots import load_active_vessels, load_day_blackouts, load_day_bookings


def resolve_departure(
    target_date: Union[str, date],
    time_str: str,
    vessels: list[VesselSnapshot],
    blackouts: Iterable[BlackoutSnapshot],
    config: TourConfig,
    now: datetime,
    staff_override: bool = False,
) -> Union[Departure, Rejection]:
    """
    Turn a civil date + time into a departure on a vessel.

    Checks, in order: grid alignment, lead time (waived for staff),
    blackouts over [start, start + tour + buffer), rotation.
    """
    parse_time(time_str)
    if time_str not in generate_candidates(config):
        return Rejection(RejectionCode.OUTSIDE_SERVICE_HOURS)

    start_at = to_instant(target_date, time_str, config.timezone)

    if not staff_override and start_at - now <= config.min_lead:
        return Rejection(RejectionCode.LEAD_TIME_VIOLATION)

    if is_window_blocked(start_at, start_at + config.conflict_span, blackouts):
        return Rejection(RejectionCode.SLOT_BLOCKED)

    index = assign_vessel(time_str, len(vessels), config)
    if index is None:
        return Rejection(RejectionCode.NO_VESSEL_AVAILABLE)

    return Departure(time=time_str, start_at=start_at, vessel=vessels[index])


def evaluate_join(
    departure: Departure,
    bookings: Iterable[BookingSnapshot],
    party: Party,
    config: TourConfig,
    staff_override: bool = False,
) -> Optional[RejectionCode]:
    """Apply the admission policy to the departure's conflict set. Staff skip seat counts."""
    conflicts = conflicting_bookings(
        departure.vessel.id,
        departure.start_at,
        departure.start_at + config.conflict_span,
        bookings,
        config.conflict_span,
    )
    return resolve_admission(
        departure.vessel,
        departure.start_at,
        conflicts,
        party,
        enforce_capacity=not staff_override,
    )


def list_open_slots(
    target_date: Union[str, date],
    party: Party,
    vessels: list[VesselSnapshot],
    bookings: list[BookingSnapshot],
    blackouts: list[BlackoutSnapshot],
    config: TourConfig | None = None,
    now: datetime | None = None,
) -> OpenSlots:
    """
    List departure times `party` could book on `target_date`.

    Returns:
        OpenSlots with ascending "HH:MM" times. blocked_reason is set for
        a fully blocked day, or as advice when blackouts left nothing open.
    """
    config = config or get_tour_config()
    now = now or datetime.now(pytz.utc)
    day = parse_day(target_date)
    result = OpenSlots(date=day.isoformat())

    blocked, reason = is_day_blocked(day, blackouts, config.timezone)
    if blocked:
        result.blocked_reason = reason
        return result

    if not vessels or party.size <= 0:
        return result

    for time_str in generate_candidates(config):
        departure = resolve_departure(day, time_str, vessels, blackouts, config, now)
        if isinstance(departure, Rejection):
            continue
        if evaluate_join(departure, bookings, party, config) is None:
            result.available_slots.append(time_str)

    if not result.available_slots:
        result.blocked_reason = advisory_reason(blackouts)

    return result


def calculate_day_availability(
    db: Session,
    target_date: date,
    party: Party,
    config: TourConfig | None = None,
    now: datetime | None = None,
) -> OpenSlots:
    """Load the day's snapshots and list open departures."""
    config = config or get_tour_config()

    vessels = load_active_vessels(db)
    bookings = load_day_bookings(db, target_date, config.timezone)
    blackouts = load_day_blackouts(db, target_date, config.timezone)

    return list_open_slots(target_date, party, vessels, bookings, blackouts, config, now)
