# backend/boattours/services/slots/snapshots.py
"""
Storage snapshots for the engine.

The engine never touches ORM rows; these helpers read the relational
store and hand back frozen snapshots with aware UTC instants.
"""

from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from .clock import civil_day_bounds, from_utc_naive, to_utc_naive
from .domain import BlackoutScope, BlackoutSnapshot, BookingSnapshot, VesselSnapshot


ACTIVE_VESSEL = "active"
ACTIVE_BOOKING = "active"


def vessel_snapshot(vessel) -> VesselSnapshot:
    return VesselSnapshot(id=vessel.id, capacity=vessel.capacity)


def booking_snapshot(booking) -> BookingSnapshot:
    return BookingSnapshot(
        vessel_id=booking.vessel_id,
        start_at=from_utc_naive(booking.start_at),
        end_at=from_utc_naive(booking.end_at),
        language=booking.language,
        party_size=booking.party_size,
        is_private=bool(booking.is_private),
    )


def blackout_snapshot(blackout) -> BlackoutSnapshot:
    return BlackoutSnapshot(
        scope=BlackoutScope(blackout.scope),
        start_at=from_utc_naive(blackout.start_at),
        end_at=from_utc_naive(blackout.end_at),
        reason=blackout.reason,
    )


def load_active_vessels(db: Session) -> list[VesselSnapshot]:
    """Active vessels in rotation order."""
    from ...models.generated import Vessels

    rows = (
        db.query(Vessels)
        .filter(Vessels.status == ACTIVE_VESSEL)
        .order_by(Vessels.rotation_order, Vessels.id)
        .all()
    )
    return [vessel_snapshot(v) for v in rows]


def load_day_bookings(
    db: Session,
    target_date: date,
    timezone_str: str,
) -> list[BookingSnapshot]:
    """Active bookings starting on the civil day."""
    from ...models.generated import Bookings

    day_start, day_end = civil_day_bounds(target_date, timezone_str)
    rows = (
        db.query(Bookings)
        .filter(
            Bookings.status == ACTIVE_BOOKING,
            Bookings.start_at >= to_utc_naive(day_start),
            Bookings.start_at <= to_utc_naive(day_end),
        )
        .all()
    )
    return [booking_snapshot(b) for b in rows]


def load_vessel_bookings(
    db: Session,
    vessel_id: int,
    window_start: datetime,
    window_end: datetime,
    conflict_span: timedelta,
) -> list[BookingSnapshot]:
    """
    Active bookings on a vessel whose conflict window may reach
    [window_start, window_end). Exact overlap is decided by the caller.
    """
    from ...models.generated import Bookings

    rows = (
        db.query(Bookings)
        .filter(
            Bookings.vessel_id == vessel_id,
            Bookings.status == ACTIVE_BOOKING,
            Bookings.start_at < to_utc_naive(window_end),
            Bookings.start_at > to_utc_naive(window_start - conflict_span),
        )
        .all()
    )
    return [booking_snapshot(b) for b in rows]


def load_day_blackouts(
    db: Session,
    target_date: date,
    timezone_str: str,
) -> list[BlackoutSnapshot]:
    """Blackouts overlapping the civil day, oldest first."""
    from ...models.generated import BlackoutIntervals

    day_start, day_end = civil_day_bounds(target_date, timezone_str)
    rows = (
        db.query(BlackoutIntervals)
        .filter(
            BlackoutIntervals.start_at <= to_utc_naive(day_end),
            BlackoutIntervals.end_at >= to_utc_naive(day_start),
        )
        .order_by(BlackoutIntervals.id)
        .all()
    )
    return [blackout_snapshot(b) for b in rows]
