# backend/boattours/services/slots/admission.py
"""
Booking admission (write path).

Re-derives everything server-side for one requested departure:
vessel (rotation, never a client-supplied id), blackouts, lead time,
then re-checks joins against a fresh read of the vessel's bookings and
inserts in the same transaction.

Atomicity:
- SQLite: every transaction starts with BEGIN IMMEDIATE (see database.py)
- Others: the assigned vessel row is locked with SELECT ... FOR UPDATE
- Partial unique index on active private departures as a last guard;
  its violation is reported as CAPACITY_EXCEEDED

Rejections are returned, not raised. Storage errors propagate.
"""

import logging
from datetime import date, datetime
from typing import Union

import pytz
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .availability import evaluate_join, resolve_departure
from .blackouts import is_day_blocked
from .clock import parse_day, parse_time, to_utc_naive
from .config import TourConfig, get_tour_config
from .domain import AdmissionResult, Departure, Party, Rejection, RejectionCode
from .snapshots import load_active_vessels, load_day_blackouts, load_vessel_bookings

logger = logging.getLogger(__name__)


def admit_booking(
    db: Session,
    target_date: Union[str, date],
    time_str: str,
    party: Party,
    staff_override: bool = False,
    config: TourConfig | None = None,
    now: datetime | None = None,
    **details,
) -> AdmissionResult:
    """
    Admit `party` on the departure at `target_date` `time_str`.

    Args:
        db: Session; committed on success, rolled back otherwise
        party: Size, language and privacy of the group
        staff_override: Counter bookings. Waives lead time and seat
                        counts; privacy, language, rotation and
                        blackouts still apply.
        details: Extra booking columns (adults, customer_name, ...)

    Returns:
        AdmissionResult with the persisted booking or a rejection.

    Raises:
        InvalidWallClockError: malformed date or time, before any DB work
    """
    config = config or get_tour_config()
    now = now or datetime.now(pytz.utc)
    day = parse_day(target_date)
    parse_time(time_str)

    try:
        vessels = load_active_vessels(db)
        if not vessels:
            return _reject(db, Rejection(RejectionCode.NO_VESSEL_AVAILABLE))

        blackouts = load_day_blackouts(db, day, config.timezone)
        blocked, reason = is_day_blocked(day, blackouts, config.timezone)
        if blocked:
            return _reject(db, Rejection(RejectionCode.SLOT_BLOCKED, reason))

        departure = resolve_departure(
            day, time_str, vessels, blackouts, config, now, staff_override
        )
        if isinstance(departure, Rejection):
            return _reject(db, departure)

        _lock_vessel(db, departure.vessel.id)
        existing = load_vessel_bookings(
            db,
            departure.vessel.id,
            departure.start_at,
            departure.start_at + config.conflict_span,
            config.conflict_span,
        )

        code = evaluate_join(departure, existing, party, config, staff_override)
        if code is not None:
            return _reject(db, Rejection(code), departure)

        booking = _create_booking(db, departure, party, config, staff_override, details)
        db.commit()

    except IntegrityError:
        db.rollback()
        logger.warning(f"Admission lost a race on {day} {time_str}")
        return AdmissionResult(rejection=Rejection(RejectionCode.CAPACITY_EXCEEDED))
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(booking)
    prefix = "[STAFF OVERRIDE] " if staff_override else ""
    logger.info(
        f"{prefix}Booking {booking.id} admitted: {party.size}p "
        f"{party.language}{' private' if party.is_private else ''} "
        f"on vessel {departure.vessel.id} at {day} {time_str}"
    )
    return AdmissionResult(booking=booking, departure=departure)


def _reject(
    db: Session,
    rejection: Rejection,
    departure: Departure | None = None,
) -> AdmissionResult:
    # end the transaction to release the write lock
    db.rollback()
    if rejection.is_configuration_error:
        logger.error(f"Admission impossible: {rejection.message}")
    else:
        logger.info(f"Admission rejected: {rejection.code.value}")
    return AdmissionResult(rejection=rejection, departure=departure)


def _lock_vessel(db: Session, vessel_id: int) -> None:
    """Serialize admissions on one vessel (no-op lock on SQLite)."""
    from ...models.generated import Vessels

    db.query(Vessels).filter(Vessels.id == vessel_id).with_for_update().one()


def _create_booking(
    db: Session,
    departure: Departure,
    party: Party,
    config: TourConfig,
    staff_override: bool,
    details: dict,
):
    from ...models.generated import Bookings

    booking = Bookings(
        vessel_id=departure.vessel.id,
        start_at=to_utc_naive(departure.start_at),
        end_at=to_utc_naive(departure.start_at + config.tour_duration),
        language=party.language,
        party_size=party.size,
        is_private=party.is_private,
        status="active",
        staff_override=staff_override,
        **details,
    )
    db.add(booking)
    db.flush()
    return booking
