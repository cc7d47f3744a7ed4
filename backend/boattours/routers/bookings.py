# backend/boattours/routers/bookings.py
# PATCH = 405, DELETE = 405 (bookings are cancelled, never deleted)

from datetime import date, datetime
from typing import Optional

import pytz
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import Bookings as DBBookings
from ..schemas.bookings import BookingCreate, BookingRead
from ..services.events import booking_payload, emit_event
from ..services.slots import (
    AdmissionResult,
    Party,
    admit_booking,
    get_tour_config,
)
from ..services.pricing import quote_price
from ..services.slots.clock import InvalidWallClockError, civil_day_bounds, to_utc_naive

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("/", response_model=list[BookingRead])
def list_bookings(
    target_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
):
    query = db.query(DBBookings)
    if target_date is not None:
        day_start, day_end = civil_day_bounds(target_date, get_tour_config().timezone)
        query = query.filter(
            DBBookings.start_at >= to_utc_naive(day_start),
            DBBookings.start_at <= to_utc_naive(day_end),
        )
    return query.order_by(DBBookings.start_at, DBBookings.id).all()


@router.get("/{id}", response_model=BookingRead)
def get_booking(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBBookings, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
):
    return _admit(data, db, staff_override=False)


@router.post("/staff", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def create_staff_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
):
    """Counter booking: lead time and seat limits are waived."""
    return _admit(data, db, staff_override=True)


@router.post("/{id}/cancel", response_model=BookingRead)
def cancel_booking(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBBookings, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    if obj.status == "cancelled":
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Already cancelled")

    obj.status = "cancelled"
    obj.cancelled_at = datetime.now(pytz.utc).replace(tzinfo=None)
    db.commit()
    db.refresh(obj)

    emit_event("booking_cancelled", booking_payload(obj))
    return obj


@router.patch("/{id}")
def patch_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )


@router.delete("/{id}")
def delete_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )


def _admit(data: BookingCreate, db: Session, staff_override: bool):
    config = get_tour_config()
    party = Party(size=data.party_size, language=data.language, is_private=data.private)

    try:
        result: AdmissionResult = admit_booking(
            db,
            data.date,
            data.time,
            party,
            staff_override=staff_override,
            config=config,
            adults=data.adults,
            children=data.children,
            babies=data.babies,
            customer_name=data.customer_name,
            customer_email=data.customer_email,
            message=data.message,
            total_price=quote_price(data.adults, data.children, data.babies, config),
        )
    except InvalidWallClockError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    if not result.ok:
        rejection = result.rejection
        raise HTTPException(
            status_code=(
                status.HTTP_503_SERVICE_UNAVAILABLE
                if rejection.is_configuration_error
                else status.HTTP_409_CONFLICT
            ),
            detail={"code": rejection.code.value, "message": rejection.message},
        )

    emit_event("booking_created", booking_payload(result.booking))
    return result.booking
