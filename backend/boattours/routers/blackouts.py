# backend/boattours/routers/blackouts.py
# PATCH = 405, DELETE = ALLOWED (hard)

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import BlackoutIntervals as DBBlackouts
from ..schemas.blackouts import BlackoutCreate, BlackoutRead
from ..services.slots import get_tour_config
from ..services.slots.clock import civil_day_bounds, from_utc_naive, to_utc_naive

router = APIRouter(prefix="/blackouts", tags=["blackouts"])


@router.get("/", response_model=list[BlackoutRead])
def list_blackouts(
    target_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
):
    query = db.query(DBBlackouts)
    if target_date is not None:
        day_start, day_end = civil_day_bounds(target_date, get_tour_config().timezone)
        query = query.filter(
            DBBlackouts.start_at <= to_utc_naive(day_end),
            DBBlackouts.end_at >= to_utc_naive(day_start),
        )
    return query.order_by(DBBlackouts.id).all()


@router.get("/{id}", response_model=BlackoutRead)
def get_blackout(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBBlackouts, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=BlackoutRead, status_code=status.HTTP_201_CREATED)
def create_blackout(
    data: BlackoutCreate,
    db: Session = Depends(get_db),
):
    if data.day is not None:
        # whole civil day, in the business timezone
        start_at, end_at = civil_day_bounds(data.day, get_tour_config().timezone)
    else:
        start_at, end_at = from_utc_naive(data.start_at), from_utc_naive(data.end_at)

    obj = DBBlackouts(
        scope=data.scope,
        start_at=to_utc_naive(start_at),
        end_at=to_utc_naive(end_at),
        reason=data.reason,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.patch("/{id}")
def patch_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_blackout(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBBlackouts, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    db.delete(obj)
    db.commit()
