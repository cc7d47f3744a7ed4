# backend/boattours/routers/slots.py
"""
Slots API endpoints.

GET /slots/day  - Open departures for a party on a day
GET /slots/grid - Departure grid with rotation (admin/debug)
"""

from datetime import date, timedelta
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.slots import GridDeparture, SlotsDayResponse, SlotsGridResponse
from ..services.slots import (
    Party,
    assign_vessel,
    calculate_day_availability,
    generate_candidates,
    get_tour_config,
)
from ..services.slots.clock import civil_today
from ..services.slots.snapshots import load_active_vessels


router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("/day", response_model=SlotsDayResponse)
def get_slots_day(
    target_date: date = Query(..., alias="date"),
    language: str = Query(..., min_length=2, max_length=5),
    party_size: int = Query(..., ge=0, le=300),
    private: bool = False,
    db: Session = Depends(get_db),
):
    """Get departure times a party can still book on a day."""
    config = get_tour_config()

    today = civil_today(config.timezone)
    max_date = today + timedelta(days=config.horizon_days)

    if target_date < today:
        raise HTTPException(status_code=400, detail="Date cannot be in the past")

    if target_date > max_date:
        raise HTTPException(status_code=400, detail=f"Date cannot be more than {config.horizon_days} days ahead")

    party = Party(size=party_size, language=language, is_private=private)
    result = calculate_day_availability(db, target_date, party, config)

    return SlotsDayResponse(
        date=target_date,
        available_slots=result.available_slots,
        blocked_reason=result.blocked_reason,
        tour_duration_minutes=config.tour_duration_minutes,
        min_lead_minutes=config.min_lead_minutes,
    )


@router.get("/grid", response_model=SlotsGridResponse)
def get_slots_grid(
    target_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
):
    """Show which vessel rotation assigns to every departure of a day."""
    config = get_tour_config()
    vessels = load_active_vessels(db)

    departures = []
    for time_str in generate_candidates(config):
        index = assign_vessel(time_str, len(vessels), config)
        departures.append(GridDeparture(
            time=time_str,
            vessel_id=vessels[index].id if index is not None else None,
        ))

    return SlotsGridResponse(
        date=target_date,
        departures=departures,
        cycle_minutes=config.cycle_minutes,
    )
