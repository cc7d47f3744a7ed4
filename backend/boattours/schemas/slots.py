# backend/boattours/schemas/slots.py
"""
Pydantic schemas for slots API.
"""

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field


class SlotsDayResponse(BaseModel):
    """Open departures for a day."""
    date: date
    available_slots: list[str] = Field(description='Ascending "HH:MM" departure times')
    blocked_reason: Optional[str] = None

    # Metadata
    tour_duration_minutes: int
    min_lead_minutes: int

    model_config = {"from_attributes": True}


class GridDeparture(BaseModel):
    time: str  # "HH:MM"
    vessel_id: Optional[int] = None


class SlotsGridResponse(BaseModel):
    """Departure grid with rotation (admin/debug)."""
    date: date
    departures: list[GridDeparture]
    cycle_minutes: int

    model_config = {"from_attributes": True}
