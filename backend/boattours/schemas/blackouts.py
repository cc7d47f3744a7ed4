# backend/boattours/schemas/blackouts.py

from datetime import date, datetime
from typing import Literal, Optional
from pydantic import BaseModel, model_validator


class BlackoutCreate(BaseModel):
    """
    Either a civil `day` (day scope, whole day) or explicit
    `start_at`/`end_at` instants. Naive instants are read as UTC.
    """
    scope: Literal["day", "time"]

    day: Optional[date] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None

    reason: Optional[str] = None

    @model_validator(mode="after")
    def check_bounds(self):
        if self.day is not None:
            if self.scope != "day":
                raise ValueError("day is only accepted for day scope")
            return self
        if self.start_at is None or self.end_at is None:
            raise ValueError("start_at and end_at are required without day")
        if self.end_at <= self.start_at:
            raise ValueError("end_at must be after start_at")
        return self

    model_config = {"from_attributes": True}


class BlackoutRead(BaseModel):
    id: int

    scope: str
    start_at: datetime
    end_at: datetime
    reason: Optional[str] = None

    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
