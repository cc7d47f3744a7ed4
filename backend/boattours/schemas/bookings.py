# backend/boattours/schemas/bookings.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from ..services.slots.clock import parse_day, parse_time

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^\d{2}:\d{2}$"


class BookingCreate(BaseModel):
    date: str = Field(pattern=DATE_PATTERN)
    time: str = Field(pattern=TIME_PATTERN)

    adults: int = Field(default=0, ge=0, le=100)
    children: int = Field(default=0, ge=0, le=100)
    babies: int = Field(default=0, ge=0, le=100)
    language: str = Field(min_length=2, max_length=5)
    private: bool = False

    customer_name: str = Field(min_length=1, max_length=120)
    customer_email: EmailStr
    message: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("date")
    @classmethod
    def check_date(cls, v: str) -> str:
        parse_day(v)
        return v

    @field_validator("time")
    @classmethod
    def check_time(cls, v: str) -> str:
        parse_time(v)
        return v

    @model_validator(mode="after")
    def check_people(self):
        if self.party_size <= 0:
            raise ValueError("At least one person is required")
        return self

    @property
    def party_size(self) -> int:
        return self.adults + self.children + self.babies

    model_config = {"from_attributes": True}


class BookingRead(BaseModel):
    id: int

    vessel_id: int
    start_at: datetime
    end_at: datetime

    language: str
    party_size: int
    adults: int
    children: int
    babies: int
    is_private: bool

    status: str
    staff_override: bool
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    message: Optional[str] = None
    total_price: Optional[float] = None

    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    model_config = {"from_attributes": True}