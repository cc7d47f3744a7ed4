# backend/boattours/schemas/vessels.py

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

VesselStatus = Literal["active", "inactive", "maintenance"]


class VesselCreate(BaseModel):
    name: str
    capacity: int = Field(gt=0)
    status: VesselStatus = "active"
    rotation_order: int = 0

    model_config = {"from_attributes": True}


class VesselUpdate(BaseModel):
    name: Optional[str] = None
    capacity: Optional[int] = Field(default=None, gt=0)
    status: Optional[VesselStatus] = None
    rotation_order: Optional[int] = None

    model_config = {"from_attributes": True}


class VesselRead(BaseModel):
    id: int

    name: str
    capacity: int
    status: str
    rotation_order: int

    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
