# backend/boattours/services/slots/domain.py
"""
Snapshot and outcome types shared by the read and write paths.

All instants are timezone-aware (UTC once they leave the clock module).
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class BlackoutScope(str, Enum):
    DAY = "day"
    TIME = "time"


class RejectionCode(str, Enum):
    NO_VESSEL_AVAILABLE = "NO_VESSEL_AVAILABLE"
    SLOT_BLOCKED = "SLOT_BLOCKED"
    LANGUAGE_MISMATCH = "LANGUAGE_MISMATCH"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    PRIVACY_CONFLICT = "PRIVACY_CONFLICT"
    OUTSIDE_SERVICE_HOURS = "OUTSIDE_SERVICE_HOURS"
    LEAD_TIME_VIOLATION = "LEAD_TIME_VIOLATION"


REJECTION_MESSAGES = {
    RejectionCode.NO_VESSEL_AVAILABLE: "No active vessel is configured",
    RejectionCode.SLOT_BLOCKED: "This departure is unavailable",
    RejectionCode.LANGUAGE_MISMATCH: "This departure is already booked in another language",
    RejectionCode.CAPACITY_EXCEEDED: "Not enough seats left on this departure",
    RejectionCode.PRIVACY_CONFLICT: "This departure is reserved for a private party",
    RejectionCode.OUTSIDE_SERVICE_HOURS: "No departure is scheduled at this time",
    RejectionCode.LEAD_TIME_VIOLATION: "Too late to book this departure",
}


@dataclass(frozen=True)
class VesselSnapshot:
    id: int
    capacity: int


@dataclass(frozen=True)
class BookingSnapshot:
    vessel_id: int
    start_at: datetime
    end_at: datetime
    language: str
    party_size: int
    is_private: bool = False


@dataclass(frozen=True)
class BlackoutSnapshot:
    scope: BlackoutScope
    start_at: datetime
    end_at: datetime
    reason: Optional[str] = None


@dataclass(frozen=True)
class Party:
    """A group asking for seats on one departure."""
    size: int
    language: str
    is_private: bool = False


@dataclass(frozen=True)
class Rejection:
    code: RejectionCode
    detail: Optional[str] = None

    @property
    def message(self) -> str:
        return self.detail or REJECTION_MESSAGES[self.code]

    @property
    def is_configuration_error(self) -> bool:
        """Empty fleet is an operator problem, not a full boat."""
        return self.code == RejectionCode.NO_VESSEL_AVAILABLE


@dataclass(frozen=True)
class Departure:
    """A resolved candidate: civil time, instant and assigned vessel."""
    time: str
    start_at: datetime
    vessel: VesselSnapshot


@dataclass
class OpenSlots:
    """Read path result."""
    date: str
    available_slots: list[str] = field(default_factory=list)
    blocked_reason: Optional[str] = None


@dataclass
class AdmissionResult:
    """Write path result: either a persisted booking or a rejection."""
    booking: Any = None
    rejection: Optional[Rejection] = None
    departure: Optional[Departure] = None

    @property
    def ok(self) -> bool:
        return self.rejection is None
