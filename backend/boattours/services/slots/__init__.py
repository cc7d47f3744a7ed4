# backend/boattours/services/slots/__init__.py
"""
Departure slot allocation.

Read path:  list_open_slots / calculate_day_availability
Write path: admit_booking
"""

from .config import TourConfig, ConfigurationError, get_tour_config
from .calculator import generate_candidates
from .rotation import assign_vessel
from .capacity import can_admit, resolve_admission
from .availability import list_open_slots, calculate_day_availability
from .admission import admit_booking
from .domain import (
    AdmissionResult,
    OpenSlots,
    Party,
    Rejection,
    RejectionCode,
)

__all__ = [
    "TourConfig",
    "ConfigurationError",
    "get_tour_config",
    "generate_candidates",
    "assign_vessel",
    "can_admit",
    "resolve_admission",
    "list_open_slots",
    "calculate_day_availability",
    "admit_booking",
    "AdmissionResult",
    "OpenSlots",
    "Party",
    "Rejection",
    "RejectionCode",
]
