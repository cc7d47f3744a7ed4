# backend/boattours/services/slots/capacity.py
"""
Capacity & language admission policy for one departure.

Joining is same-instant only: a party may share a vessel with the groups
already booked at exactly the same start, never with a neighbouring
departure. Seats are pooled: capacity is checked against the sum of all
parties on board.
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional

from .clock import overlaps
from .domain import BookingSnapshot, Party, RejectionCode, VesselSnapshot


def resolve_admission(
    vessel: VesselSnapshot,
    start_at: datetime,
    existing: Iterable[BookingSnapshot],
    party: Party,
    enforce_capacity: bool = True,
) -> Optional[RejectionCode]:
    """
    Decide whether `party` can board `vessel` at `start_at`.

    Args:
        vessel: Vessel assigned by rotation
        start_at: Departure instant
        existing: Active bookings on this vessel whose conflict window
                  overlaps the departure's (exact-start ones are joinable)
        party: Incoming group
        enforce_capacity: False for staff counter bookings; seat counts
                          are not checked, privacy and language still are

    Returns:
        None if admitted, otherwise the rejection code.
    """
    existing = list(existing)

    # Fresh departure: the boat is empty
    if not existing:
        if enforce_capacity and party.size > vessel.capacity:
            return RejectionCode.CAPACITY_EXCEEDED
        return None

    # Overlapping departure at another instant keeps the boat busy
    if any(b.start_at != start_at for b in existing):
        return RejectionCode.CAPACITY_EXCEEDED

    if party.is_private:
        return RejectionCode.PRIVACY_CONFLICT

    if any(b.is_private for b in existing):
        return RejectionCode.PRIVACY_CONFLICT

    if any(b.language != party.language for b in existing):
        return RejectionCode.LANGUAGE_MISMATCH

    on_board = sum(b.party_size for b in existing)
    if enforce_capacity and on_board + party.size > vessel.capacity:
        return RejectionCode.CAPACITY_EXCEEDED

    return None


def can_admit(
    vessel: VesselSnapshot,
    start_at: datetime,
    existing: Iterable[BookingSnapshot],
    party: Party,
) -> bool:
    return resolve_admission(vessel, start_at, existing, party) is None


def conflicting_bookings(
    vessel_id: int,
    start_at: datetime,
    end_at: datetime,
    bookings: Iterable[BookingSnapshot],
    conflict_span: timedelta,
) -> list[BookingSnapshot]:
    """
    Bookings on `vessel_id` whose own [start, start + tour + buffer)
    overlaps [start_at, end_at).
    """
    return [
        b for b in bookings
        if b.vessel_id == vessel_id
        and overlaps(start_at, end_at, b.start_at, b.start_at + conflict_span)
    ]
