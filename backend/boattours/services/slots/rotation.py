# backend/boattours/services/slots/rotation.py
"""
Stateless vessel rotation.

The vessel serving a departure is derived from the time-of-day alone:

    cycle_position = (minutes - open) mod (tour + buffer)
    vessel_index   = offsets.index(cycle_position) mod vessel_count

No "next boat" cursor is stored anywhere; read and write paths compute
the same answer independently.
"""

from typing import Optional

from .config import TourConfig, get_tour_config, time_str_to_minutes


def assign_vessel(
    time_str: str,
    vessel_count: int,
    config: TourConfig | None = None,
) -> Optional[int]:
    """
    Map a departure time to a vessel index.

    A fleet smaller than the offset list wraps around, so with two
    vessels and offsets (0, 10, 20) the third offset goes back to the
    first vessel.

    Returns:
        Index into the rotation-ordered vessel list, or None when the
        fleet is empty or the time is not on a rotation offset.
    """
    config = config or get_tour_config()
    if vessel_count <= 0:
        return None

    elapsed = time_str_to_minutes(time_str) - config.open_minutes
    if elapsed < 0:
        return None

    position = elapsed % config.cycle_minutes
    if position not in config.rotation_offsets:
        return None

    return config.rotation_offsets.index(position) % vessel_count
