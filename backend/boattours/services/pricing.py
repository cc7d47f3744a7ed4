# backend/boattours/services/pricing.py
"""
Ticket price of a party.

Not stored on the tour: computed from the per-category prices of the
tour configuration at booking time and saved on the booking.
"""

from .slots.config import TourConfig, get_tour_config


def quote_price(
    adults: int,
    children: int,
    babies: int,
    config: TourConfig | None = None,
) -> float:
    """
    Price for a party composition.

    Returns:
        adults * price_adult + children * price_child + babies * price_baby
    """
    config = config or get_tour_config()
    total = (
        adults * config.price_adult
        + children * config.price_child
        + babies * config.price_baby
    )
    return round(total, 2)
