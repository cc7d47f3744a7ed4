"""
backend/boattours/services/events.py

Event emitter: pushes booking events to a Redis queue for the notifier
(confirmation emails, planning updates).

Queue:
- events:p2p: instant delivery, one message per booking change
"""

import json
import time
import logging

from ..redis_client import redis_client

logger = logging.getLogger(__name__)

EVENTS_QUEUE = "events:p2p"


def emit_event(event_type: str, payload: dict) -> None:
    """
    Emit a p2p event (instant delivery).

    Failures are logged, never raised: a booking is already committed
    when its event goes out.
    """
    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        redis_client.rpush(EVENTS_QUEUE, json.dumps(event))
        logger.info(f"Event emitted: {event_type} → {EVENTS_QUEUE}")
    except Exception as e:
        logger.error(f"Failed to emit event {event_type}: {e}")


def booking_payload(booking) -> dict:
    return {
        "booking_id": booking.id,
        "vessel_id": booking.vessel_id,
        "start_at": booking.start_at.isoformat(),
        "language": booking.language,
        "party_size": booking.party_size,
        "is_private": bool(booking.is_private),
        "customer_email": booking.customer_email,
    }
