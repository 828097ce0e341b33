"""
Ride event notifications for connected clients.

Every user joins a personal group ``user_<id>`` when their socket connects;
ride lifecycle changes are pushed there for the counterparty of the action.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)


def user_group(user_id: int) -> str:
    return f"user_{user_id}"


def notify_user_event(
    user_id: int | None,
    event_type: str,
    ride,
    message: str = "",
    extra: Dict[str, Any] = None,
) -> bool:
    """
    Send a ride event to one user's personal group.

    Args:
        user_id: Target user's ID
        event_type: ride_requested, ride_accepted, ride_declined, ride_cancelled,
            ride_completed or payment_confirmed
        ride: RideRequest model instance
        message: Optional message to include
        extra: Additional payload data

    Returns:
        True if sent successfully, False otherwise
    """
    if not user_id:
        return False

    channel_layer = get_channel_layer()
    if channel_layer is None:
        return False

    from rides.serializers import RideRequestSerializer

    payload = {
        "type": "ride.event",
        "event": event_type,
        "ride_id": ride.id,
        "status": ride.status,
        "ride_data": RideRequestSerializer(ride).data,
        **(extra or {}),
    }

    if message:
        payload["message"] = message

    try:
        async_to_sync(channel_layer.group_send)(user_group(user_id), payload)
    except Exception:
        logger.exception("Failed to send %s for ride %s to user %s", event_type, ride.id, user_id)
        return False

    logger.debug("WS -> user_%s: %s (ride %s)", user_id, event_type, ride.id)
    return True
