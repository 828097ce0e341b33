"""
Broadcast driver changes to connected passengers.

Every go-live, go-offline and location change of a driver is pushed to a
single channel group. Each passenger consumer re-runs the eligibility rules
for itself, so a passenger only ever hears about drivers they may see.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from services.domain import DriverCandidate, GeoPoint, VehicleClass

logger = logging.getLogger(__name__)

LIVE_DRIVERS_GROUP = "live_drivers"


def driver_payload(profile) -> Dict[str, Any]:
    """Public, JSON-safe view of a driver used in WebSocket events."""
    user = profile.user
    return {
        "driver_id": profile.id,
        "user_id": user.id,
        "first_name": user.first_name,
        "gender": user.gender,
        "university_id": user.university_id,
        "latitude": float(profile.current_latitude) if profile.current_latitude is not None else None,
        "longitude": float(profile.current_longitude) if profile.current_longitude is not None else None,
        "cylinders": profile.cylinders,
        "car": f"{profile.car_brand} {profile.car_model} ({profile.car_color})",
        "plate_number": profile.plate_number,
        "is_live": profile.is_live,
    }


def candidate_from_payload(payload: Dict[str, Any]) -> DriverCandidate:
    """Rebuild the DriverCandidate a passenger consumer needs from a broadcast payload."""
    return DriverCandidate(
        driver_id=payload.get("driver_id"),
        gender=payload.get("gender"),
        university_id=payload.get("university_id"),
        location=GeoPoint(payload.get("latitude"), payload.get("longitude")),
        vehicle_class=VehicleClass.from_cylinders(payload.get("cylinders") or 4),
        is_live=bool(payload.get("is_live")),
    )


def broadcast_driver_update(profile) -> bool:
    """
    Push a driver's current state to the live drivers group.

    Returns:
        True if the message was handed to the channel layer
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return False

    try:
        async_to_sync(channel_layer.group_send)(
            LIVE_DRIVERS_GROUP,
            {
                "type": "driver.update",
                "driver": driver_payload(profile),
            },
        )
    except Exception:
        logger.exception("Failed to broadcast update for driver %s", profile.id)
        return False

    logger.debug("Broadcast driver %s (live=%s)", profile.id, profile.is_live)
    return True
