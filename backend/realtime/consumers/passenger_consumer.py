"""Passenger WebSocket consumer: live map of eligible drivers and ride notifications."""

import logging
from typing import Dict, Any, Set

from channels.db import database_sync_to_async

from .base import BaseConsumer
from realtime.broadcast import LIVE_DRIVERS_GROUP, candidate_from_payload
from services.exceptions import InvalidCandidate, InvalidConstraint
from services.matching import is_eligible, validate_candidate, validate_constraints

logger = logging.getLogger(__name__)


class PassengerConsumer(BaseConsumer):
    """
    WebSocket consumer for passengers.

    Handles:
        - Initial snapshot of eligible live drivers
        - Re-checking every driver broadcast against this passenger's constraints
        - Receiving ride status notifications

    Every driver change reaches every passenger consumer; drivers this
    passenger is not eligible for are dropped here and never forwarded.
    """

    expected_role = "passenger"

    async def on_connect(self):
        try:
            self.constraints = await self._load_constraints()
        except InvalidConstraint as e:
            await self.send_error(str(e))
            await self.close()
            return

        # driver_ids currently shown on this passenger's map
        self.visible_drivers: Set[int] = set()

        await self._join_group(LIVE_DRIVERS_GROUP)

        await self.send_json({
            "type": "connection_established",
            "user_id": self.user_id,
            "role": self.role,
            "message": "Passenger connected successfully",
        })
        await self._send_snapshot()

    async def handle_message(self, msg_type: str, data: Dict[str, Any]):
        """Handle passenger-specific messages."""
        if msg_type == "refresh":
            self.constraints = await self._load_constraints()
            await self._send_snapshot(data.get("latitude"), data.get("longitude"))
        else:
            await self.send_error(f"Unknown message type: {msg_type}")

    # ---------------------- Helpers ----------------------

    @database_sync_to_async
    def _load_constraints(self):
        from passengers.services.info_services import get_passenger_constraints
        self.user.refresh_from_db()
        return validate_constraints(get_passenger_constraints(self.user))

    @database_sync_to_async
    def _eligible_drivers(self, lat, lon):
        from passengers.services.info_services import find_eligible_drivers
        return find_eligible_drivers(self.user, lat, lon)

    async def _send_snapshot(self, lat=None, lon=None):
        if lat is None or lon is None:
            lat = lon = None
        drivers = await self._eligible_drivers(lat, lon)
        self.visible_drivers = {driver["id"] for driver in drivers}
        await self.send_json({
            "type": "eligible_drivers",
            "count": len(drivers),
            "drivers": drivers,
        })

    # ---------------------- Event Handlers (from group_send) ----------------------

    async def driver_update(self, event):
        """A driver went live, went offline or moved."""
        payload = event.get("driver") or {}
        driver_id = payload.get("driver_id")

        try:
            candidate = validate_candidate(candidate_from_payload(payload))
            eligible = is_eligible(self.constraints, candidate)
        except (InvalidCandidate, ValueError) as e:
            logger.warning("Ignoring malformed driver update %s: %s", driver_id, e)
            eligible = False

        if eligible:
            self.visible_drivers.add(driver_id)
            await self.send_json({
                "type": "driver_available",
                "driver": {
                    "driver_id": driver_id,
                    "first_name": payload.get("first_name"),
                    "latitude": payload.get("latitude"),
                    "longitude": payload.get("longitude"),
                    "cylinders": payload.get("cylinders"),
                    "car": payload.get("car"),
                    "plate_number": payload.get("plate_number"),
                },
            })
        elif driver_id in self.visible_drivers:
            self.visible_drivers.discard(driver_id)
            await self.send_json({
                "type": "driver_unavailable",
                "driver_id": driver_id,
            })
