"""Driver WebSocket consumer for live status, location updates and ride requests."""

import logging
from typing import Dict, Any

from channels.db import database_sync_to_async

from .base import BaseConsumer
from common.utils.geo import is_valid_coordinate
from drivers.models import DriverProfile
from drivers.services import DriverNotReadyError, set_driver_live, update_driver_location

logger = logging.getLogger(__name__)


class DriverConsumer(BaseConsumer):
    """
    WebSocket consumer for drivers.

    Handles:
        - Driver location updates (re-broadcast to passengers while live)
        - Going live / offline
        - Ride request notifications (via the personal user group)
    """

    expected_role = "driver"

    async def on_connect(self):
        profile = await self._get_profile()
        if profile is None:
            await self.send_error("Driver profile not found")
            await self.close()
            return

        await self.send_json({
            "type": "connection_established",
            "user_id": self.user_id,
            "role": self.role,
            "driver_id": profile.id,
            "is_live": profile.is_live,
            "message": "Driver connected successfully",
        })

    async def handle_message(self, msg_type: str, data: Dict[str, Any]):
        """Handle driver-specific messages."""
        if msg_type == "update_location":
            await self._handle_location_update(data)
        elif msg_type == "set_live":
            await self._handle_set_live(data)
        else:
            await self.send_error(f"Unknown message type: {msg_type}")

    # ---------------------- Message Handlers ----------------------

    async def _handle_location_update(self, data: Dict[str, Any]):
        lat = data.get("latitude")
        lon = data.get("longitude")

        if not is_valid_coordinate(lat, lon):
            await self.send_error("update_location requires a valid latitude and longitude")
            return

        profile = await self._update_location(lat, lon)
        logger.debug("Driver %s location update: lat=%s, lon=%s", self.user_id, lat, lon)
        await self.send_success("location_updated", is_live=profile.is_live)

    async def _handle_set_live(self, data: Dict[str, Any]):
        is_live = data.get("is_live")
        if not isinstance(is_live, bool):
            await self.send_error("set_live requires a boolean is_live")
            return

        try:
            profile = await self._set_live(is_live)
        except DriverNotReadyError as e:
            await self.send_error(str(e))
            return

        await self.send_success("live_status_updated", is_live=profile.is_live)

    # ---------------------- DB Helpers ----------------------

    @database_sync_to_async
    def _get_profile(self):
        return DriverProfile.objects.select_related("user").filter(user_id=self.user_id).first()

    @database_sync_to_async
    def _update_location(self, lat, lon):
        profile = DriverProfile.objects.select_related("user").get(user_id=self.user_id)
        return update_driver_location(profile, round(float(lat), 6), round(float(lon), 6))

    @database_sync_to_async
    def _set_live(self, is_live: bool):
        profile = DriverProfile.objects.select_related("user").get(user_id=self.user_id)
        profile.user.refresh_from_db()
        return set_driver_live(profile, is_live)
