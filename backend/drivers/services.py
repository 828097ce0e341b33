import logging
from typing import List

from django.utils import timezone

from drivers.models import DriverProfile
from realtime.broadcast import broadcast_driver_update
from services.domain import DriverCandidate, GeoPoint

logger = logging.getLogger(__name__)


class DriverNotReadyError(Exception):
    """Raised when a driver tries to go live without approval or a known location."""
    pass


# LIVE DRIVER DIRECTORY
def build_candidate(profile: DriverProfile) -> DriverCandidate:
    """
    Snapshot one driver profile as a DriverCandidate.
    Coordinates and unbandable cylinder counts are passed through unchecked;
    the eligibility filter rejects bad ones.
    """
    lat = profile.current_latitude
    lon = profile.current_longitude
    try:
        vehicle_class = profile.vehicle_class
    except (TypeError, ValueError):
        vehicle_class = profile.cylinders
    return DriverCandidate(
        driver_id=profile.id,
        gender=profile.user.gender,
        university_id=profile.user.university_id,
        location=GeoPoint(
            float(lat) if lat is not None else None,
            float(lon) if lon is not None else None,
        ),
        vehicle_class=vehicle_class,
        is_live=profile.is_live,
    )


def live_driver_profiles():
    """Approved drivers who are currently live and have a stored location."""
    return (
        DriverProfile.objects.select_related("user", "user__university")
        .filter(
            is_live=True,
            user__status="approved",
            user__is_active=True,
            current_latitude__isnull=False,
            current_longitude__isnull=False,
        )
    )


def live_driver_candidates() -> List[DriverCandidate]:
    """Current live-driver pool, as value objects for the matching service."""
    return [build_candidate(profile) for profile in live_driver_profiles()]


# GO LIVE / OFFLINE
def set_driver_live(profile: DriverProfile, is_live: bool) -> DriverProfile:
    """
    Toggle the driver's visibility on the passenger map.
    This broadcasts the change to connected passengers via WebSocket.
    """
    if is_live:
        if profile.user.status != "approved":
            raise DriverNotReadyError("Your account must be approved before going live")
        if not profile.has_location:
            raise DriverNotReadyError("Share your current location before going live")

    profile.is_live = is_live
    profile.save(update_fields=["is_live"])

    broadcast_driver_update(profile)
    logger.info("Driver %s is now %s", profile.user_id, "live" if is_live else "offline")

    return profile


def take_driver_offline(profile: DriverProfile) -> DriverProfile:
    """Force a driver off the map (used when an account is banned or rejected)."""
    if profile.is_live:
        return set_driver_live(profile, False)
    return profile


def update_driver_location(profile: DriverProfile, lat, lon) -> DriverProfile:
    """
    Update driver location — used by:
    - HTTP fallback
    - WebSocket driver tracking events
    """
    profile.current_latitude = lat
    profile.current_longitude = lon
    profile.last_location_update = timezone.now()
    profile.save(update_fields=["current_latitude", "current_longitude", "last_location_update"])

    # Only live drivers are on anyone's map
    if profile.is_live:
        broadcast_driver_update(profile)

    return profile
