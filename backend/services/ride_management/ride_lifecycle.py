"""
Core ride lifecycle operations.

A ride request goes to exactly one driver the passenger picked from the
eligible list. The fare estimate is computed server-side when the request is
created and stored with it, so later fuel price changes do not alter it.

    requested -> accepted | declined | cancelled
    accepted  -> completed | cancelled
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from accounts.models import User
from rides.models import RideRequest
from realtime.notifications import notify_user_event
from .exceptions import (
    RideNotFoundError,
    RideNotAvailableError,
    ActiveRideExistsError,
)

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = ("requested", "accepted")


@dataclass
class RideResult:
    """Result object for ride operations."""
    success: bool
    ride: Optional[RideRequest] = None
    message: str = ""
    extra: Optional[Dict[str, Any]] = None


# ===================== Passenger Operations =====================

def check_active_ride(user) -> Optional[RideRequest]:
    """Check if user has an active ride."""
    return RideRequest.objects.filter(
        passenger=user,
        status__in=ACTIVE_STATUSES,
    ).first()


@transaction.atomic
def create_ride_request(
    passenger,
    driver_id: int,
    pickup_latitude,
    pickup_longitude,
    payment_method: str = "live",
) -> RideResult:
    """
    Request a ride from one eligible driver.

    Args:
        passenger: User model instance (passenger)
        driver_id: DriverProfile id picked from the eligible list
        pickup_latitude: Pickup location latitude
        pickup_longitude: Pickup location longitude
        payment_method: 'live' (cash on the ride) or 'wish' (Wish Money transfer)

    Returns:
        RideResult with the created ride

    Raises:
        ActiveRideExistsError: If passenger already has an active ride
        DriverNotAvailableError / DriverNotEligibleError: driver can't take this passenger
        FuelPriceNotSetError: no fuel price to estimate with
    """
    from passengers.services.info_services import quote_driver_for_passenger

    if check_active_ride(passenger):
        raise ActiveRideExistsError("You already have an active ride request")

    profile, estimate, fuel_price = quote_driver_for_passenger(passenger, driver_id)

    ride = RideRequest.objects.create(
        passenger=passenger,
        driver=profile.user,
        university=passenger.university,
        pickup_latitude=pickup_latitude,
        pickup_longitude=pickup_longitude,
        distance_km=round(estimate.distance_km, 2),
        fuel_price=fuel_price,
        estimated_cost=estimate.total_cost,
        passenger_share=estimate.passenger_share,
        driver_share=estimate.driver_share,
        payment_method=payment_method,
        status="requested",
    )

    logger.info(
        "Ride %s requested by passenger %s to driver %s (%s USD)",
        ride.id, passenger.id, profile.user_id, estimate.passenger_share,
    )

    _notify_on_commit(profile.user_id, "ride_requested", ride, "New ride request")

    return RideResult(
        success=True,
        ride=ride,
        message="Ride request sent to the driver.",
    )


def get_current_passenger_ride(passenger) -> Optional[RideRequest]:
    """Get passenger's current active ride."""
    return (
        RideRequest.objects.filter(passenger=passenger, status__in=ACTIVE_STATUSES)
        .select_related("driver__driver_profile", "university")
        .first()
    )


@transaction.atomic
def cancel_ride_by_passenger(passenger, ride_id: int) -> RideResult:
    """
    Cancel a requested or accepted ride.

    Raises:
        RideNotFoundError: ride does not exist or is not this passenger's
        RideNotAvailableError: ride is already closed
    """
    ride = _get_ride_for_update(id=ride_id, passenger=passenger)

    if ride.status not in ACTIVE_STATUSES:
        raise RideNotAvailableError(f"Cannot cancel - ride is already {ride.status}")

    was_accepted = ride.status == "accepted"

    ride.status = "cancelled"
    ride.cancelled_at = timezone.now()
    ride.save(update_fields=["status", "cancelled_at"])

    _notify_on_commit(ride.driver_id, "ride_cancelled", ride, "Passenger cancelled this ride.")

    return RideResult(
        success=True,
        ride=ride,
        message="Ride cancelled successfully",
        extra={"was_accepted": was_accepted},
    )


# ===================== Driver Operations =====================

@transaction.atomic
def accept_ride(driver, ride_id: int) -> RideResult:
    """Accept a ride request addressed to this driver."""
    ride = _respond(driver, ride_id, "accepted")

    _notify_on_commit(
        ride.passenger_id,
        "ride_accepted",
        ride,
        "Your ride has been accepted! The driver is on the way.",
    )

    return RideResult(
        success=True,
        ride=ride,
        message="Ride accepted. Navigate to the pickup location.",
    )


@transaction.atomic
def decline_ride(driver, ride_id: int) -> RideResult:
    """Decline a ride request addressed to this driver."""
    ride = _respond(driver, ride_id, "declined")

    _notify_on_commit(
        ride.passenger_id,
        "ride_declined",
        ride,
        "The driver declined your request. Please choose another driver.",
    )

    return RideResult(success=True, ride=ride, message="Ride declined.")


@transaction.atomic
def complete_ride(driver, ride_id: int, payment_received: bool = False) -> RideResult:
    """
    Complete a ride - called by driver when the passenger reaches the university.

    Args:
        driver: User model instance (driver)
        ride_id: ID of the ride to complete
        payment_received: whether the passenger's share was already paid
    """
    ride = _get_ride_for_update(id=ride_id, driver=driver)

    if ride.status != "accepted":
        raise RideNotAvailableError(f"Cannot complete - ride is {ride.status}")

    now = timezone.now()
    ride.status = "completed"
    ride.completed_at = now
    if payment_received:
        ride.payment_status = "paid"
        ride.paid_at = now
    ride.save(update_fields=["status", "completed_at", "payment_status", "paid_at"])

    User.objects.filter(id__in=[ride.passenger_id, ride.driver_id]).update(
        completed_rides=F("completed_rides") + 1
    )

    _notify_on_commit(
        ride.passenger_id,
        "ride_completed",
        ride,
        "Your ride has been completed. Thank you for riding with us!",
    )

    return RideResult(
        success=True,
        ride=ride,
        message="Ride completed successfully",
        extra={"payment_status": ride.payment_status},
    )


def get_current_driver_rides(driver):
    """Requests waiting on this driver plus the rides they accepted."""
    return (
        RideRequest.objects.filter(driver=driver, status__in=ACTIVE_STATUSES)
        .select_related("passenger", "passenger__university")
        .order_by("requested_at")
    )


# ===================== Staff Operations =====================

@transaction.atomic
def mark_payment_received(ride_id: int, actor=None) -> RideResult:
    """Settle a completed ride whose payment was still pending."""
    ride = _get_ride_for_update(id=ride_id)

    if ride.status != "completed" or ride.payment_status == "paid":
        raise RideNotAvailableError("Only completed rides with pending payment can be marked paid")

    ride.payment_status = "paid"
    ride.paid_at = timezone.now()
    ride.save(update_fields=["payment_status", "paid_at"])

    logger.info("Ride %s marked paid by %s", ride.id, getattr(actor, "username", "system"))

    _notify_on_commit(ride.driver_id, "payment_confirmed", ride, "Payment received for your ride.")

    return RideResult(success=True, ride=ride, message="Payment recorded")


# ===================== Helper Functions =====================

def _get_ride_for_update(**lookup) -> RideRequest:
    try:
        return RideRequest.objects.select_for_update().get(**lookup)
    except RideRequest.DoesNotExist:
        raise RideNotFoundError("Ride not found")


def _respond(driver, ride_id: int, new_status: str) -> RideRequest:
    ride = _get_ride_for_update(id=ride_id, driver=driver)

    if ride.status != "requested":
        raise RideNotAvailableError("This ride was already handled or cancelled")

    ride.status = new_status
    ride.responded_at = timezone.now()
    ride.save(update_fields=["status", "responded_at"])

    logger.info("Driver %s %s ride %s", driver.id, new_status, ride.id)
    return ride


def _notify_on_commit(user_id, event_type: str, ride: RideRequest, message: str = "") -> None:
    """Send the ride event only once the surrounding transaction has committed."""
    transaction.on_commit(lambda: notify_user_event(user_id, event_type, ride, message))
