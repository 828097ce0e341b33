"""
Ride management service - Core ride lifecycle operations.

This module handles:
    - Creating ride requests to a chosen driver
    - Accepting/declining rides
    - Completing rides and recording payment
    - Cancelling rides
    - Querying ride status
"""

from .ride_lifecycle import (
    ACTIVE_STATUSES,
    RideResult,
    create_ride_request,
    accept_ride,
    decline_ride,
    complete_ride,
    cancel_ride_by_passenger,
    mark_payment_received,
    get_current_passenger_ride,
    get_current_driver_rides,
)

from .exceptions import (
    RideNotFoundError,
    RideNotAvailableError,
    DriverNotAvailableError,
    DriverNotEligibleError,
    ActiveRideExistsError,
)

__all__ = [
    # Lifecycle operations
    "ACTIVE_STATUSES",
    "RideResult",
    "create_ride_request",
    "accept_ride",
    "decline_ride",
    "complete_ride",
    "cancel_ride_by_passenger",
    "mark_payment_received",
    "get_current_passenger_ride",
    "get_current_driver_rides",
    # Exceptions
    "RideNotFoundError",
    "RideNotAvailableError",
    "DriverNotAvailableError",
    "DriverNotEligibleError",
    "ActiveRideExistsError",
]
