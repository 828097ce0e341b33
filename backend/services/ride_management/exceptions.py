"""Custom exceptions for ride management."""


class RideNotFoundError(Exception):
    """Raised when a ride cannot be found (or does not belong to the caller)."""
    pass


class RideNotAvailableError(Exception):
    """Raised when a ride is not in an available state for the operation."""
    pass


class DriverNotAvailableError(Exception):
    """Raised when the requested driver is not live or not approved."""
    pass


class DriverNotEligibleError(Exception):
    """Raised when a passenger targets a driver the eligibility rules exclude."""
    pass


class ActiveRideExistsError(Exception):
    """Raised when user already has an active ride."""
    pass
