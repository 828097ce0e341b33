"""Input validation errors raised by the matching and pricing core."""


class ServiceInputError(Exception):
    """Base class for invalid input handed to the matching/pricing core."""
    pass


class InvalidConstraint(ServiceInputError):
    """Raised when passenger constraints are malformed (preference, gender, university)."""
    pass


class InvalidCandidate(ServiceInputError):
    """Raised for a malformed driver record. Excluded from results, never fatal to a batch."""

    def __init__(self, driver_id, reason: str):
        self.driver_id = driver_id
        self.reason = reason
        super().__init__(f"Driver {driver_id}: {reason}")


class InvalidFuelPrice(ServiceInputError):
    """Raised when the fuel price is missing, non-numeric or not strictly positive."""
    pass


class InvalidDistance(ServiceInputError):
    """Raised when an origin or destination coordinate is out of range."""
    pass


class InvalidRateTable(ServiceInputError):
    """Raised when a vehicle class has no usable consumption rate."""
    pass


class InvalidSplitPolicy(ServiceInputError):
    """Raised when the passenger share is outside [0, 1]."""
    pass
