"""
Services package - Business logic layer.

The matching and pricing modules are plain Python with no model imports, so
any transport (HTTP, WebSocket, batch jobs) can feed them candidate pools.
Ride lifecycle operations live in services.ride_management and work on Django
models; import them from there.

Modules:
    - domain: value types shared by matching and pricing
    - matching: driver eligibility filter
    - pricing: trip cost estimation
    - ride_management: ride request lifecycle
"""

from .exceptions import (
    ServiceInputError,
    InvalidConstraint,
    InvalidCandidate,
    InvalidFuelPrice,
    InvalidDistance,
    InvalidRateTable,
    InvalidSplitPolicy,
)
from .matching import filter_eligible_drivers, is_eligible
from .pricing import estimate_trip_cost, SplitPolicy, TripCostResult

__all__ = [
    # Matching
    "filter_eligible_drivers",
    "is_eligible",
    # Pricing
    "estimate_trip_cost",
    "SplitPolicy",
    "TripCostResult",
    # Exceptions
    "ServiceInputError",
    "InvalidConstraint",
    "InvalidCandidate",
    "InvalidFuelPrice",
    "InvalidDistance",
    "InvalidRateTable",
    "InvalidSplitPolicy",
]
