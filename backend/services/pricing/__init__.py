"""
Fare estimation service.

This module handles:
    - Converting distance, vehicle class and fuel price into a trip cost
    - Splitting that cost between passenger and driver
    - Loading the rate table and split policy from settings
"""

from .fare_estimator import (
    PASSENGER_PAYS_ALL,
    SplitPolicy,
    TripCostResult,
    estimate_trip_cost,
    round_money,
)
from .config import get_rate_table, get_split_policy

__all__ = [
    "PASSENGER_PAYS_ALL",
    "SplitPolicy",
    "TripCostResult",
    "estimate_trip_cost",
    "round_money",
    "get_rate_table",
    "get_split_policy",
]
