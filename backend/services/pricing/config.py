"""
Fare configuration loaded from Django settings.

    UNIRIDE_FARES = {
        "CONSUMPTION_RATES": {4: 0.08, 6: 0.11, 8: 0.15, 12: 0.20},  # liters per km
        "PASSENGER_SHARE": 1.0,
    }

Read on every call so a settings override takes effect without a restart of
the pricing code.
"""

from typing import Dict

from django.conf import settings

from services.domain import VehicleClass
from services.exceptions import InvalidRateTable
from .fare_estimator import SplitPolicy


def _fare_settings() -> dict:
    return getattr(settings, "UNIRIDE_FARES", {})


def get_rate_table() -> Dict[VehicleClass, float]:
    """Build the vehicle class -> liters-per-km table from settings."""
    raw = _fare_settings().get("CONSUMPTION_RATES", {})
    table: Dict[VehicleClass, float] = {}
    for cylinders, rate in raw.items():
        try:
            vehicle_class = VehicleClass(int(cylinders))
        except ValueError:
            raise InvalidRateTable(f"Unknown cylinder class in CONSUMPTION_RATES: {cylinders!r}")
        table[vehicle_class] = float(rate)
    return table


def get_split_policy() -> SplitPolicy:
    """Current split policy; defaults to the passenger paying the whole fuel cost."""
    return SplitPolicy(passenger_share=_fare_settings().get("PASSENGER_SHARE", 1.0))
