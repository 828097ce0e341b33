"""
Trip cost estimation.

Converts a driver position, a destination campus and the current fuel price
into a fuel cost split between passenger and driver. Intermediate values keep
full float precision; money is rounded once, half-up to cents, when the result
is built.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping

from services.domain import GeoPoint, VehicleClass
from services.exceptions import (
    InvalidDistance,
    InvalidFuelPrice,
    InvalidRateTable,
    InvalidSplitPolicy,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

RateTable = Mapping[VehicleClass, float]


@dataclass(frozen=True)
class SplitPolicy:
    """Fraction of the fuel cost paid by the passenger; the driver covers the rest."""
    passenger_share: float = 1.0

    def __post_init__(self):
        try:
            share = float(self.passenger_share)
        except (TypeError, ValueError):
            raise InvalidSplitPolicy(f"Passenger share is not a number: {self.passenger_share!r}")
        if not math.isfinite(share) or not 0.0 <= share <= 1.0:
            raise InvalidSplitPolicy(f"Passenger share must be between 0 and 1, got {share}")


PASSENGER_PAYS_ALL = SplitPolicy(passenger_share=1.0)


@dataclass(frozen=True)
class TripCostResult:
    distance_km: float
    fuel_liters: float
    total_cost: Decimal
    passenger_share: Decimal
    driver_share: Decimal


def round_money(value: float) -> Decimal:
    """Round to cents using half-up rounding on the shortest decimal repr."""
    return Decimal(repr(float(value))).quantize(CENT, rounding=ROUND_HALF_UP)


def validate_fuel_price(fuel_price) -> float:
    if fuel_price is None or isinstance(fuel_price, bool):
        raise InvalidFuelPrice(f"Fuel price must be a positive number, got {fuel_price!r}")
    try:
        price = float(fuel_price)
    except (TypeError, ValueError):
        raise InvalidFuelPrice(f"Fuel price must be a positive number, got {fuel_price!r}")
    if not math.isfinite(price) or price <= 0:
        raise InvalidFuelPrice(f"Fuel price must be greater than zero, got {fuel_price}")
    return price


def consumption_rate(rate_table: RateTable, vehicle_class) -> float:
    """Look up liters-per-km for a vehicle class, banding a raw cylinder count."""
    try:
        if not isinstance(vehicle_class, VehicleClass):
            vehicle_class = VehicleClass.from_cylinders(vehicle_class)
    except (TypeError, ValueError):
        raise InvalidRateTable(f"Unknown vehicle class: {vehicle_class!r}")

    rate = rate_table.get(vehicle_class)
    if rate is None:
        raise InvalidRateTable(f"No consumption rate configured for {vehicle_class.name}")
    try:
        rate = float(rate)
    except (TypeError, ValueError):
        raise InvalidRateTable(f"Consumption rate for {vehicle_class.name} is not a number")
    if not math.isfinite(rate) or rate <= 0:
        raise InvalidRateTable(f"Consumption rate for {vehicle_class.name} must be positive")
    return rate


def _require_point(point, label: str) -> GeoPoint:
    if not isinstance(point, GeoPoint) or not point.is_valid:
        raise InvalidDistance(f"Invalid {label} coordinate: {point!r}")
    return point


def estimate_trip_cost(
    origin: GeoPoint,
    destination: GeoPoint,
    vehicle_class: VehicleClass,
    fuel_price,
    rate_table: RateTable,
    split_policy: SplitPolicy = PASSENGER_PAYS_ALL,
) -> TripCostResult:
    """
    Estimate the fuel cost of driving from origin to destination.

    Args:
        origin: Driver's current position
        destination: Passenger's university
        vehicle_class: Fuel-consumption class of the driver's car
        fuel_price: Current administered price per liter (> 0)
        rate_table: Liters per km for each vehicle class
        split_policy: How the cost divides between passenger and driver

    Returns:
        TripCostResult; a zero-length trip yields a zero cost

    Raises:
        InvalidFuelPrice: price is not strictly positive
        InvalidDistance: origin or destination is out of range
        InvalidRateTable: no usable rate for the vehicle class
    """
    price = validate_fuel_price(fuel_price)
    origin = _require_point(origin, "origin")
    destination = _require_point(destination, "destination")
    rate = consumption_rate(rate_table, vehicle_class)

    distance_km = origin.distance_to(destination)
    fuel_liters = distance_km * rate
    total = fuel_liters * price
    passenger_raw = total * float(split_policy.passenger_share)

    total_cost = round_money(total)
    passenger_share = round_money(passenger_raw)
    driver_share = total_cost - passenger_share

    logger.debug(
        "Trip estimate: %.3f km, %.3f L at %.2f/L -> total=%s passenger=%s driver=%s",
        distance_km, fuel_liters, price, total_cost, passenger_share, driver_share,
    )

    return TripCostResult(
        distance_km=distance_km,
        fuel_liters=fuel_liters,
        total_cost=total_cost,
        passenger_share=passenger_share,
        driver_share=driver_share,
    )
