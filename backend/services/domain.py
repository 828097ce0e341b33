"""
Value types shared by the matching and pricing services.

Everything here is immutable and built fresh per request from rows owned by
the Django apps. Nothing validates on construction: a malformed record coming
from the store must still be representable, so that the layer consuming it
decides whether it is fatal or simply excluded.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Hashable

from common.utils.geo import is_valid_coordinate, planar_distance_km


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class GenderPreference(str, Enum):
    """Passenger's opt-in safety filter."""
    SAME_ONLY = "same"
    ANY = "any"


class VehicleClass(int, Enum):
    """
    Fuel-consumption class, keyed by cylinder band.
    Liters-per-km for each class live in settings, not here.
    """
    FOUR_CYLINDER = 4
    SIX_CYLINDER = 6
    EIGHT_CYLINDER = 8
    TWELVE_CYLINDER = 12

    @classmethod
    def from_cylinders(cls, cylinders: int) -> VehicleClass:
        """Band an arbitrary cylinder count into one of the four classes."""
        cylinders = int(cylinders)
        if cylinders <= 0:
            raise ValueError(f"Cylinder count must be positive, got {cylinders}")
        for vehicle_class in cls:
            if cylinders <= vehicle_class.value:
                return vehicle_class
        return cls.TWELVE_CYLINDER


@dataclass(frozen=True)
class GeoPoint:
    """Latitude/longitude in decimal degrees (WGS84)."""
    latitude: float
    longitude: float

    @property
    def is_valid(self) -> bool:
        if isinstance(self.latitude, bool) or isinstance(self.longitude, bool):
            return False
        return is_valid_coordinate(self.latitude, self.longitude)

    def distance_to(self, other: GeoPoint) -> float:
        """Planar distance in kilometers (see common.utils.geo)."""
        return planar_distance_km(
            self.latitude, self.longitude, other.latitude, other.longitude
        )


@dataclass(frozen=True)
class DriverCandidate:
    """A driver who has opted into visibility, as read from the live directory."""
    driver_id: Hashable
    gender: Gender
    university_id: Hashable
    location: GeoPoint
    vehicle_class: VehicleClass
    is_live: bool = True


@dataclass(frozen=True)
class PassengerConstraints:
    gender: Gender
    university_id: Hashable
    gender_preference: GenderPreference = GenderPreference.SAME_ONLY
