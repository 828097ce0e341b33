"""Common utility functions."""

from .geo import KM_PER_DEGREE, is_valid_coordinate, planar_distance_km

__all__ = [
    "KM_PER_DEGREE",
    "is_valid_coordinate",
    "planar_distance_km",
]
