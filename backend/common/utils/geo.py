"""
Geographic utility functions.

This module provides the distance calculation shared by driver ordering and
fare estimation, plus coordinate range checks.
"""

from math import isfinite, sqrt

# Kilometers per degree, applied to both latitude and longitude.
KM_PER_DEGREE = 111.0


def planar_distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Straight-line distance between two points in kilometers.

    Known approximation: each degree of latitude and of longitude is treated as
    KM_PER_DEGREE kilometers and the two legs are combined with Pythagoras. It
    is not a great-circle distance; east-west error grows with latitude. Fares
    shown to riders have always been computed this way, so the formula must not
    be swapped for a geodesic one.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in kilometers
    """
    dlat_km = (float(lat2) - float(lat1)) * KM_PER_DEGREE
    dlon_km = (float(lon2) - float(lon1)) * KM_PER_DEGREE
    return sqrt(dlat_km ** 2 + dlon_km ** 2)


def is_valid_coordinate(lat, lon) -> bool:
    """Return True when lat/lon are finite numbers inside WGS84 ranges."""
    try:
        lat = float(lat)
        lon = float(lon)
    except (TypeError, ValueError):
        return False
    if not (isfinite(lat) and isfinite(lon)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0
