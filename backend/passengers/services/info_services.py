# passengers/services/info_services.py

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from drivers.models import DriverProfile
from drivers.serializers import DriverBasicSerializer
from drivers.services import build_candidate, live_driver_profiles
from fares.services import get_current_fuel_price
from passengers.models import PassengerProfile
from common.utils.geo import planar_distance_km
from services.domain import PassengerConstraints
from services.matching import filter_eligible_drivers
from services.pricing import TripCostResult, estimate_trip_cost, get_rate_table, get_split_policy
from services.ride_management.exceptions import DriverNotAvailableError, DriverNotEligibleError

logger = logging.getLogger(__name__)


def get_passenger_profile(user) -> PassengerProfile:
    """Return the passenger profile, creating the default one if missing."""
    profile, _ = PassengerProfile.objects.get_or_create(user=user)
    return profile


def get_passenger_constraints(user) -> PassengerConstraints:
    """Build the matching constraints for a passenger from their stored records."""
    preference = (
        PassengerProfile.objects.filter(user_id=user.id)
        .values_list("gender_preference", flat=True)
        .first()
    )
    return PassengerConstraints(
        gender=user.gender,
        university_id=user.university_id,
        gender_preference=preference or "same",
    )


def find_eligible_drivers(user, lat=None, lon=None) -> List[Dict[str, Any]]:
    """
    Live drivers this passenger may see and request.

    When the passenger's location is given, results carry distance_km and are
    ordered closest first using the same planar distance as fare estimation.
    """
    constraints = get_passenger_constraints(user)
    profiles = {profile.id: profile for profile in live_driver_profiles()}
    candidates = [build_candidate(profile) for profile in profiles.values()]

    eligible = filter_eligible_drivers(constraints, candidates)
    logger.debug("Passenger %s sees %d of %d live drivers", user.id, len(eligible), len(candidates))

    rows: List[Tuple[Optional[float], Dict[str, Any]]] = []
    for candidate in eligible:
        data = dict(DriverBasicSerializer(profiles[candidate.driver_id]).data)
        distance = None
        if lat is not None and lon is not None:
            distance = planar_distance_km(
                lat, lon, candidate.location.latitude, candidate.location.longitude
            )
        data["distance_km"] = round(distance, 2) if distance is not None else None
        rows.append((distance, data))

    if lat is not None and lon is not None:
        rows.sort(key=lambda row: row[0])

    return [data for _, data in rows]


def quote_driver_for_passenger(user, driver_id: int) -> Tuple[DriverProfile, TripCostResult, Decimal]:
    """
    Price a trip with one specific driver to the passenger's university.

    Returns the driver profile, the estimate and the fuel price it used.

    Raises:
        DriverNotAvailableError: driver is not live (or not approved)
        DriverNotEligibleError: driver fails the passenger's eligibility rules
        FuelPriceNotSetError: no fuel price administered yet
        ServiceInputError: malformed constraints, coordinates or fare configuration
    """
    profile = live_driver_profiles().filter(id=driver_id).first()
    if profile is None:
        raise DriverNotAvailableError("This driver is not available right now")

    eligible = filter_eligible_drivers(get_passenger_constraints(user), [build_candidate(profile)])
    if not eligible:
        raise DriverNotEligibleError("This driver is not available to you")
    candidate = eligible[0]

    fuel_price = get_current_fuel_price()
    result = estimate_trip_cost(
        origin=candidate.location,
        destination=user.university.location,
        vehicle_class=candidate.vehicle_class,
        fuel_price=fuel_price,
        rate_table=get_rate_table(),
        split_policy=get_split_policy(),
    )
    return profile, result, fuel_price
