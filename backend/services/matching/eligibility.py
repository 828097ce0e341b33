"""
Decide which live drivers a passenger may see and request.

A driver is eligible when all three rules hold:
    1. same university affiliation as the passenger (always enforced)
    2. same gender, only when the passenger asked for same-gender matching
    3. the driver is live

Malformed driver records are dropped one by one and reported; they never
abort the filter for everyone else.
"""

import logging
from typing import Callable, Iterable, List, Optional

from services.domain import (
    DriverCandidate,
    GeoPoint,
    Gender,
    GenderPreference,
    PassengerConstraints,
    VehicleClass,
)
from services.exceptions import InvalidCandidate, InvalidConstraint

logger = logging.getLogger(__name__)

RejectionHandler = Callable[[InvalidCandidate], None]


def validate_constraints(constraints: PassengerConstraints) -> PassengerConstraints:
    """
    Normalize raw passenger constraints into enum-typed ones.

    Raises:
        InvalidConstraint: unknown gender preference, unknown gender or
            missing university affiliation
    """
    try:
        preference = GenderPreference(constraints.gender_preference)
    except ValueError:
        raise InvalidConstraint(
            f"Unknown gender preference: {constraints.gender_preference!r}"
        )
    try:
        gender = Gender(constraints.gender)
    except ValueError:
        raise InvalidConstraint(f"Unknown passenger gender: {constraints.gender!r}")
    if constraints.university_id is None:
        raise InvalidConstraint("Passenger has no university affiliation")

    return PassengerConstraints(
        gender=gender,
        university_id=constraints.university_id,
        gender_preference=preference,
    )


def validate_candidate(candidate: DriverCandidate) -> DriverCandidate:
    """
    Check a single driver record coming from the live directory.

    Raises:
        InvalidCandidate: missing or out-of-range location, unrecognised
            gender, or a cylinder count that maps to no vehicle class
    """
    if not isinstance(candidate.location, GeoPoint):
        raise InvalidCandidate(candidate.driver_id, f"missing location {candidate.location!r}")
    if not candidate.location.is_valid:
        raise InvalidCandidate(
            candidate.driver_id,
            "location out of range (lat=%s, lon=%s)"
            % (candidate.location.latitude, candidate.location.longitude),
        )
    try:
        gender = Gender(candidate.gender)
    except ValueError:
        raise InvalidCandidate(candidate.driver_id, f"unknown gender {candidate.gender!r}")

    vehicle_class = candidate.vehicle_class
    if not isinstance(vehicle_class, VehicleClass):
        try:
            vehicle_class = VehicleClass.from_cylinders(vehicle_class)
        except (TypeError, ValueError):
            raise InvalidCandidate(
                candidate.driver_id, f"unknown vehicle class {candidate.vehicle_class!r}"
            )

    if gender is candidate.gender and vehicle_class is candidate.vehicle_class:
        return candidate
    return DriverCandidate(
        driver_id=candidate.driver_id,
        gender=gender,
        university_id=candidate.university_id,
        location=candidate.location,
        vehicle_class=vehicle_class,
        is_live=candidate.is_live,
    )


def is_eligible(constraints: PassengerConstraints, candidate: DriverCandidate) -> bool:
    """Apply the affiliation, gender and liveness rules to one validated candidate."""
    if not candidate.is_live:
        return False
    if candidate.university_id != constraints.university_id:
        return False
    if (
        constraints.gender_preference == GenderPreference.SAME_ONLY
        and candidate.gender != constraints.gender
    ):
        return False
    return True


def filter_eligible_drivers(
    constraints: PassengerConstraints,
    candidates: Iterable[DriverCandidate],
    on_rejected: Optional[RejectionHandler] = None,
) -> List[DriverCandidate]:
    """
    Reduce a pool of live drivers to those the passenger may contact.

    Args:
        constraints: Passenger gender, university and gender preference
        candidates: Driver records in any order
        on_rejected: Optional callback receiving each InvalidCandidate

    Returns:
        Eligible drivers in input order, one per driver_id. A driver_id is
        kept whenever any of its valid records is eligible; the first such
        record wins

    Raises:
        InvalidConstraint: If the passenger constraints are malformed
    """
    constraints = validate_constraints(constraints)

    eligible: List[DriverCandidate] = []
    seen = set()
    rejected = 0

    for candidate in candidates:
        try:
            candidate = validate_candidate(candidate)
        except InvalidCandidate as exc:
            rejected += 1
            logger.warning("Excluding malformed driver record: %s", exc)
            if on_rejected is not None:
                on_rejected(exc)
            continue

        if not is_eligible(constraints, candidate):
            continue
        if candidate.driver_id in seen:
            continue
        seen.add(candidate.driver_id)
        eligible.append(candidate)

    logger.debug(
        "Eligibility for university=%s preference=%s: %d eligible, %d rejected",
        constraints.university_id,
        constraints.gender_preference.value,
        len(eligible),
        rejected,
    )
    return eligible
