"""
Driver eligibility service.

This module handles:
    - Validating passenger constraints and driver records
    - Filtering the live driver pool by university, gender preference and liveness
"""

from .eligibility import (
    filter_eligible_drivers,
    is_eligible,
    validate_candidate,
    validate_constraints,
)

__all__ = [
    "filter_eligible_drivers",
    "is_eligible",
    "validate_candidate",
    "validate_constraints",
]
