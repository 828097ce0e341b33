"""
Fuel price administration.

Prices are append-only; the pricing core always receives the latest one as
an explicit argument and never reads it itself.
"""

import logging
from decimal import Decimal, InvalidOperation

from fares.models import FuelPrice
from services.exceptions import InvalidFuelPrice

logger = logging.getLogger(__name__)


class FuelPriceNotSetError(Exception):
    """Raised when no fuel price has been administered yet."""
    pass


def get_current_fuel_price() -> Decimal:
    """Latest administered price per liter."""
    latest = FuelPrice.objects.order_by('-created_at', '-id').first()
    if latest is None:
        raise FuelPriceNotSetError("Fuel price has not been set by an administrator yet")
    return latest.price_per_liter


def set_fuel_price(price, set_by=None) -> FuelPrice:
    """
    Record a new fuel price, replacing the current one.

    Raises:
        InvalidFuelPrice: If price is not a positive number
    """
    try:
        price = Decimal(str(price))
    except (InvalidOperation, ValueError):
        raise InvalidFuelPrice(f"Fuel price must be a positive number, got {price!r}")
    if not price.is_finite() or price <= 0:
        raise InvalidFuelPrice("Please enter a valid fuel price")

    record = FuelPrice.objects.create(price_per_liter=price, set_by=set_by)
    logger.info(
        "Fuel price set to %s USD/L by %s", price, getattr(set_by, 'username', 'system')
    )
    return record


def fuel_price_history(limit: int = 50):
    return FuelPrice.objects.select_related('set_by').order_by('-created_at', '-id')[:limit]
