from rest_framework import serializers

from fares.models import FuelPrice


class FuelPriceSerializer(serializers.ModelSerializer):
    set_by = serializers.CharField(source="set_by.username", read_only=True, default=None)

    class Meta:
        model = FuelPrice
        fields = ["id", "price_per_liter", "set_by", "created_at"]
        read_only_fields = fields


class FuelPriceUpdateSerializer(serializers.Serializer):
    """
    Serializer for an admin setting a new fuel price (USD per liter).
    Positivity is enforced by fares.services.set_fuel_price.
    """
    price_per_liter = serializers.DecimalField(max_digits=8, decimal_places=3)
