from rest_framework import serializers
from django.contrib.auth import get_user_model

from passengers.models import PassengerProfile

User = get_user_model()


class PassengerProfileSerializer(serializers.ModelSerializer):
    """
    Passenger profile with matching preference.
    Used for `/passengers/profile/`.
    """
    username = serializers.CharField(source='user.username', read_only=True)
    first_name = serializers.CharField(source='user.first_name', read_only=True)
    last_name = serializers.CharField(source='user.last_name', read_only=True)
    gender = serializers.CharField(source='user.gender', read_only=True)
    university = serializers.CharField(source='user.university.name', read_only=True, default=None)
    whatsapp = serializers.CharField(source='user.whatsapp', read_only=True)
    completed_rides = serializers.IntegerField(source='user.completed_rides', read_only=True)

    class Meta:
        model = PassengerProfile
        fields = [
            'id', 'username', 'first_name', 'last_name', 'gender', 'university',
            'whatsapp', 'completed_rides', 'gender_preference',
        ]
        read_only_fields = ['id']


class PassengerBasicSerializer(serializers.ModelSerializer):
    """
    Basic passenger representation used inside ride responses.
    """
    university = serializers.CharField(source='university.name', read_only=True, default=None)

    class Meta:
        model = User
        fields = ['id', 'first_name', 'last_name', 'gender', 'university', 'whatsapp']


class RequestLocationSerializer(serializers.Serializer):
    """
    Validates latitude/longitude sent by the passenger.

    Expected body:
    {
        "latitude": <float>,
        "longitude": <float>
    }

    Notes:
    - Uses DecimalField for higher precision.
    - Restricts values to valid Earth coordinate ranges.
    - Both fields are optional; without them drivers are returned unordered.
    """

    latitude = serializers.DecimalField(
        max_digits=9,
        decimal_places=6,
        required=False,
        min_value=-90,
        max_value=90,
        help_text="Latitude between -90 and 90 degrees."
    )

    longitude = serializers.DecimalField(
        max_digits=9,
        decimal_places=6,
        required=False,
        min_value=-180,
        max_value=180,
        help_text="Longitude between -180 and 180 degrees."
    )

    def validate(self, data):
        if ("latitude" in data) != ("longitude" in data):
            raise serializers.ValidationError("Provide both latitude and longitude, or neither.")
        return data


class TripEstimateRequestSerializer(serializers.Serializer):
    driver_id = serializers.IntegerField()


class TripCostSerializer(serializers.Serializer):
    """Presentation of services.pricing.TripCostResult."""
    distance_km = serializers.SerializerMethodField()
    fuel_liters = serializers.SerializerMethodField()
    total_cost = serializers.DecimalField(max_digits=10, decimal_places=2)
    passenger_share = serializers.DecimalField(max_digits=10, decimal_places=2)
    driver_share = serializers.DecimalField(max_digits=10, decimal_places=2)

    def get_distance_km(self, obj):
        return round(obj.distance_km, 2)

    def get_fuel_liters(self, obj):
        return round(obj.fuel_liters, 3)
