from rest_framework import serializers
from .models import RideRequest

from passengers.serializers import PassengerBasicSerializer
from drivers.serializers import DriverBasicSerializer


class RideRequestSerializer(serializers.ModelSerializer):
    """Serializer for Ride Requests"""
    passenger = PassengerBasicSerializer(read_only=True)
    driver = DriverBasicSerializer(read_only=True, source='driver.driver_profile', allow_null=True)
    university = serializers.CharField(source='university.name', read_only=True)

    class Meta:
        model = RideRequest
        fields = ['id', 'passenger', 'driver', 'university', 'pickup_latitude', 'pickup_longitude',
                  'distance_km', 'fuel_price', 'estimated_cost', 'passenger_share', 'driver_share',
                  'payment_method', 'payment_status', 'status', 'requested_at', 'responded_at',
                  'completed_at', 'cancelled_at', 'paid_at']
        read_only_fields = fields


class RideRequestCreateSerializer(serializers.Serializer):
    """Serializer for creating ride requests"""
    driver_id = serializers.IntegerField()
    pickup_latitude = serializers.DecimalField(max_digits=9, decimal_places=6, min_value=-90, max_value=90)
    pickup_longitude = serializers.DecimalField(max_digits=9, decimal_places=6, min_value=-180, max_value=180)
    payment_method = serializers.ChoiceField(choices=RideRequest.PAYMENT_METHOD_CHOICES, default='live')


class RideCompleteSerializer(serializers.Serializer):
    """Serializer for ride completion"""
    payment_received = serializers.BooleanField(default=False)
