from rest_framework import serializers
from drivers.models import DriverProfile
from accounts.serializers import UserSerializer


class DriverProfileSerializer(serializers.ModelSerializer):
    """
    Full driver profile serializer
    """
    user = UserSerializer(read_only=True)

    class Meta:
        model = DriverProfile
        fields = [
            "id",
            "user",
            "car_brand",
            "car_model",
            "car_year",
            "car_color",
            "plate_number",
            "cylinders",
            "home_address",
            "is_live",
            "current_latitude",
            "current_longitude",
            "last_location_update",
        ]
        read_only_fields = [
            "id",
            "is_live",
            "current_latitude",
            "current_longitude",
            "last_location_update",
        ]


class DriverBasicSerializer(serializers.ModelSerializer):
    """
    Lite version of driver info for ride details
    (sent to passengers on the map and inside ride requests).
    """
    first_name = serializers.CharField(source="user.first_name", read_only=True)
    last_name = serializers.CharField(source="user.last_name", read_only=True)
    gender = serializers.CharField(source="user.gender", read_only=True)
    university = serializers.CharField(source="user.university.name", read_only=True, default=None)
    whatsapp = serializers.CharField(source="user.whatsapp", read_only=True)

    class Meta:
        model = DriverProfile
        fields = [
            "id",
            "first_name",
            "last_name",
            "gender",
            "university",
            "whatsapp",
            "car_brand",
            "car_model",
            "car_year",
            "car_color",
            "plate_number",
            "current_latitude",
            "current_longitude",
        ]


class DriverLiveSerializer(serializers.Serializer):
    """
    Serializer for going live / offline.
    """
    is_live = serializers.BooleanField()


class LocationUpdateSerializer(serializers.Serializer):
    """
    Serializer for updating driver GPS location.
    """
    latitude = serializers.DecimalField(max_digits=9, decimal_places=6, min_value=-90, max_value=90)
    longitude = serializers.DecimalField(max_digits=9, decimal_places=6, min_value=-180, max_value=180)
