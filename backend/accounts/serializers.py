from django.contrib.auth import authenticate
from django.db import transaction
from rest_framework import serializers

from .models import University, User
from .services import AccountNotApprovedError, ensure_can_login
from drivers.models import DriverProfile
from passengers.models import PassengerProfile


class UniversitySerializer(serializers.ModelSerializer):
    class Meta:
        model = University
        fields = ["id", "name", "city", "latitude", "longitude"]


class UserSerializer(serializers.ModelSerializer):
    university_name = serializers.CharField(source="university.name", read_only=True, default=None)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "role",
            "gender",
            "university",
            "university_name",
            "whatsapp",
            "status",
            "completed_rides",
        ]
        read_only_fields = ["id", "role", "status", "completed_rides", "university_name"]


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, data):
        user = authenticate(username=data["username"], password=data["password"])
        if not user:
            raise serializers.ValidationError("Invalid username or password")
        try:
            ensure_can_login(user)
        except AccountNotApprovedError as e:
            raise serializers.ValidationError(str(e))
        return user


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=8)
    university = serializers.PrimaryKeyRelatedField(queryset=University.objects.all())

    # Driver-only fields
    car_brand = serializers.CharField(required=False)
    car_model = serializers.CharField(required=False)
    car_year = serializers.IntegerField(required=False, min_value=1970, max_value=2100)
    car_color = serializers.CharField(required=False)
    plate_number = serializers.CharField(required=False)
    cylinders = serializers.ChoiceField(choices=[4, 6, 8, 12], required=False)
    home_address = serializers.CharField(required=False, allow_blank=True)

    # Passenger-only field
    gender_preference = serializers.ChoiceField(choices=["same", "any"], required=False, default="same")

    DRIVER_FIELDS = ("car_brand", "car_model", "car_year", "car_color", "plate_number", "cylinders")

    class Meta:
        model = User
        fields = [
            "username", "password", "email", "first_name", "last_name",
            "role", "gender", "university", "whatsapp",
            "car_brand", "car_model", "car_year", "car_color", "plate_number",
            "cylinders", "home_address", "gender_preference",
        ]
        extra_kwargs = {
            "email": {"required": True},
            "gender": {"required": True},
        }

    def validate_email(self, value):
        if User.objects.filter(email=value).exists():
            raise serializers.ValidationError("Email already exists")
        return value

    def validate_plate_number(self, value):
        if DriverProfile.objects.filter(plate_number=value).exists():
            raise serializers.ValidationError("Plate number already registered")
        return value

    def validate(self, data):
        # Drivers must describe their vehicle
        if data["role"] == "driver":
            missing = {
                field: f"{field.replace('_', ' ').capitalize()} is required for drivers"
                for field in self.DRIVER_FIELDS
                if data.get(field) in (None, "")
            }
            if missing:
                raise serializers.ValidationError(missing)
        return data

    @transaction.atomic
    def create(self, validated_data):
        driver_data = {
            field: validated_data.pop(field)
            for field in self.DRIVER_FIELDS + ("home_address",)
            if field in validated_data
        }
        gender_preference = validated_data.pop("gender_preference", "same")
        password = validated_data.pop("password")

        user = User(**validated_data)
        user.set_password(password)
        user.status = "pending"
        user.save()

        if user.role == "driver":
            DriverProfile.objects.create(user=user, **driver_data)
        else:
            PassengerProfile.objects.create(user=user, gender_preference=gender_preference)

        return user


class AccountStatusSerializer(serializers.Serializer):
    """Serializer for admin approval actions."""
    status = serializers.ChoiceField(choices=["approved", "rejected", "banned"])
