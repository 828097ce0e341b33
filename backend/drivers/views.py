from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from accounts.permissions import IsApprovedUser
from drivers.models import DriverProfile
from drivers.serializers import (
    DriverProfileSerializer,
    DriverLiveSerializer,
    LocationUpdateSerializer,
)

from drivers import services

# Utility: Ensure request.user is a driver
def require_driver(user):
    if user.role != "driver":
        return False, Response({"error": "Only drivers allowed"}, status=403)
    try:
        profile = user.driver_profile
        return True, profile
    except DriverProfile.DoesNotExist:
        return False, Response({"error": "Driver profile not found"}, status=404)


class DriverProfileView(APIView):
    permission_classes = [IsAuthenticated, IsApprovedUser]

    def get(self, request):
        ok, profile = require_driver(request.user)
        if ok is False:
            return profile  # Response object

        serializer = DriverProfileSerializer(profile, context={"request": request})
        return Response(serializer.data)

    def patch(self, request):
        ok, profile = require_driver(request.user)
        if ok is False:
            return profile

        serializer = DriverProfileSerializer(
            profile, data=request.data, partial=True, context={"request": request}
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()

        return Response(serializer.data, status=200)


#    HTTP fallback for the "Go Live" switch; drivers/ws can do the same.
class DriverLiveStatusView(APIView):
    permission_classes = [IsAuthenticated, IsApprovedUser]

    def get(self, request):
        ok, profile = require_driver(request.user)
        if ok is False:
            return profile

        return Response({"is_live": profile.is_live})

    def put(self, request):
        ok, profile = require_driver(request.user)
        if ok is False:
            return profile

        serializer = DriverLiveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        is_live = serializer.validated_data["is_live"]

        try:
            services.set_driver_live(profile, is_live)
        except services.DriverNotReadyError as e:
            return Response({"error": str(e)}, status=status.HTTP_409_CONFLICT)

        return Response({
            "message": "You are now live" if is_live else "You are now offline",
            "is_live": is_live,
        })


class DriverLocationUpdateView(APIView):
    permission_classes = [IsAuthenticated, IsApprovedUser]

    def get(self, request):
        ok, profile = require_driver(request.user)
        if ok is False:
            return profile

        return Response({
            "latitude": float(profile.current_latitude) if profile.current_latitude is not None else None,
            "longitude": float(profile.current_longitude) if profile.current_longitude is not None else None,
            "last_updated": profile.last_location_update,
            "is_live": profile.is_live,
        })

    def post(self, request):
        ok, profile = require_driver(request.user)
        if ok is False:
            return profile

        serializer = LocationUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        lat = serializer.validated_data["latitude"]
        lon = serializer.validated_data["longitude"]

        services.update_driver_location(profile, lat, lon)

        return Response({
            "message": "Location updated",
            "latitude": float(lat),
            "longitude": float(lon),
            "is_live": profile.is_live,
        })
