from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from accounts.permissions import IsApprovedUser
from fares.services import FuelPriceNotSetError
from services.exceptions import ServiceInputError
from services.ride_management.exceptions import DriverNotAvailableError, DriverNotEligibleError

from ..permissions import IsPassenger
from ..serializers import (
    PassengerProfileSerializer,
    RequestLocationSerializer,
    TripCostSerializer,
    TripEstimateRequestSerializer,
)
from ..services import info_services


class PassengerProfileView(APIView):
    """
    GET   -> Retrieve authenticated passenger profile
    PATCH -> Update the gender preference used for matching
    """
    permission_classes = [IsAuthenticated, IsPassenger]

    def get(self, request):
        profile = info_services.get_passenger_profile(request.user)
        return Response(PassengerProfileSerializer(profile).data)

    def patch(self, request):
        profile = info_services.get_passenger_profile(request.user)
        serializer = PassengerProfileSerializer(profile, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class PassengerEligibleDriversView(APIView):
    """
    POST: Live drivers the passenger may request.
    Optional latitude/longitude order the result by distance.
    """
    permission_classes = [IsAuthenticated, IsApprovedUser, IsPassenger]

    def post(self, request):
        loc_ser = RequestLocationSerializer(data=request.data)
        loc_ser.is_valid(raise_exception=True)

        lat = loc_ser.validated_data.get("latitude")
        lon = loc_ser.validated_data.get("longitude")

        try:
            drivers = info_services.find_eligible_drivers(request.user, lat, lon)
        except ServiceInputError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            "count": len(drivers),
            "drivers": drivers,
        })


class PassengerTripEstimateView(APIView):
    """
    POST: Estimated fuel cost of a trip with one driver to the passenger's university.
    """
    permission_classes = [IsAuthenticated, IsApprovedUser, IsPassenger]

    def post(self, request):
        ser = TripEstimateRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            profile, result, _ = info_services.quote_driver_for_passenger(
                request.user, ser.validated_data["driver_id"]
            )
        except DriverNotAvailableError as e:
            return Response({"error": str(e)}, status=status.HTTP_404_NOT_FOUND)
        except DriverNotEligibleError as e:
            return Response({"error": str(e)}, status=status.HTTP_403_FORBIDDEN)
        except FuelPriceNotSetError as e:
            return Response({"error": str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        except ServiceInputError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            "driver_id": profile.id,
            "cylinders": profile.cylinders,
            "estimate": TripCostSerializer(result).data,
        })
