from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser

from accounts.permissions import IsApprovedUser
from services.exceptions import InvalidFuelPrice
from fares.models import FuelPrice
from fares.serializers import FuelPriceSerializer, FuelPriceUpdateSerializer
from fares import services


class FuelPriceView(APIView):
    """
    GET  -> Current fuel price (any approved user)
    POST -> Set a new fuel price (admins only)
    """

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAdminUser()]
        return [IsAuthenticated(), IsApprovedUser()]

    def get(self, request):
        latest = FuelPrice.objects.order_by("-created_at", "-id").first()
        if latest is None:
            return Response(
                {"error": "Fuel price has not been set yet"},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(FuelPriceSerializer(latest).data)

    def post(self, request):
        serializer = FuelPriceUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            record = services.set_fuel_price(
                serializer.validated_data["price_per_liter"], set_by=request.user
            )
        except InvalidFuelPrice as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            "message": f"New fuel price: ${record.price_per_liter:.2f} USD/L",
            "fuel_price": FuelPriceSerializer(record).data,
        }, status=status.HTTP_201_CREATED)


class FuelPriceHistoryView(APIView):
    """
    GET: Previously administered fuel prices, newest first.
    """
    permission_classes = [IsAdminUser]

    def get(self, request):
        history = services.fuel_price_history()
        data = FuelPriceSerializer(history, many=True).data
        return Response({"count": len(data), "prices": data})
