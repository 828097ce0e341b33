from django.urls import path

from .views import FuelPriceHistoryView, FuelPriceView

app_name = "fares"

urlpatterns = [
    path("fuel-price/", FuelPriceView.as_view(), name="fuel-price"),
    path("fuel-price/history/", FuelPriceHistoryView.as_view(), name="fuel-price-history"),
]
