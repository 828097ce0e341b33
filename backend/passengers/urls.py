# passengers/urls.py

from django.urls import path

from .views.info import (
    PassengerProfileView,
    PassengerEligibleDriversView,
    PassengerTripEstimateView,
)

app_name = "passengers"

urlpatterns = [
    path("profile/", PassengerProfileView.as_view(), name="profile"),
    path("eligible-drivers/", PassengerEligibleDriversView.as_view(), name="eligible-drivers"),
    path("estimate/", PassengerTripEstimateView.as_view(), name="estimate"),
]
