from django.urls import path
from .views import (
    DriverProfileView,
    DriverLiveStatusView,
    DriverLocationUpdateView,
)

urlpatterns = [
    path("profile/", DriverProfileView.as_view(), name="driver-profile"),
    path("live/", DriverLiveStatusView.as_view(), name="driver-live"),
    path("location/", DriverLocationUpdateView.as_view(), name="driver-location"),
]
