from django.contrib import admin
from django.urls import path, include

from .views import health_check

urlpatterns = [
    path('admin/', admin.site.urls),
    path("health/", health_check), # Health check endpoint

    # Authentication, universities and account approval (at /api/auth/)
    path('api/auth/', include('accounts.urls')),

    # Driver APIs (profile, go live, location)
    path('api/driver/', include('drivers.urls')),

    # Passenger APIs (profile, eligible drivers, trip estimate)
    path('api/passengers/', include('passengers.urls')),

    # Fuel price administration
    path('api/fares/', include('fares.urls')),

    # Ride requests (at /api/rides/)
    path('api/rides/', include('rides.urls')),
]
