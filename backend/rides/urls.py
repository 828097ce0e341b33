from django.urls import path
from . import views

app_name = 'rides'

urlpatterns = [
    # Passenger APIs
    path('passenger/request/', views.create_ride_request, name='create-ride'),
    path('passenger/current/', views.get_current_ride, name='current-ride'),
    path('passenger/<int:ride_id>/cancel/', views.cancel_ride, name='cancel-ride'),

    # Driver Ride Actions
    path('driver/current/', views.driver_current_rides, name='driver-current-rides'),
    path('handle/<int:ride_id>/accept/', views.accept_ride, name='accept-ride'),
    path('handle/<int:ride_id>/decline/', views.decline_ride, name='decline-ride'),
    path('handle/<int:ride_id>/complete/', views.complete_ride, name='complete-ride'),

    # Staff
    path('admin/<int:ride_id>/mark-paid/', views.mark_ride_paid, name='mark-paid'),
]
