"""Tells what to show in the Django admin interface for rides app"""

from django.contrib import admin, messages

from services.ride_management import RideNotAvailableError, mark_payment_received
from .models import RideRequest


@admin.register(RideRequest)
class RideRequestAdmin(admin.ModelAdmin):
    """Ride Request admin"""
    list_display = [
        'id', 'passenger', 'driver', 'university', 'status',
        'estimated_cost', 'payment_method', 'payment_status', 'requested_at',
    ]
    list_filter = ['status', 'payment_status', 'payment_method', 'university', 'requested_at']
    search_fields = ['passenger__username', 'driver__username']
    readonly_fields = [
        'distance_km', 'fuel_price', 'estimated_cost', 'passenger_share', 'driver_share',
        'requested_at', 'responded_at', 'completed_at', 'cancelled_at', 'paid_at',
    ]
    date_hierarchy = 'requested_at'
    actions = ['mark_paid']

    @admin.action(description="Mark selected completed rides as paid")
    def mark_paid(self, request, queryset):
        paid = 0
        for ride in queryset:
            try:
                mark_payment_received(ride.id, actor=request.user)
                paid += 1
            except RideNotAvailableError as e:
                self.message_user(request, f"Ride #{ride.id}: {e}", level=messages.WARNING)
        self.message_user(request, f"{paid} ride(s) marked paid.")
