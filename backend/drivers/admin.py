from django.contrib import admin
from drivers.models import DriverProfile


@admin.register(DriverProfile)
class DriverProfileAdmin(admin.ModelAdmin):
    """Admin panel for managing Driver Profiles"""

    list_display = [
        "user",
        "plate_number",
        "car_brand",
        "car_model",
        "cylinders",
        "is_live",
        "current_latitude",
        "current_longitude",
        "last_location_update",
    ]

    list_filter = [
        "is_live",
        "cylinders",
        "user__university",
    ]

    search_fields = [
        "user__username",
        "plate_number",
    ]

    readonly_fields = [
        "last_location_update",
    ]

    ordering = ("user__username",)
