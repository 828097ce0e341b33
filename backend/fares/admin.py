from django.contrib import admin
from fares.models import FuelPrice


@admin.register(FuelPrice)
class FuelPriceAdmin(admin.ModelAdmin):
    """Admin panel for the fuel price history"""

    list_display = [
        "price_per_liter",
        "set_by",
        "created_at",
    ]

    readonly_fields = [
        "set_by",
        "created_at",
    ]

    ordering = ("-created_at",)

    def save_model(self, request, obj, form, change):
        if not change:
            obj.set_by = request.user
        super().save_model(request, obj, form, change)
