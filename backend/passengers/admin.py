from django.contrib import admin
from passengers.models import PassengerProfile


@admin.register(PassengerProfile)
class PassengerProfileAdmin(admin.ModelAdmin):
    list_display = ["user", "gender_preference"]
    list_filter = ["gender_preference", "user__gender", "user__university"]
    search_fields = ["user__username", "user__email"]
