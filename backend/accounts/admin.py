from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from accounts.models import University, User
from accounts.services import InvalidStatusTransition, change_account_status


def _bulk_status_action(new_status, label):
    def action(modeladmin, request, queryset):
        changed = 0
        for user in queryset:
            try:
                change_account_status(user, new_status, actor=request.user)
                changed += 1
            except InvalidStatusTransition as e:
                modeladmin.message_user(request, f"{user.username}: {e}", level=messages.WARNING)
        modeladmin.message_user(request, f"{changed} user(s) {label}.")

    action.__name__ = f"mark_{new_status}"
    action.short_description = f"Mark selected users as {new_status}"
    return action


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin panel for custom User model"""

    list_display = [
        "username",
        "email",
        "role",
        "gender",
        "university",
        "status",
        "completed_rides",
        "is_staff",
    ]

    list_filter = [
        "status",
        "role",
        "gender",
        "university",
        "date_joined",
    ]

    search_fields = [
        "username",
        "email",
        "whatsapp",
    ]

    ordering = ("username",)

    actions = [
        _bulk_status_action("approved", "approved"),
        _bulk_status_action("rejected", "rejected"),
        _bulk_status_action("banned", "banned"),
    ]

    # Extend default Django UserAdmin fieldsets
    fieldsets = BaseUserAdmin.fieldsets + (
        (
            "Student Info",
            {
                "fields": (
                    "role",
                    "gender",
                    "university",
                    "whatsapp",
                    "status",
                    "completed_rides",
                )
            },
        ),
    )

    # For create user page in admin
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        (
            "Student Info",
            {
                "fields": (
                    "role",
                    "gender",
                    "university",
                    "whatsapp",
                )
            },
        ),
    )


@admin.register(University)
class UniversityAdmin(admin.ModelAdmin):
    list_display = ["name", "city", "latitude", "longitude"]
    search_fields = ["name", "city"]
    ordering = ("name",)
