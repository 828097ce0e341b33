# accounts/permissions.py
from rest_framework.permissions import BasePermission


class IsApprovedUser(BasePermission):
    """
    Allows access only to accounts an admin has approved.
    Staff accounts always pass.
    """
    message = "Your account is not approved yet."

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False
        if user.is_staff:
            return True
        return getattr(user, "status", None) == "approved"


class IsDriver(BasePermission):
    """Allows access only to users with role == 'driver'."""
    message = "Only drivers allowed"

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False
        return getattr(user, "role", None) == "driver"
