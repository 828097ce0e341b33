"""
Account approval workflow.

Every registration starts as 'pending' and waits for a staff member:

    pending  -> approved | rejected | banned
    rejected -> approved | banned
    approved -> banned
    banned   -> (terminal)
"""

import logging

from django.db import transaction
from django.utils import timezone

from accounts.models import User

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS = {
    'pending': {'approved', 'rejected', 'banned'},
    'rejected': {'approved', 'banned'},
    'approved': {'banned'},
    'banned': set(),
}


class InvalidStatusTransition(Exception):
    """Raised when an account status change is not allowed."""
    pass


class AccountNotApprovedError(Exception):
    """Raised at login for accounts that are not approved (pending/rejected/banned)."""

    def __init__(self, status: str):
        self.status = status
        if status == 'banned':
            message = "Your account has been banned"
        elif status == 'rejected':
            message = "Your registration was rejected"
        else:
            message = "Your account is pending approval"
        super().__init__(message)


def ensure_can_login(user: User) -> None:
    """Raise AccountNotApprovedError unless the account is approved (staff always pass)."""
    if user.is_staff:
        return
    if user.status != 'approved':
        raise AccountNotApprovedError(user.status)


@transaction.atomic
def change_account_status(user: User, new_status: str, actor=None) -> User:
    """
    Move a user through the approval state machine.

    Rejecting or banning a driver also takes them off the live map.

    Raises:
        InvalidStatusTransition: If new_status is unknown or not reachable
    """
    current = user.status
    if new_status not in ALLOWED_TRANSITIONS:
        raise InvalidStatusTransition(f"Unknown status: {new_status}")
    if new_status not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidStatusTransition(f"Cannot change status from '{current}' to '{new_status}'")

    user.status = new_status
    user.status_changed_at = timezone.now()
    user.save(update_fields=['status', 'status_changed_at'])

    if new_status in ('rejected', 'banned') and user.role == 'driver':
        from drivers.services import take_driver_offline
        profile = getattr(user, 'driver_profile', None)
        if profile is not None:
            take_driver_offline(profile)

    logger.info(
        "Account %s status %s -> %s (by %s)",
        user.id, current, new_status, getattr(actor, 'username', 'system')
    )
    return user


def pending_users():
    """Registrations waiting for review, oldest first."""
    return (
        User.objects.filter(status='pending', is_staff=False)
        .select_related('university')
        .order_by('date_joined')
    )
