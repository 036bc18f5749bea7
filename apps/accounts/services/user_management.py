"""
User management service.

Users are created by an admin (or the ``seed_ledger`` command) with a fixed
role. Deleting a user is refused while any ledger record points at them.
"""

import logging
from typing import Optional
from uuid import UUID

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction, IntegrityError
from django.db.models import ProtectedError, QuerySet

from apps.accounts.capabilities import Capability, ensure_can
from apps.accounts.models import UserRole
from apps.core.exceptions import ValidationError

from .exceptions import DuplicateUsernameError, UserInUseError, UserNotFoundError

User = get_user_model()
logger = logging.getLogger(__name__)


def create_user(
    *,
    actor: User,
    username: str,
    password: str,
    role: str,
    display_name: str = ''
) -> User:
    """
    Create a user with the given role.

    Args:
        actor: Admin performing the action
        username: Unique login name
        password: Plain password (hashed by Django)
        role: One of UserRole values
        display_name: Optional human-readable name

    Returns:
        Created User instance

    Raises:
        AuthorizationError: If actor is not an admin
        ValidationError: If role is unknown
        DuplicateUsernameError: If username is taken
    """
    ensure_can(actor, Capability.MANAGE_USERS)

    if role not in UserRole.values:
        raise ValidationError(f"Unknown role: {role!r}")

    if User.objects.filter(username=username).exists():
        raise DuplicateUsernameError()

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=username,
                password=password,
                role=role,
                display_name=display_name,
                is_staff=(role == UserRole.ADMIN),
            )
    except IntegrityError:
        # Username taken between the check and the insert
        raise DuplicateUsernameError()

    logger.info("User %s created with role %s by %s", user.username, role, actor.username)
    return user


def get_user_by_id(*, user_id: UUID, active_only: bool = False) -> User:
    """
    Get a user by ID.

    Raises:
        UserNotFoundError: If user doesn't exist (or is inactive with active_only)
    """
    queryset = User.objects.all()
    if active_only:
        queryset = queryset.filter(is_active=True)
    try:
        return queryset.get(id=user_id)
    except (User.DoesNotExist, DjangoValidationError):
        raise UserNotFoundError(f"User with ID {user_id} not found")


def list_users(*, actor: User, role: Optional[str] = None) -> QuerySet:
    """List users, optionally narrowed to one role."""
    ensure_can(actor, Capability.VIEW_USERS)

    queryset = User.objects.all().order_by('username')
    if role:
        queryset = queryset.filter(role=role)
    return queryset


@transaction.atomic
def delete_user(*, actor: User, user_id: UUID) -> None:
    """
    Delete a user (restrict-on-delete).

    Raises:
        AuthorizationError: If actor is not an admin
        UserNotFoundError: If user doesn't exist
        ValidationError: If actor tries to delete themselves
        UserInUseError: If receipt books, receipts, expenses or reports
            reference the user
    """
    ensure_can(actor, Capability.MANAGE_USERS)

    user = get_user_by_id(user_id=user_id)
    if user.id == actor.id:
        raise ValidationError("You cannot delete your own account.")

    try:
        with transaction.atomic():
            user.delete()
    except ProtectedError:
        raise UserInUseError()

    logger.info("User %s deleted by %s", user.username, actor.username)
