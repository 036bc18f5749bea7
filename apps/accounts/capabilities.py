"""
Role capabilities.

One function answers "may this actor perform this action on this resource";
views (through ``HasRoleCapability``) and services (through ``ensure_can``)
both ask it, so the rules live in exactly one place.

Resource-scoped actions (``VIEW_BOOK``, ``ISSUE_RECEIPT``, ``VIEW_RECEIPT``)
are granted to cash collectors at role level when no resource is given. List
endpoints rely on that and narrow their querysets instead; detail and write
paths always pass the resource.

Example:
    from apps.accounts.capabilities import Capability, can, ensure_can

    if can(request.user, Capability.PUBLISH_REPORT):
        ...

    ensure_can(actor, Capability.ISSUE_RECEIPT, book)  # raises AuthorizationError
"""
from enum import Enum

from apps.core.exceptions import AuthorizationError
from .models import UserRole


class Capability(str, Enum):
    MANAGE_USERS = 'manage_users'
    VIEW_USERS = 'view_users'
    MANAGE_TASKS = 'manage_tasks'
    VIEW_TASKS = 'view_tasks'
    MANAGE_BOOKS = 'manage_books'
    VIEW_BOOK = 'view_book'
    ISSUE_RECEIPT = 'issue_receipt'
    VIEW_RECEIPT = 'view_receipt'
    EDIT_RECEIPT = 'edit_receipt'
    MANAGE_EXPENSES = 'manage_expenses'
    VIEW_FINANCIALS = 'view_financials'
    PUBLISH_REPORT = 'publish_report'


ROLE_CAPABILITIES = {
    UserRole.ADMIN: frozenset(Capability),
    UserRole.MANAGER: frozenset(Capability) - {Capability.MANAGE_USERS},
    UserRole.CASH_COLLECTOR: frozenset({
        Capability.VIEW_TASKS,
        Capability.VIEW_BOOK,
        Capability.ISSUE_RECEIPT,
        Capability.VIEW_RECEIPT,
    }),
}

# Capabilities a cash collector holds only over their own books
OWNERSHIP_SCOPED = frozenset({
    Capability.VIEW_BOOK,
    Capability.ISSUE_RECEIPT,
    Capability.VIEW_RECEIPT,
})


def _owns(actor, resource):
    """True if the resource belongs to one of the actor's assigned books."""
    # ReceiptBook
    if hasattr(resource, 'assigned_to_id') and hasattr(resource, 'start_number'):
        return resource.assigned_to_id == actor.id

    # Receipt: visible through its book only
    book = getattr(resource, 'receipt_book', None)
    if book is not None:
        return book.assigned_to_id == actor.id

    return False


def can(actor, capability, resource=None):
    """
    Decide whether ``actor`` may exercise ``capability``.

    Args:
        actor: The acting User (anonymous or inactive users are always denied).
        capability (Capability): The action being attempted.
        resource: Optional object the action targets (ReceiptBook or Receipt).

    Returns:
        bool: True if allowed.
    """
    if actor is None or not getattr(actor, 'is_authenticated', False):
        return False
    if not actor.is_active:
        return False

    granted = ROLE_CAPABILITIES.get(actor.role, frozenset())
    if capability not in granted:
        return False

    if actor.role == UserRole.CASH_COLLECTOR and capability in OWNERSHIP_SCOPED:
        if resource is None:
            return True
        return _owns(actor, resource)

    return True


def ensure_can(actor, capability, resource=None, message=None):
    """Raise AuthorizationError unless ``can()`` allows the action."""
    if not can(actor, capability, resource):
        raise AuthorizationError(
            message or f"Your role is not allowed to {capability.value.replace('_', ' ')}."
        )
