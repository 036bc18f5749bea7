"""
Receipt book allocation.

A receipt book reserves the contiguous range ``[start_number, end_number]``
for one task and is assigned to at most one collector at a time.

``next_available_number`` is advisory: it never reserves anything. The unique
constraint on ``(receipt_book, receipt_number)`` decides who wins when two
collectors race for the same number (see ``receipt_ledger.issue_receipt``).
"""

import logging
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import Count, F, Max
from django.utils import timezone

from apps.accounts.capabilities import Capability, ensure_can
from apps.accounts.models import User
from apps.accounts.services import UserNotFoundError
from apps.receipts.models import ReceiptBook
from apps.tasks.services import get_task_by_id
from .exceptions import (
    BookClosedError,
    BookExhaustedError,
    BookInUseError,
    DuplicateBookNumberError,
    ImmutableRangeError,
    InvalidRangeError,
    ReceiptBookNotFoundError,
)

logger = logging.getLogger(__name__)


def _validate_range(start_number: int, end_number: int) -> None:
    if start_number < 1 or end_number < 1 or start_number > end_number:
        raise InvalidRangeError(
            f"Invalid range {start_number}-{end_number}: numbers must be positive "
            f"and start must not exceed end."
        )


def _get_active_user(user_id: UUID) -> User:
    try:
        return User.objects.get(id=user_id, is_active=True)
    except (User.DoesNotExist, DjangoValidationError):
        raise UserNotFoundError(f"Active user with ID {user_id} not found")


def get_book_by_id(*, book_id: UUID, for_update: bool = False) -> ReceiptBook:
    """
    Get a receipt book by ID.

    Raises:
        ReceiptBookNotFoundError: If book doesn't exist
    """
    if for_update:
        queryset = ReceiptBook.objects.select_for_update()
    else:
        queryset = ReceiptBook.objects.select_related('task', 'assigned_to')
    try:
        return queryset.get(id=book_id)
    except (ReceiptBook.DoesNotExist, DjangoValidationError):
        raise ReceiptBookNotFoundError(f"Receipt book with ID {book_id} not found")


def get_book_status(book: ReceiptBook) -> str:
    """Return the derived status: ``active``, ``exhausted`` or ``closed``."""
    return book.status.value


def create_book(
    *,
    actor: User,
    book_number: str,
    task_id: UUID,
    start_number: int,
    end_number: int,
    assigned_to_id: Optional[UUID] = None,
) -> ReceiptBook:
    """
    Create a receipt book covering ``[start_number, end_number]``.

    Args:
        actor: Manager or admin creating the book
        book_number: Human label printed on the book, unique
        task_id: Task the book collects for
        start_number: First receipt number
        end_number: Last receipt number (inclusive)
        assigned_to_id: Optional collector to assign straight away

    Returns:
        The new, active ReceiptBook

    Raises:
        AuthorizationError: If actor is not manager/admin
        InvalidRangeError: If the range is empty or not positive
        DuplicateBookNumberError: If book_number is taken
        TaskNotFoundError: If task doesn't exist
        UserNotFoundError: If the initial assignee doesn't exist
    """
    ensure_can(actor, Capability.MANAGE_BOOKS)
    _validate_range(start_number, end_number)

    if ReceiptBook.objects.filter(book_number=book_number).exists():
        raise DuplicateBookNumberError()

    task = get_task_by_id(task_id=task_id)
    assignee = _get_active_user(assigned_to_id) if assigned_to_id else None

    try:
        with transaction.atomic():
            book = ReceiptBook.objects.create(
                book_number=book_number,
                task=task,
                start_number=start_number,
                end_number=end_number,
                assigned_to=assignee,
                created_by=actor,
            )
    except IntegrityError:
        # Lost the race against a concurrent create with the same label
        raise DuplicateBookNumberError()

    logger.info(
        "Receipt book %s (%d-%d, task %r) created by %s",
        book.book_number, start_number, end_number, task.name, actor.username,
    )
    return book


@transaction.atomic
def assign_book(*, actor: User, book_id: UUID, user_id: UUID) -> ReceiptBook:
    """
    Assign a receipt book to a user, replacing any previous assignee.

    Re-assigning to the current assignee is a no-op.

    Raises:
        AuthorizationError: If actor is not manager/admin
        ReceiptBookNotFoundError: If book doesn't exist
        UserNotFoundError: If the user doesn't exist or is inactive
        BookClosedError: If the book is closed
    """
    ensure_can(actor, Capability.MANAGE_BOOKS)

    book = get_book_by_id(book_id=book_id, for_update=True)
    assignee = _get_active_user(user_id)

    if book.is_closed:
        raise BookClosedError("A closed receipt book cannot be assigned.")

    if book.assigned_to_id == assignee.id:
        return book

    previous = book.assigned_to
    book.assigned_to = assignee
    book.save(update_fields=['assigned_to', 'updated_at'])

    logger.info(
        "Receipt book %s assigned to %s (was %s) by %s",
        book.book_number,
        assignee.username,
        previous.username if previous else 'unassigned',
        actor.username,
    )
    return book


def next_available_number(*, book_id: UUID, actor: Optional[User] = None) -> int:
    """
    Suggest the next receipt number for a book.

    Returns the highest issued number plus one, or the book's start number
    when nothing has been issued. Nothing is reserved; two callers may get the
    same answer.

    Raises:
        ReceiptBookNotFoundError: If book doesn't exist
        AuthorizationError: If actor is given and may not view the book
        BookExhaustedError: If the suggestion would fall past the end number
    """
    book = get_book_by_id(book_id=book_id)
    if actor is not None:
        ensure_can(actor, Capability.VIEW_BOOK, book)

    highest = book.receipts.aggregate(highest=Max('receipt_number'))['highest']
    candidate = book.start_number if highest is None else highest + 1

    if candidate > book.end_number:
        raise BookExhaustedError(
            f"All receipt numbers {book.start_number}-{book.end_number} "
            f"in book {book.book_number} have been issued."
        )
    return candidate


@transaction.atomic
def close_book(*, actor: User, book_id: UUID) -> ReceiptBook:
    """
    Close a receipt book for further issuance. Closing twice is a no-op.

    Raises:
        AuthorizationError: If actor is not manager/admin
        ReceiptBookNotFoundError: If book doesn't exist
    """
    ensure_can(actor, Capability.MANAGE_BOOKS)

    book = get_book_by_id(book_id=book_id, for_update=True)
    if book.is_closed:
        return book

    book.closed_at = timezone.now()
    book.closed_by = actor
    book.save(update_fields=['closed_at', 'closed_by', 'updated_at'])

    logger.info("Receipt book %s closed by %s", book.book_number, actor.username)
    return book


def update_book(*, actor: User, book_id: UUID, **changes) -> ReceiptBook:
    """
    Update a receipt book.

    ``book_number`` may always change. ``task_id``, ``start_number`` and
    ``end_number`` may only change while no receipt has been issued.

    Raises:
        AuthorizationError: If actor is not manager/admin
        ReceiptBookNotFoundError: If book doesn't exist
        ImmutableRangeError: If range/task change after issuance
        InvalidRangeError: If the resulting range is invalid
        DuplicateBookNumberError: If the new book_number is taken
        TaskNotFoundError: If the new task doesn't exist
    """
    ensure_can(actor, Capability.MANAGE_BOOKS)

    try:
        with transaction.atomic():
            book = get_book_by_id(book_id=book_id, for_update=True)

            range_fields = {
                field: changes[field]
                for field in ('task_id', 'start_number', 'end_number')
                if field in changes
            }
            changed = {
                field: value for field, value in range_fields.items()
                if getattr(book, field) != value
            }
            if changed and book.receipts.exists():
                raise ImmutableRangeError()

            if 'task_id' in changed:
                book.task = get_task_by_id(task_id=changed['task_id'])
            book.start_number = range_fields.get('start_number', book.start_number)
            book.end_number = range_fields.get('end_number', book.end_number)
            _validate_range(book.start_number, book.end_number)

            if 'book_number' in changes:
                book.book_number = changes['book_number']

            book.save()
    except IntegrityError:
        raise DuplicateBookNumberError()

    return book


def delete_book(*, actor: User, book_id: UUID) -> None:
    """
    Delete a receipt book with no receipts.

    Raises:
        AuthorizationError: If actor is not manager/admin
        ReceiptBookNotFoundError: If book doesn't exist
        BookInUseError: If any receipt was issued from the book
    """
    ensure_can(actor, Capability.MANAGE_BOOKS)

    with transaction.atomic():
        book = get_book_by_id(book_id=book_id, for_update=True)
        if book.receipts.exists():
            raise BookInUseError()
        book.delete()

    logger.info("Receipt book %s deleted by %s", book.book_number, actor.username)


def list_books(*, actor: User, task_id: Optional[UUID] = None, assigned_to_id: Optional[UUID] = None,
               status: Optional[str] = None):
    """
    List receipt books visible to the actor.

    Collectors only see books assigned to them. Each book is annotated with
    ``receipt_count`` so the derived status needs no extra query.
    """
    ensure_can(actor, Capability.VIEW_BOOK)

    queryset = ReceiptBook.objects.select_related(
        'task', 'assigned_to', 'created_by', 'closed_by'
    ).annotate(receipt_count=Count('receipts'))

    if actor.is_cash_collector:
        queryset = queryset.filter(assigned_to=actor)
    elif assigned_to_id:
        queryset = queryset.filter(assigned_to_id=assigned_to_id)

    if task_id:
        queryset = queryset.filter(task_id=task_id)

    if status == 'closed':
        queryset = queryset.filter(closed_at__isnull=False)
    elif status == 'active':
        queryset = queryset.filter(closed_at__isnull=True).exclude(
            receipt_count__gte=F('end_number') - F('start_number') + 1
        )
    elif status == 'exhausted':
        queryset = queryset.filter(
            closed_at__isnull=True, receipt_count__gte=F('end_number') - F('start_number') + 1
        )

    return queryset
