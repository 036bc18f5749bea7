"""
Receipt ledger - issuing, editing and listing donation receipts.

Issuance runs every check before touching the database, then repeats the
book checks on the row locked with ``select_for_update`` and inserts inside
the same ``transaction.atomic()``. Book edits take the same lock, so a range
can't shrink under a receipt being issued. The
``unique_receipt_number_per_book`` constraint is
what makes a number single-use; losing that race surfaces as
``DuplicateReceiptNumberError`` and the caller is expected to fetch a fresh
number and try again.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import QuerySet

from apps.accounts.capabilities import Capability, ensure_can
from apps.accounts.models import User
from apps.receipts.models import Receipt, ReceiptBook
from .book_allocation import get_book_by_id
from .exceptions import (
    BookClosedError,
    DuplicateReceiptNumberError,
    InvalidAmountError,
    ReceiptNotFoundError,
    ReceiptNumberOutOfRangeError,
    TaskMismatchError,
)

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')

EDITABLE_FIELDS = (
    'receipt_book_id',
    'receipt_number',
    'task_id',
    'giver_name',
    'address',
    'phone_number',
    'amount',
)


def _check_number_and_amount(*, book: ReceiptBook, receipt_number: int, amount: Decimal) -> None:
    """Invariants shared by issuance and edits."""
    if not book.start_number <= receipt_number <= book.end_number:
        raise ReceiptNumberOutOfRangeError(
            f"Receipt number {receipt_number} is outside book {book.book_number} "
            f"range {book.start_number}-{book.end_number}."
        )

    # Amounts are stored to the cent; finer values would round on save
    if amount is None:
        raise InvalidAmountError()
    amount = Decimal(str(amount))
    if amount <= 0 or amount != amount.quantize(CENT):
        raise InvalidAmountError()


def _check_issuable(*, actor: User, book: ReceiptBook, task_id: UUID, receipt_number: int,
                    amount: Decimal) -> None:
    ensure_can(
        actor, Capability.ISSUE_RECEIPT, book,
        message="You can only issue receipts from receipt books assigned to you.",
    )

    if task_id != book.task_id:
        raise TaskMismatchError()

    if book.is_closed:
        raise BookClosedError(f"Receipt book {book.book_number} is closed.")

    _check_number_and_amount(book=book, receipt_number=receipt_number, amount=amount)


def issue_receipt(
    *,
    actor: User,
    book_id: UUID,
    receipt_number: int,
    task_id: UUID,
    giver_name: str,
    address: str,
    amount: Decimal,
    phone_number: str = '',
) -> Receipt:
    """
    Issue a receipt from a receipt book.

    Cash collectors may only issue from books assigned to them; managers and
    admins may issue from any book.

    Checks, in order:
        1. the book exists
        2. the actor may issue against it
        3. the task matches the book's task
        4. the book is not closed
        5. the number lies in the book's range
        6. the amount is positive
        7. the number is unused (enforced by the database on insert)

    Checks 2-5 run again on the locked book row inside the insert
    transaction, so a concurrent reassignment, close or range change either
    completes first and is seen, or waits until the receipt is stored.

    Returns:
        The persisted Receipt

    Raises:
        ReceiptBookNotFoundError: If book doesn't exist
        AuthorizationError: If the actor may not issue from the book
        TaskMismatchError: If task differs from the book's task
        BookClosedError: If the book is closed
        ReceiptNumberOutOfRangeError: If the number is outside the range
        InvalidAmountError: If amount <= 0 or finer than a cent
        DuplicateReceiptNumberError: If the number was already issued
    """
    book = get_book_by_id(book_id=book_id)
    _check_issuable(
        actor=actor, book=book, task_id=task_id,
        receipt_number=receipt_number, amount=amount,
    )

    try:
        with transaction.atomic():
            book = get_book_by_id(book_id=book.id, for_update=True)
            _check_issuable(
                actor=actor, book=book, task_id=task_id,
                receipt_number=receipt_number, amount=amount,
            )

            receipt = Receipt.objects.create(
                receipt_book=book,
                receipt_number=receipt_number,
                task_id=task_id,
                giver_name=giver_name,
                address=address,
                phone_number=phone_number or '',
                amount=amount,
                issued_by=actor,
            )
    except IntegrityError:
        logger.warning(
            "Duplicate receipt number %d in book %s rejected for %s",
            receipt_number, book.book_number, actor.username,
        )
        raise DuplicateReceiptNumberError(
            f"Receipt number {receipt_number} has already been issued "
            f"in book {book.book_number}."
        )

    logger.info(
        "Receipt %d issued from book %s by %s (amount %s)",
        receipt_number, book.book_number, actor.username, amount,
    )
    return receipt


def get_receipt(*, actor: User, receipt_id: UUID) -> Receipt:
    """
    Get a receipt the actor may view.

    Raises:
        ReceiptNotFoundError: If receipt doesn't exist
        AuthorizationError: If the actor may not view it
    """
    try:
        receipt = Receipt.objects.select_related(
            'receipt_book', 'task', 'issued_by'
        ).get(id=receipt_id)
    except (Receipt.DoesNotExist, DjangoValidationError):
        raise ReceiptNotFoundError(f"Receipt with ID {receipt_id} not found")

    ensure_can(actor, Capability.VIEW_RECEIPT, receipt)
    return receipt


def update_receipt(*, actor: User, receipt_id: UUID, **changes) -> Receipt:
    """
    Edit a receipt (managers and admins only).

    The merged state is checked exactly like a new issuance: the target book
    must exist, the task must match it, the number must be in range and the
    amount positive. Moving a receipt into a different, closed book is
    refused; fixing a typo on a receipt in a closed book is not. The target
    book row stays locked from the checks until the save commits.

    Raises:
        AuthorizationError: If actor may not edit receipts
        ReceiptNotFoundError: If receipt doesn't exist
        ReceiptBookNotFoundError: If the target book doesn't exist
        TaskMismatchError, ReceiptNumberOutOfRangeError, InvalidAmountError,
        BookClosedError: If the merged state breaks an invariant
        DuplicateReceiptNumberError: If the target number is taken
    """
    ensure_can(actor, Capability.EDIT_RECEIPT)

    try:
        receipt = Receipt.objects.get(id=receipt_id)
    except (Receipt.DoesNotExist, DjangoValidationError):
        raise ReceiptNotFoundError(f"Receipt with ID {receipt_id} not found")

    original_book_id = receipt.receipt_book_id
    for field in EDITABLE_FIELDS:
        if field in changes:
            setattr(receipt, field, changes[field])

    try:
        with transaction.atomic():
            book = get_book_by_id(book_id=receipt.receipt_book_id, for_update=True)
            if receipt.task_id != book.task_id:
                raise TaskMismatchError()
            if book.id != original_book_id and book.is_closed:
                raise BookClosedError(f"Receipt book {book.book_number} is closed.")

            _check_number_and_amount(book=book, receipt_number=receipt.receipt_number, amount=receipt.amount)

            receipt.save()
    except IntegrityError:
        raise DuplicateReceiptNumberError(
            f"Receipt number {receipt.receipt_number} has already been issued "
            f"in book {book.book_number}."
        )

    logger.info("Receipt %s edited by %s", receipt.id, actor.username)
    return receipt


def list_receipts(
    *,
    actor: User,
    book_id: Optional[UUID] = None,
    task_id: Optional[UUID] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    collector_id: Optional[UUID] = None,
) -> QuerySet:
    """
    List receipts visible to the actor, newest first.

    Cash collectors only see receipts in books currently assigned to them.
    Filtering by a single book orders by receipt number.
    """
    ensure_can(actor, Capability.VIEW_RECEIPT)

    queryset = Receipt.objects.select_related(
        'receipt_book', 'task', 'issued_by'
    )

    if actor.is_cash_collector:
        queryset = queryset.filter(receipt_book__assigned_to=actor)

    if book_id:
        queryset = queryset.filter(receipt_book_id=book_id)
    if task_id:
        queryset = queryset.filter(task_id=task_id)
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)
    if collector_id:
        queryset = queryset.filter(issued_by_id=collector_id)

    if book_id:
        return queryset.order_by('receipt_number')
    return queryset.order_by('-created_at', '-receipt_number', 'id')
