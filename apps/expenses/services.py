"""
Expense ledger services.

Expenses carry no task; they reduce the organization-wide balance only.
The ledger is append-only: a recorded expense is never edited or deleted.
"""

import logging
from datetime import date
from decimal import Decimal
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from apps.accounts.capabilities import Capability, ensure_can
from .models import Expense, ExpenseType
from .exceptions import (
    DuplicateExpenseTypeError,
    ExpenseNotFoundError,
    ExpenseTypeInUseError,
    ExpenseTypeNotFoundError,
    InvalidExpenseAmountError,
)

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def _get_expense_type(expense_type_id):
    try:
        return ExpenseType.objects.get(id=expense_type_id)
    except (ExpenseType.DoesNotExist, DjangoValidationError):
        raise ExpenseTypeNotFoundError(f"Expense type with ID {expense_type_id} not found")


def _check_amount(amount):
    # Amounts are stored to the cent; finer values would round on save
    if amount is None:
        raise InvalidExpenseAmountError()
    amount = Decimal(str(amount))
    if amount <= 0 or amount != amount.quantize(CENT):
        raise InvalidExpenseAmountError()


def create_expense_type(*, actor, name: str, description: str = '') -> ExpenseType:
    """
    Create an expense category.

    Raises:
        AuthorizationError: If actor is not manager/admin
        DuplicateExpenseTypeError: If the name is taken
    """
    ensure_can(actor, Capability.MANAGE_EXPENSES)

    try:
        with transaction.atomic():
            expense_type = ExpenseType.objects.create(name=name, description=description)
    except IntegrityError:
        raise DuplicateExpenseTypeError()

    logger.info("Expense type %r created by %s", expense_type.name, actor.username)
    return expense_type


def update_expense_type(*, actor, expense_type_id: UUID, **fields) -> ExpenseType:
    ensure_can(actor, Capability.MANAGE_EXPENSES)

    expense_type = _get_expense_type(expense_type_id)
    for field in ('name', 'description'):
        if field in fields:
            setattr(expense_type, field, fields[field])

    try:
        with transaction.atomic():
            expense_type.save()
    except IntegrityError:
        raise DuplicateExpenseTypeError()
    return expense_type


def delete_expense_type(*, actor, expense_type_id: UUID) -> None:
    """
    Delete an expense type with no expenses.

    Raises:
        ExpenseTypeInUseError: If expenses reference the type
    """
    ensure_can(actor, Capability.MANAGE_EXPENSES)

    expense_type = _get_expense_type(expense_type_id)
    try:
        with transaction.atomic():
            expense_type.delete()
    except ProtectedError:
        raise ExpenseTypeInUseError()


def record_expense(
    *,
    actor,
    expense_type_id: UUID,
    amount: Decimal,
    date: date,
    description: str = '',
) -> Expense:
    """
    Record an outgoing payment.

    Raises:
        AuthorizationError: If actor is not manager/admin
        ExpenseTypeNotFoundError: If the expense type doesn't exist
        InvalidExpenseAmountError: If amount <= 0 or finer than a cent
    """
    ensure_can(actor, Capability.MANAGE_EXPENSES)

    expense_type = _get_expense_type(expense_type_id)
    _check_amount(amount)

    expense = Expense.objects.create(
        expense_type=expense_type,
        amount=amount,
        date=date,
        description=description,
        recorded_by=actor,
    )

    logger.info(
        "Expense %s (%s) on %s recorded by %s",
        amount, expense_type.name, date, actor.username,
    )
    return expense


def get_expense(*, actor, expense_id: UUID) -> Expense:
    """
    Get a recorded expense.

    Raises:
        AuthorizationError: If actor is not manager/admin
        ExpenseNotFoundError: If the expense doesn't exist
    """
    ensure_can(actor, Capability.MANAGE_EXPENSES)

    try:
        return Expense.objects.select_related('expense_type', 'recorded_by').get(id=expense_id)
    except (Expense.DoesNotExist, DjangoValidationError):
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")


def list_expenses(*, actor, expense_type_id=None, date_from=None, date_to=None):
    """List expenses, newest first, filterable by type and date range."""
    ensure_can(actor, Capability.MANAGE_EXPENSES)

    queryset = Expense.objects.select_related('expense_type', 'recorded_by')
    if expense_type_id:
        queryset = queryset.filter(expense_type_id=expense_type_id)
    if date_from:
        queryset = queryset.filter(date__gte=date_from)
    if date_to:
        queryset = queryset.filter(date__lte=date_to)
    return queryset
