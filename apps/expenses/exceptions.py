"""Domain exceptions for expenses app."""
from apps.core.exceptions import NotFoundError, ValidationError


class ExpenseTypeNotFoundError(NotFoundError):
    """Expense type does not exist."""
    default_detail = 'Expense type not found.'
    default_code = 'expense_type_not_found'


class ExpenseNotFoundError(NotFoundError):
    """Expense does not exist."""
    default_detail = 'Expense not found.'
    default_code = 'expense_not_found'


class DuplicateExpenseTypeError(ValidationError):
    """Another expense type already uses this name."""
    default_detail = 'An expense type with this name already exists.'
    default_code = 'duplicate_expense_type'


class ExpenseTypeInUseError(ValidationError):
    """Expense type has recorded expenses."""
    default_detail = 'Expense type has recorded expenses and cannot be deleted.'
    default_code = 'expense_type_in_use'


class InvalidExpenseAmountError(ValidationError):
    """Amount is not positive or has fractions of a cent."""
    default_detail = 'Amount must be greater than zero with at most two decimal places.'
    default_code = 'invalid_amount'
