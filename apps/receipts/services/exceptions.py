"""
Domain exceptions for receipts app.

Every class here derives from the shared taxonomy in ``apps.core.exceptions``
so the API reports a stable ``kind`` alongside the specific ``code``.
"""
from apps.core.exceptions import (
    DuplicateError,
    NotFoundError,
    RangeExhaustedError,
    ValidationError,
)


class ReceiptBookNotFoundError(NotFoundError):
    """Receipt book does not exist."""
    default_detail = 'Receipt book not found.'
    default_code = 'receipt_book_not_found'


class ReceiptNotFoundError(NotFoundError):
    """Receipt does not exist."""
    default_detail = 'Receipt not found.'
    default_code = 'receipt_not_found'


class InvalidRangeError(ValidationError):
    """Start number is greater than end number, or not positive."""
    default_detail = 'Start number must be positive and not greater than end number.'
    default_code = 'invalid_range'


class DuplicateBookNumberError(ValidationError):
    """Another receipt book already uses this book number."""
    default_detail = 'A receipt book with this number already exists.'
    default_code = 'duplicate_book_number'


class ImmutableRangeError(ValidationError):
    """Range or task changed on a book that already has receipts."""
    default_detail = 'Range and task cannot change once receipts have been issued.'
    default_code = 'immutable_range'


class BookInUseError(ValidationError):
    """Receipt book has receipts and cannot be deleted."""
    default_detail = 'Receipt book has issued receipts and cannot be deleted.'
    default_code = 'book_in_use'


class BookClosedError(ValidationError):
    """Receipt book is closed for issuance."""
    default_detail = 'Receipt book is closed.'
    default_code = 'book_closed'


class TaskMismatchError(ValidationError):
    """Receipt task differs from its book's task."""
    default_detail = "Receipt task must match the receipt book's task."
    default_code = 'task_mismatch'


class ReceiptNumberOutOfRangeError(ValidationError):
    """Receipt number falls outside the book's range."""
    default_detail = "Receipt number is outside the receipt book's range."
    default_code = 'receipt_number_out_of_range'


class InvalidAmountError(ValidationError):
    """Amount is not positive or has fractions of a cent."""
    default_detail = 'Amount must be greater than zero with at most two decimal places.'
    default_code = 'invalid_amount'


class DuplicateReceiptNumberError(DuplicateError):
    """Receipt number already issued in this book."""
    default_detail = 'This receipt number has already been issued in this book.'
    default_code = 'duplicate_receipt_number'


class BookExhaustedError(RangeExhaustedError):
    """All numbers of the book have been issued."""
    default_code = 'book_exhausted'
