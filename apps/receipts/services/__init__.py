"""Services for receipt books and receipts."""

from .exceptions import (
    ReceiptBookNotFoundError,
    ReceiptNotFoundError,
    InvalidRangeError,
    DuplicateBookNumberError,
    ImmutableRangeError,
    BookInUseError,
    BookClosedError,
    TaskMismatchError,
    ReceiptNumberOutOfRangeError,
    InvalidAmountError,
    DuplicateReceiptNumberError,
    BookExhaustedError,
)
from .book_allocation import (
    get_book_by_id,
    get_book_status,
    create_book,
    assign_book,
    next_available_number,
    close_book,
    update_book,
    delete_book,
    list_books,
)
from .receipt_ledger import (
    issue_receipt,
    get_receipt,
    update_receipt,
    list_receipts,
)

__all__ = [
    # Exceptions
    'ReceiptBookNotFoundError',
    'ReceiptNotFoundError',
    'InvalidRangeError',
    'DuplicateBookNumberError',
    'ImmutableRangeError',
    'BookInUseError',
    'BookClosedError',
    'TaskMismatchError',
    'ReceiptNumberOutOfRangeError',
    'InvalidAmountError',
    'DuplicateReceiptNumberError',
    'BookExhaustedError',
    # Book allocation
    'get_book_by_id',
    'get_book_status',
    'create_book',
    'assign_book',
    'next_available_number',
    'close_book',
    'update_book',
    'delete_book',
    'list_books',
    # Receipt ledger
    'issue_receipt',
    'get_receipt',
    'update_receipt',
    'list_receipts',
]
