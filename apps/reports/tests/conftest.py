import pytest
from decimal import Decimal
from datetime import date
from apps.expenses.models import Expense, ExpenseType
from apps.receipts.models import Receipt, ReceiptBook


@pytest.fixture
def make_receipt(collector):
    """Factory for receipts that skips issuance checks."""
    def _make(book, number, amount):
        return Receipt.objects.create(
            receipt_book=book,
            receipt_number=number,
            task=book.task,
            giver_name=f'Donor {number}',
            address='1 High Street',
            amount=Decimal(amount),
            issued_by=collector,
        )
    return _make


@pytest.fixture
def zakat_book(zakat_task, manager_user):
    return ReceiptBook.objects.create(
        book_number='Z-001',
        task=zakat_task,
        start_number=1,
        end_number=100,
        created_by=manager_user,
    )


@pytest.fixture
def make_expense(manager_user):
    expense_type = ExpenseType.objects.create(name='Utilities')

    def _make(amount, on=date(2026, 3, 1)):
        return Expense.objects.create(
            expense_type=expense_type,
            amount=Decimal(amount),
            date=on,
            recorded_by=manager_user,
        )
    return _make


@pytest.fixture
def ledger_1500_400(book, unassigned_book, zakat_book, make_receipt, make_expense):
    """Income 1500 across two tasks and three books, expenses 400."""
    make_receipt(book, 1, '500.00')
    make_receipt(book, 2, '250.00')
    make_receipt(unassigned_book, 101, '250.00')
    make_receipt(zakat_book, 1, '500.00')
    make_expense('300.00')
    make_expense('100.00')
