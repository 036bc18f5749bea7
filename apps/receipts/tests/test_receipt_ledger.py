"""
Service tests for the receipt ledger.

Tests cover:
- Issuance checks and their order
- The 1..5 book scenario end to end
- Edits re-validating every receipt rule
- Role-scoped listing
- Concurrent issuance of the same number
"""

import pytest
import threading
from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

from django.db import connection
from django.test import TransactionTestCase
from django.utils import timezone

from apps.accounts.models import User, UserRole
from apps.core.exceptions import AuthorizationError, DuplicateError, RangeExhaustedError
from apps.receipts.models import Receipt, ReceiptBook
from apps.receipts.services import (
    assign_book,
    close_book,
    get_receipt,
    issue_receipt,
    list_receipts,
    next_available_number,
    receipt_ledger,
    update_book,
    update_receipt,
)
from apps.receipts.services.exceptions import (
    BookClosedError,
    DuplicateReceiptNumberError,
    ImmutableRangeError,
    InvalidAmountError,
    ReceiptBookNotFoundError,
    ReceiptNotFoundError,
    ReceiptNumberOutOfRangeError,
    TaskMismatchError,
)
from apps.tasks.models import Task


def _issue(actor, book, number, amount='100.00', task_id=None):
    return issue_receipt(
        actor=actor,
        book_id=book.id,
        receipt_number=number,
        task_id=task_id or book.task_id,
        giver_name=f'Donor {number}',
        address='1 High Street',
        amount=Decimal(amount),
    )


# =============================================================================
# issue_receipt Tests
# =============================================================================

@pytest.mark.django_db
class TestIssueReceipt:

    def test_collector_issues_from_own_book(self, collector, book):
        receipt = _issue(collector, book, 1, amount='250.50')

        assert receipt.id is not None
        assert receipt.created_at is not None
        assert receipt.issued_by == collector
        assert receipt.amount == Decimal('250.50')
        assert receipt.task_id == book.task_id

    def test_collector_cannot_issue_from_other_book(self, other_collector, book):
        with pytest.raises(AuthorizationError):
            _issue(other_collector, book, 1)
        assert not Receipt.objects.exists()

    def test_collector_cannot_issue_from_unassigned_book(self, collector, unassigned_book):
        with pytest.raises(AuthorizationError):
            _issue(collector, unassigned_book, 101)

    def test_manager_issues_from_any_book(self, manager_user, unassigned_book):
        receipt = _issue(manager_user, unassigned_book, 150)

        assert receipt.receipt_number == 150

    def test_missing_book(self, manager_user, construction_task):
        with pytest.raises(ReceiptBookNotFoundError):
            issue_receipt(
                actor=manager_user,
                book_id=uuid4(),
                receipt_number=1,
                task_id=construction_task.id,
                giver_name='Donor',
                address='Street',
                amount=Decimal('1.00'),
            )

    def test_task_mismatch(self, collector, book, zakat_task):
        with pytest.raises(TaskMismatchError):
            _issue(collector, book, 1, task_id=zakat_task.id)

    def test_closed_book(self, manager_user, collector, book):
        close_book(actor=manager_user, book_id=book.id)

        with pytest.raises(BookClosedError):
            _issue(collector, book, 1)

    @pytest.mark.parametrize('number', [0, 6, 1000])
    def test_number_out_of_range(self, collector, book, number):
        with pytest.raises(ReceiptNumberOutOfRangeError) as exc_info:
            _issue(collector, book, number)
        assert exc_info.value.kind == 'validation_error'
        assert exc_info.value.get_codes() == 'receipt_number_out_of_range'

    @pytest.mark.parametrize('amount', ['0.00', '-5.00'])
    def test_non_positive_amount(self, collector, book, amount):
        with pytest.raises(InvalidAmountError):
            _issue(collector, book, 1, amount=amount)
        assert not Receipt.objects.exists()

    def test_authorization_checked_before_range(self, other_collector, book):
        """An unauthorized actor learns nothing about the range."""
        with pytest.raises(AuthorizationError):
            _issue(other_collector, book, 99)

    def test_duplicate_number(self, collector, book):
        _issue(collector, book, 1)

        with pytest.raises(DuplicateReceiptNumberError) as exc_info:
            _issue(collector, book, 1)
        assert exc_info.value.kind == 'duplicate'
        assert Receipt.objects.filter(receipt_book=book, receipt_number=1).count() == 1

    def test_same_number_in_different_books(self, manager_user, book, construction_task):
        other_book = ReceiptBook.objects.create(
            book_number='B-009',
            task=construction_task,
            start_number=1,
            end_number=5,
            created_by=manager_user,
        )
        _issue(manager_user, book, 1)
        _issue(manager_user, other_book, 1)

        assert Receipt.objects.filter(receipt_number=1).count() == 2

    @pytest.mark.parametrize('amount', ['0.004', '12.345'])
    def test_sub_cent_amount(self, collector, book, amount):
        with pytest.raises(InvalidAmountError):
            _issue(collector, book, 1, amount=amount)
        assert not Receipt.objects.exists()

    def test_range_shrunk_after_validation(self, monkeypatch, manager_user, collector, book):
        """A range change landing between the checks and the insert is honoured."""
        fetch = receipt_ledger.get_book_by_id

        def fetch_then_shrink(*, book_id, for_update=False):
            fetched = fetch(book_id=book_id, for_update=for_update)
            if not for_update:
                update_book(actor=manager_user, book_id=book_id, start_number=1, end_number=2)
            return fetched

        monkeypatch.setattr(receipt_ledger, 'get_book_by_id', fetch_then_shrink)

        with pytest.raises(ReceiptNumberOutOfRangeError):
            _issue(collector, book, 5)

        assert not Receipt.objects.exists()
        book.refresh_from_db()
        assert (book.start_number, book.end_number) == (1, 2)

    def test_reassigned_after_validation(self, monkeypatch, manager_user, collector, other_collector, book):
        fetch = receipt_ledger.get_book_by_id

        def fetch_then_reassign(*, book_id, for_update=False):
            fetched = fetch(book_id=book_id, for_update=for_update)
            if not for_update:
                assign_book(actor=manager_user, book_id=book_id, user_id=other_collector.id)
            return fetched

        monkeypatch.setattr(receipt_ledger, 'get_book_by_id', fetch_then_reassign)

        with pytest.raises(AuthorizationError):
            _issue(collector, book, 1)
        assert not Receipt.objects.exists()

    def test_range_fixed_once_issued(self, manager_user, collector, book):
        _issue(collector, book, 5)

        with pytest.raises(ImmutableRangeError):
            update_book(actor=manager_user, book_id=book.id, end_number=2)


# =============================================================================
# Scenario: book 1..5 for Construction
# =============================================================================

@pytest.mark.django_db
class TestBookScenario:

    def test_full_book_lifecycle(self, collector, book):
        for number in (1, 2, 3):
            _issue(collector, book, number)
        assert next_available_number(book_id=book.id) == 4

        with pytest.raises(DuplicateError):
            _issue(collector, book, 3)

        _issue(collector, book, 4)
        _issue(collector, book, 5)

        with pytest.raises(RangeExhaustedError):
            next_available_number(book_id=book.id)

        numbers = list(
            Receipt.objects.filter(receipt_book=book)
            .order_by('receipt_number')
            .values_list('receipt_number', flat=True)
        )
        assert numbers == [1, 2, 3, 4, 5]
        assert all(book.start_number <= n <= book.end_number for n in numbers)


# =============================================================================
# update_receipt Tests
# =============================================================================

@pytest.mark.django_db
class TestUpdateReceipt:

    def test_manager_edits_details(self, manager_user, collector, book):
        receipt = _issue(collector, book, 1)

        updated = update_receipt(
            actor=manager_user,
            receipt_id=receipt.id,
            giver_name='Corrected Name',
            amount=Decimal('120.00'),
        )

        assert updated.giver_name == 'Corrected Name'
        assert updated.amount == Decimal('120.00')

    def test_collector_cannot_edit(self, collector, book):
        receipt = _issue(collector, book, 1)

        with pytest.raises(AuthorizationError):
            update_receipt(actor=collector, receipt_id=receipt.id, giver_name='X')

    def test_edit_number_out_of_range(self, manager_user, collector, book):
        receipt = _issue(collector, book, 1)

        with pytest.raises(ReceiptNumberOutOfRangeError):
            update_receipt(actor=manager_user, receipt_id=receipt.id, receipt_number=9)

    def test_edit_to_taken_number(self, manager_user, collector, book):
        _issue(collector, book, 1)
        second = _issue(collector, book, 2)

        with pytest.raises(DuplicateReceiptNumberError):
            update_receipt(actor=manager_user, receipt_id=second.id, receipt_number=1)

        second.refresh_from_db()
        assert second.receipt_number == 2

    def test_edit_amount_zero(self, manager_user, collector, book):
        receipt = _issue(collector, book, 1)

        with pytest.raises(InvalidAmountError):
            update_receipt(actor=manager_user, receipt_id=receipt.id, amount=Decimal('0'))

    def test_edit_amount_sub_cent(self, manager_user, collector, book):
        receipt = _issue(collector, book, 1)

        with pytest.raises(InvalidAmountError):
            update_receipt(actor=manager_user, receipt_id=receipt.id, amount=Decimal('0.001'))

        receipt.refresh_from_db()
        assert receipt.amount == Decimal('100.00')

    def test_edit_checks_locked_book(self, monkeypatch, manager_user, collector, book):
        receipt = _issue(collector, book, 1)
        fetch = receipt_ledger.get_book_by_id
        locked = []

        def recording_fetch(*, book_id, for_update=False):
            locked.append(for_update)
            return fetch(book_id=book_id, for_update=for_update)

        monkeypatch.setattr(receipt_ledger, 'get_book_by_id', recording_fetch)
        update_receipt(actor=manager_user, receipt_id=receipt.id, receipt_number=2)

        assert locked == [True]

    def test_edit_task_mismatch(self, manager_user, collector, book, zakat_task):
        receipt = _issue(collector, book, 1)

        with pytest.raises(TaskMismatchError):
            update_receipt(actor=manager_user, receipt_id=receipt.id, task_id=zakat_task.id)

    def test_move_to_other_book(self, manager_user, collector, book, unassigned_book):
        receipt = _issue(collector, book, 1)

        moved = update_receipt(
            actor=manager_user,
            receipt_id=receipt.id,
            receipt_book_id=unassigned_book.id,
            receipt_number=101,
        )

        assert moved.receipt_book_id == unassigned_book.id
        assert moved.receipt_number == 101

    def test_move_into_closed_book_refused(self, manager_user, collector, book, unassigned_book):
        receipt = _issue(collector, book, 1)
        close_book(actor=manager_user, book_id=unassigned_book.id)

        with pytest.raises(BookClosedError):
            update_receipt(
                actor=manager_user,
                receipt_id=receipt.id,
                receipt_book_id=unassigned_book.id,
                receipt_number=101,
            )

    def test_edit_in_closed_book_allowed(self, manager_user, collector, book):
        receipt = _issue(collector, book, 1)
        close_book(actor=manager_user, book_id=book.id)

        updated = update_receipt(actor=manager_user, receipt_id=receipt.id, address='2 Low Road')

        assert updated.address == '2 Low Road'

    def test_edit_missing_receipt(self, manager_user):
        with pytest.raises(ReceiptNotFoundError):
            update_receipt(actor=manager_user, receipt_id=uuid4(), giver_name='X')


# =============================================================================
# get_receipt / list_receipts Tests
# =============================================================================

@pytest.mark.django_db
class TestReadReceipts:

    def test_get_own_receipt(self, collector, book):
        receipt = _issue(collector, book, 1)

        assert get_receipt(actor=collector, receipt_id=receipt.id) == receipt

    def test_get_other_receipt_denied(self, collector, other_collector, book):
        receipt = _issue(collector, book, 1)

        with pytest.raises(AuthorizationError):
            get_receipt(actor=other_collector, receipt_id=receipt.id)

    def test_collector_list_scoped(self, manager_user, collector, book, unassigned_book):
        mine = _issue(collector, book, 1)
        _issue(manager_user, unassigned_book, 101)

        assert list(list_receipts(actor=collector)) == [mine]
        assert list_receipts(actor=manager_user).count() == 2

    def test_reassignment_hides_receipts_from_previous_collector(
        self, manager_user, collector, other_collector, book
    ):
        mine = _issue(collector, book, 1)
        book.assigned_to = other_collector
        book.save()

        assert list(list_receipts(actor=collector)) == []
        assert list(list_receipts(actor=other_collector)) == [mine]

    def test_single_book_ordered_by_number(self, collector, book):
        for number in (3, 1, 2):
            _issue(collector, book, number)

        numbers = [r.receipt_number for r in list_receipts(actor=collector, book_id=book.id)]
        assert numbers == [1, 2, 3]

    def test_default_order_newest_first(self, collector, book):
        first = _issue(collector, book, 1)
        second = _issue(collector, book, 2)
        Receipt.objects.filter(id=first.id).update(created_at=timezone.now() - timedelta(days=1))

        assert list(list_receipts(actor=collector)) == [second, first]

    def test_date_filter(self, collector, book):
        old = _issue(collector, book, 1)
        recent = _issue(collector, book, 2)
        Receipt.objects.filter(id=old.id).update(created_at=timezone.now() - timedelta(days=10))

        today = timezone.localdate()
        assert list(list_receipts(actor=collector, date_from=today)) == [recent]
        assert list(list_receipts(actor=collector, date_to=today - timedelta(days=5))) == [old]

    def test_filter_by_collector(self, manager_user, collector, book):
        by_collector = _issue(collector, book, 1)
        _issue(manager_user, book, 2)

        assert list(list_receipts(actor=manager_user, collector_id=collector.id)) == [by_collector]

    def test_ties_ordered_by_id(self, manager_user, book, construction_task):
        other_book = ReceiptBook.objects.create(
            book_number='B-010',
            task=construction_task,
            start_number=1,
            end_number=5,
            created_by=manager_user,
        )
        receipts = [_issue(manager_user, book, 1), _issue(manager_user, other_book, 1)]
        Receipt.objects.update(created_at=timezone.now())

        expected = sorted(r.id for r in receipts)
        assert [r.id for r in list_receipts(actor=manager_user)] == expected


# =============================================================================
# Concurrency Tests
# =============================================================================

class TestConcurrentIssuance(TransactionTestCase):
    """
    Concurrent issuance of the same (book, number) pair.

    TransactionTestCase is required so each thread commits on its own
    connection; a plain TestCase would wrap everything in one transaction.
    """

    THREADS = 5

    def setUp(self):
        self.manager = User.objects.create_user(
            username='manager', password='TestPass123!', role=UserRole.MANAGER,
        )
        self.collector = User.objects.create_user(
            username='collector', password='TestPass123!', role=UserRole.CASH_COLLECTOR,
        )
        task = Task.objects.create(name='Construction')
        self.book = ReceiptBook.objects.create(
            book_number='B-001',
            task=task,
            start_number=1,
            end_number=5,
            assigned_to=self.collector,
            created_by=self.manager,
        )

    def test_one_winner_per_number(self):
        """N racers for one number: exactly one success, N-1 duplicates."""
        results = []
        duplicates = []
        errors = []
        barrier = threading.Barrier(self.THREADS)

        def issue(index):
            try:
                barrier.wait()
                receipt = _issue(self.collector, self.book, 3, amount=f'{index + 1}.00')
                results.append(receipt)
            except DuplicateReceiptNumberError:
                duplicates.append(index)
            except Exception as e:
                errors.append(f"Unexpected error: {e!r}")
            finally:
                connection.close()

        threads = [threading.Thread(target=issue, args=(i,)) for i in range(self.THREADS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(results) == 1
        assert len(duplicates) == self.THREADS - 1
        assert Receipt.objects.filter(receipt_book=self.book, receipt_number=3).count() == 1

    def test_distinct_numbers_all_succeed(self):
        results = []
        errors = []

        def issue(number):
            try:
                results.append(_issue(self.collector, self.book, number))
            except Exception as e:
                errors.append(f"Unexpected error: {e!r}")
            finally:
                connection.close()

        threads = [threading.Thread(target=issue, args=(n,)) for n in range(1, 6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert sorted(r.receipt_number for r in results) == [1, 2, 3, 4, 5]
