import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.receipts.models import Receipt, ReceiptBook


def receipt_payload(book, number, **overrides):
    data = {
        'book_id': str(book.id),
        'receipt_number': number,
        'task_id': str(book.task_id),
        'giver_name': 'Aisha Rahman',
        'address': '12 Mill Lane',
        'phone_number': '07700 900123',
        'amount': '150.00',
    }
    data.update(overrides)
    return data


# =============================================================================
# Receipt Book Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestReceiptBookList:
    """Tests for GET /api/receipt-books/"""

    def test_manager_sees_all_books(self, manager_client, book, unassigned_book):
        url = reverse('receipts:receipt-book-list')
        response = manager_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert {b['book_number'] for b in response.data} == {'B-001', 'B-002'}

    def test_collector_sees_assigned_books(self, collector_client, book, unassigned_book):
        url = reverse('receipts:receipt-book-list')
        response = collector_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [b['book_number'] for b in response.data] == ['B-001']
        assert response.data[0]['status'] == 'active'
        assert response.data[0]['issued_count'] == 0
        assert response.data[0]['capacity'] == 5

    def test_unauthenticated(self, api_client):
        url = reverse('receipts:receipt-book-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_invalid_status_filter(self, manager_client):
        url = reverse('receipts:receipt-book-list')
        response = manager_client.get(url, {'status': 'lost'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestReceiptBookDetail:
    """Tests for GET /api/receipt-books/{id}/"""

    def test_collector_retrieves_own_book(self, collector_client, book):
        url = reverse('receipts:receipt-book-detail', args=[book.id])
        response = collector_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['task_name'] == 'Construction'

    def test_collector_cannot_retrieve_other_book(self, other_collector_client, book):
        url = reverse('receipts:receipt-book-detail', args=[book.id])
        response = other_collector_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestReceiptBookWrite:
    """Tests for receipt book create/assign/close/update/delete endpoints."""

    def test_create_book(self, manager_client, construction_task, collector):
        url = reverse('receipts:receipt-book-list')
        data = {
            'book_number': 'B-010',
            'task_id': str(construction_task.id),
            'start_number': 1,
            'end_number': 50,
            'assigned_to_id': str(collector.id),
        }
        response = manager_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'active'
        assert response.data['assigned_to']['username'] == 'collector'

    def test_create_invalid_range(self, manager_client, construction_task):
        url = reverse('receipts:receipt-book-list')
        data = {
            'book_number': 'B-011',
            'task_id': str(construction_task.id),
            'start_number': 50,
            'end_number': 1,
        }
        response = manager_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['kind'] == 'validation_error'
        assert response.data['code'] == 'invalid_range'

    def test_collector_cannot_create(self, collector_client, construction_task):
        url = reverse('receipts:receipt-book-list')
        data = {
            'book_number': 'B-012',
            'task_id': str(construction_task.id),
            'start_number': 1,
            'end_number': 10,
        }
        response = collector_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not ReceiptBook.objects.filter(book_number='B-012').exists()

    def test_assign(self, manager_client, unassigned_book, other_collector):
        url = reverse('receipts:receipt-book-assign', args=[unassigned_book.id])
        response = manager_client.post(url, {'user_id': str(other_collector.id)}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['assigned_to']['id'] == str(other_collector.id)

    def test_assign_missing_user(self, manager_client, unassigned_book):
        url = reverse('receipts:receipt-book-assign', args=[unassigned_book.id])
        response = manager_client.post(
            url, {'user_id': '00000000-0000-0000-0000-000000000000'}, format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_collector_cannot_assign(self, collector_client, unassigned_book, collector):
        url = reverse('receipts:receipt-book-assign', args=[unassigned_book.id])
        response = collector_client.post(url, {'user_id': str(collector.id)}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_close(self, manager_client, book):
        url = reverse('receipts:receipt-book-close', args=[book.id])
        response = manager_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'closed'
        assert response.data['closed_at'] is not None

    def test_update_range_after_issuance(self, manager_client, collector_client, book):
        collector_client.post(reverse('receipts:receipt-list'), receipt_payload(book, 1), format='json')

        url = reverse('receipts:receipt-book-detail', args=[book.id])
        response = manager_client.patch(url, {'end_number': 20}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'immutable_range'

    def test_delete_unused(self, manager_client, unassigned_book):
        url = reverse('receipts:receipt-book-detail', args=[unassigned_book.id])
        response = manager_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT


# =============================================================================
# Receipt Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestIssueReceiptEndpoint:
    """Tests for POST /api/receipts/"""

    def test_issue_receipt(self, collector_client, book, collector):
        url = reverse('receipts:receipt-list')
        response = collector_client.post(url, receipt_payload(book, 1), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['receipt_number'] == 1
        assert response.data['amount'] == '150.00'
        assert response.data['book_number'] == 'B-001'
        assert response.data['issued_by']['username'] == 'collector'

    def test_issue_from_unassigned_book(self, other_collector_client, book):
        url = reverse('receipts:receipt-list')
        response = other_collector_client.post(url, receipt_payload(book, 1), format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['kind'] == 'authorization_error'

    def test_out_of_range(self, collector_client, book):
        url = reverse('receipts:receipt-list')
        response = collector_client.post(url, receipt_payload(book, 6), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {
            'kind': 'validation_error',
            'code': 'receipt_number_out_of_range',
            'detail': response.data['detail'],
        }

    def test_duplicate(self, collector_client, book):
        url = reverse('receipts:receipt-list')
        collector_client.post(url, receipt_payload(book, 1), format='json')
        response = collector_client.post(url, receipt_payload(book, 1), format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['kind'] == 'duplicate'

    def test_negative_amount(self, collector_client, book):
        url = reverse('receipts:receipt-list')
        response = collector_client.post(url, receipt_payload(book, 1, amount='-1.00'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'invalid_amount'

    def test_missing_giver_name(self, collector_client, book):
        url = reverse('receipts:receipt-list')
        data = receipt_payload(book, 1)
        del data['giver_name']
        response = collector_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'giver_name' in response.data


@pytest.mark.django_db
class TestNextNumberEndpoint:
    """Tests for GET /api/receipts/next-number/"""

    def test_next_number(self, collector_client, book):
        url = reverse('receipts:receipt-list')
        collector_client.post(url, receipt_payload(book, 1), format='json')

        response = collector_client.get(reverse('receipts:receipt-next-number'), {'book': str(book.id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['next_number'] == 2

    def test_book_id_alias(self, collector_client, book):
        response = collector_client.get(reverse('receipts:receipt-next-number'), {'bookId': str(book.id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['next_number'] == 1

    def test_exhausted(self, manager_client, book):
        url = reverse('receipts:receipt-list')
        for number in range(1, 6):
            manager_client.post(url, receipt_payload(book, number), format='json')

        response = manager_client.get(reverse('receipts:receipt-next-number'), {'book': str(book.id)})

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['kind'] == 'range_exhausted'

    def test_missing_book_param(self, collector_client):
        response = collector_client.get(reverse('receipts:receipt-next-number'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_other_collectors_book(self, other_collector_client, book):
        response = other_collector_client.get(
            reverse('receipts:receipt-next-number'), {'book': str(book.id)}
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestReceiptListEndpoint:
    """Tests for GET /api/receipts/"""

    def test_paginated_and_scoped(self, collector_client, manager_client, book, unassigned_book):
        url = reverse('receipts:receipt-list')
        collector_client.post(url, receipt_payload(book, 1), format='json')
        manager_client.post(url, receipt_payload(unassigned_book, 101), format='json')

        response = collector_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['receipt_number'] == 1

        response = manager_client.get(url)
        assert response.data['count'] == 2

    def test_filter_by_book(self, manager_client, book, unassigned_book):
        url = reverse('receipts:receipt-list')
        for number in (2, 1):
            manager_client.post(url, receipt_payload(book, number), format='json')
        manager_client.post(url, receipt_payload(unassigned_book, 101), format='json')

        response = manager_client.get(url, {'book': str(book.id)})

        assert [r['receipt_number'] for r in response.data['results']] == [1, 2]

    def test_invalid_date_range(self, manager_client):
        url = reverse('receipts:receipt-list')
        response = manager_client.get(url, {'date_from': '2026-02-01', 'date_to': '2026-01-01'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestReceiptDetailEndpoint:
    """Tests for GET/PATCH /api/receipts/{id}/"""

    def _receipt(self, book, collector):
        return Receipt.objects.create(
            receipt_book=book,
            receipt_number=1,
            task=book.task,
            giver_name='Donor',
            address='Street 1',
            amount=Decimal('50.00'),
            issued_by=collector,
        )

    def test_collector_retrieves_own(self, collector_client, book, collector):
        receipt = self._receipt(book, collector)
        response = collector_client.get(reverse('receipts:receipt-detail', args=[receipt.id]))

        assert response.status_code == status.HTTP_200_OK

    def test_other_collector_denied(self, other_collector_client, book, collector):
        receipt = self._receipt(book, collector)
        response = other_collector_client.get(reverse('receipts:receipt-detail', args=[receipt.id]))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_manager_edits(self, manager_client, book, collector):
        receipt = self._receipt(book, collector)
        url = reverse('receipts:receipt-detail', args=[receipt.id])
        response = manager_client.patch(url, {'amount': '75.00'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['amount'] == '75.00'

    def test_manager_edit_out_of_range(self, manager_client, book, collector):
        receipt = self._receipt(book, collector)
        url = reverse('receipts:receipt-detail', args=[receipt.id])
        response = manager_client.patch(url, {'receipt_number': 42}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'receipt_number_out_of_range'

    def test_collector_cannot_edit(self, collector_client, book, collector):
        receipt = self._receipt(book, collector)
        url = reverse('receipts:receipt-detail', args=[receipt.id])
        response = collector_client.patch(url, {'amount': '75.00'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
