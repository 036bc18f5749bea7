"""Fixtures shared by every app's tests: one user per role and their clients."""
import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.receipts.models import ReceiptBook
from apps.tasks.models import Task


def client_for(user):
    """Return a new API client authenticated as ``user`` using JWT."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        username='admin',
        password='TestPass123!',
        display_name='Admin User',
        role=UserRole.ADMIN,
        is_staff=True,
    )


@pytest.fixture
def manager_user(db):
    return User.objects.create_user(
        username='manager',
        password='TestPass123!',
        display_name='Manager User',
        role=UserRole.MANAGER,
    )


@pytest.fixture
def collector(db):
    """Cash collector who will hold the test book."""
    return User.objects.create_user(
        username='collector',
        password='TestPass123!',
        display_name='Cash Collector',
        role=UserRole.CASH_COLLECTOR,
    )


@pytest.fixture
def other_collector(db):
    """Cash collector with no books."""
    return User.objects.create_user(
        username='other_collector',
        password='TestPass123!',
        display_name='Other Collector',
        role=UserRole.CASH_COLLECTOR,
    )


@pytest.fixture
def inactive_user(db):
    return User.objects.create_user(
        username='inactive',
        password='TestPass123!',
        role=UserRole.CASH_COLLECTOR,
        is_active=False,
    )


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def manager_client(manager_user):
    return client_for(manager_user)


@pytest.fixture
def collector_client(collector):
    return client_for(collector)


@pytest.fixture
def other_collector_client(other_collector):
    return client_for(other_collector)


@pytest.fixture
def construction_task(db):
    return Task.objects.create(name='Construction', description='Building fund')


@pytest.fixture
def zakat_task(db):
    return Task.objects.create(name='Zakat')


@pytest.fixture
def book(construction_task, collector, manager_user):
    """Receipt book 1-5 for Construction, assigned to ``collector``."""
    return ReceiptBook.objects.create(
        book_number='B-001',
        task=construction_task,
        start_number=1,
        end_number=5,
        assigned_to=collector,
        created_by=manager_user,
    )


@pytest.fixture
def unassigned_book(construction_task, manager_user):
    """Receipt book 101-200 with no assignee."""
    return ReceiptBook.objects.create(
        book_number='B-002',
        task=construction_task,
        start_number=101,
        end_number=200,
        created_by=manager_user,
    )
