import pytest
from decimal import Decimal
from datetime import date
from apps.expenses.models import Expense, ExpenseType


@pytest.fixture
def utilities(db):
    return ExpenseType.objects.create(name='Utilities', description='Power and water')


@pytest.fixture
def maintenance(db):
    return ExpenseType.objects.create(name='Maintenance')


@pytest.fixture
def electricity_bill(utilities, manager_user):
    return Expense.objects.create(
        expense_type=utilities,
        amount=Decimal('400.00'),
        description='Electricity',
        date=date(2026, 3, 1),
        recorded_by=manager_user,
    )
