"""
Financial aggregation over receipts and expenses.

Pure reads: nothing here writes, and empty data yields zeros and an empty
breakdown rather than ``None``.

Receipts are filtered by the date they were created, expenses by their own
``date``. A task filter narrows income only, since expenses carry no task.
"""
from decimal import Decimal

from django.db.models import Count, DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from apps.expenses.models import Expense
from apps.receipts.models import Receipt

CENT = Decimal('0.01')
ZERO = Decimal('0.00')


def _money(value):
    return Decimal(value or 0).quantize(CENT)


def _sum_amount(queryset):
    total = queryset.aggregate(
        total=Coalesce(
            Sum('amount'),
            Value(ZERO),
            output_field=DecimalField(max_digits=14, decimal_places=2),
        )
    )['total']
    return _money(total)


def compute_totals(*, date_from=None, date_to=None, task_id=None):
    """
    Compute income, expenses and balance.

    Args:
        date_from (date, optional): Inclusive lower bound.
        date_to (date, optional): Inclusive upper bound.
        task_id (UUID, optional): Only income for this task.

    Returns:
        dict: ``total_income``, ``total_expenses``, ``balance`` (Decimals) and
        ``income_by_task``, a list of ``{task_id, task_name, total,
        receipt_book_count}`` ordered by task name. ``receipt_book_count``
        counts distinct books that contributed at least one receipt.
    """
    receipts = Receipt.objects.all()
    expenses = Expense.objects.all()

    if date_from:
        receipts = receipts.filter(created_at__date__gte=date_from)
        expenses = expenses.filter(date__gte=date_from)
    if date_to:
        receipts = receipts.filter(created_at__date__lte=date_to)
        expenses = expenses.filter(date__lte=date_to)
    if task_id:
        receipts = receipts.filter(task_id=task_id)

    total_income = _sum_amount(receipts)
    total_expenses = _sum_amount(expenses)

    rows = (
        receipts
        .values('task_id', 'task__name')
        .annotate(
            total=Sum('amount'),
            receipt_book_count=Count('receipt_book', distinct=True),
        )
        .order_by('task__name')
    )
    income_by_task = [
        {
            'task_id': row['task_id'],
            'task_name': row['task__name'],
            'total': _money(row['total']),
            'receipt_book_count': row['receipt_book_count'],
        }
        for row in rows
    ]

    return {
        'total_income': total_income,
        'total_expenses': total_expenses,
        'balance': total_income - total_expenses,
        'income_by_task': income_by_task,
    }


def recent_receipts(limit=10):
    """Latest receipts across all books, for the manager dashboard."""
    return list(
        Receipt.objects.select_related('receipt_book', 'task', 'issued_by')
        .order_by('-created_at', '-receipt_number')[:limit]
    )
