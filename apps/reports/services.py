"""
Report publishing.

A published report is a frozen copy of the all-time totals. Later receipts
and expenses never change an existing snapshot; publishing again creates a
new one.
"""

import logging

from django.db import transaction

from apps.accounts.capabilities import Capability, ensure_can
from .aggregation import compute_totals
from .exceptions import ReportNotFoundError
from .models import PublishedReport

logger = logging.getLogger(__name__)


def _snapshot_breakdown(income_by_task):
    return [
        {
            'task_id': str(item['task_id']),
            'task_name': item['task_name'],
            'total': str(item['total']),
            'receipt_book_count': item['receipt_book_count'],
        }
        for item in income_by_task
    ]


def publish_report(*, actor) -> PublishedReport:
    """
    Snapshot current all-time totals.

    Raises:
        AuthorizationError: If actor is not manager/admin (nothing is computed)
    """
    ensure_can(actor, Capability.PUBLISH_REPORT)

    with transaction.atomic():
        totals = compute_totals()
        report = PublishedReport.objects.create(
            total_income=totals['total_income'],
            total_expenses=totals['total_expenses'],
            balance=totals['balance'],
            income_by_task=_snapshot_breakdown(totals['income_by_task']),
            published_by=actor,
        )

    logger.info(
        "Report published by %s: income %s, expenses %s, balance %s",
        actor.username, report.total_income, report.total_expenses, report.balance,
    )
    return report


def get_latest_published() -> PublishedReport:
    """
    Return the most recently published report.

    Raises:
        ReportNotFoundError: If nothing has been published
    """
    report = PublishedReport.objects.order_by('-published_at').first()
    if report is None:
        raise ReportNotFoundError()
    return report


def list_published(*, actor):
    """All published reports, newest first (manager/admin)."""
    ensure_can(actor, Capability.PUBLISH_REPORT)
    return PublishedReport.objects.select_related('published_by').order_by('-published_at')
