from django.conf import settings
from django.db import models
from django.utils import timezone
import uuid


class PublishedReport(models.Model):
    """
    Immutable snapshot of the organization's totals.

    The newest snapshot is the one shown publicly. ``income_by_task`` holds
    ``{task_id, task_name, total, receipt_book_count}`` items with amounts as
    decimal strings.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    total_income = models.DecimalField(max_digits=14, decimal_places=2)
    total_expenses = models.DecimalField(max_digits=14, decimal_places=2)
    balance = models.DecimalField(max_digits=14, decimal_places=2)
    income_by_task = models.JSONField(default=list)

    published_at = models.DateTimeField(default=timezone.now, db_index=True)
    published_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='published_reports'
    )

    class Meta:
        db_table = 'published_reports'
        ordering = ['-published_at']

    def __str__(self):
        return f"Report {self.published_at:%Y-%m-%d %H:%M} (balance {self.balance})"
