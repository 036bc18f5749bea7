from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid


class ExpenseType(models.Model):
    """Expense category (e.g. "Utilities", "Maintenance")."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, unique=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'expense_types'
        ordering = ['name']

    def __str__(self):
        return self.name


class Expense(models.Model):
    """A single outgoing payment."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    expense_type = models.ForeignKey(
        ExpenseType,
        on_delete=models.PROTECT,
        related_name='expenses'
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    description = models.TextField(blank=True)
    date = models.DateField()

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='recorded_expenses'
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expenses'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['date'], name='expenses_date_idx'),
            models.Index(fields=['expense_type', 'date'], name='expenses_type_date_idx'),
        ]

    def __str__(self):
        return f"{self.expense_type.name}: {self.amount} on {self.date}"
