from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q
from decimal import Decimal
import uuid


class BookStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    EXHAUSTED = 'exhausted', 'Exhausted'
    CLOSED = 'closed', 'Closed'


class ReceiptBook(models.Model):
    """
    A physical receipt book: a contiguous range of receipt numbers for one task.

    Only ``closed_at`` is stored; ``exhausted`` is derived from the number of
    receipts issued against the range.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    book_number = models.CharField(max_length=50, unique=True)
    task = models.ForeignKey(
        'tasks.Task',
        on_delete=models.PROTECT,
        related_name='receipt_books'
    )
    start_number = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    end_number = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='assigned_receipt_books'
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='created_receipt_books'
    )

    closed_at = models.DateTimeField(null=True, blank=True)
    closed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='closed_receipt_books'
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'receipt_books'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['assigned_to'], name='books_assignee_idx'),
            models.Index(fields=['task'], name='books_task_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(start_number__lte=F('end_number')),
                name='receipt_book_start_lte_end',
            ),
        ]

    def __str__(self):
        return f"Book {self.book_number} ({self.start_number}-{self.end_number})"

    @property
    def capacity(self):
        return self.end_number - self.start_number + 1

    @property
    def issued_count(self):
        # Uses the list annotation when present
        annotated = getattr(self, 'receipt_count', None)
        if annotated is not None:
            return annotated
        return self.receipts.count()

    @property
    def is_closed(self):
        return self.closed_at is not None

    @property
    def status(self):
        if self.is_closed:
            return BookStatus.CLOSED
        if self.issued_count >= self.capacity:
            return BookStatus.EXHAUSTED
        return BookStatus.ACTIVE


class Receipt(models.Model):
    """A donation receipt issued from a receipt book."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    receipt_book = models.ForeignKey(
        ReceiptBook,
        on_delete=models.PROTECT,
        related_name='receipts'
    )
    receipt_number = models.PositiveIntegerField()
    task = models.ForeignKey(
        'tasks.Task',
        on_delete=models.PROTECT,
        related_name='receipts'
    )

    giver_name = models.CharField(max_length=200)
    address = models.CharField(max_length=300)
    phone_number = models.CharField(max_length=30, blank=True)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )

    issued_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='issued_receipts'
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'receipts'
        ordering = ['-created_at', '-receipt_number']
        indexes = [
            models.Index(fields=['created_at'], name='receipts_created_idx'),
            models.Index(fields=['task', 'created_at'], name='receipts_task_created_idx'),
            models.Index(fields=['issued_by'], name='receipts_issued_by_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['receipt_book', 'receipt_number'],
                name='unique_receipt_number_per_book',
            ),
        ]

    def __str__(self):
        return f"Receipt #{self.receipt_number} - {self.giver_name} ({self.amount})"
