from django.db import models
import uuid


class Task(models.Model):
    """Income category that receipt books and receipts belong to (e.g. "Construction")."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, unique=True)
    description = models.TextField(blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tasks'
        ordering = ['name']

    def __str__(self):
        return self.name
