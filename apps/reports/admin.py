from django.contrib import admin
from .models import PublishedReport


@admin.register(PublishedReport)
class PublishedReportAdmin(admin.ModelAdmin):
    """Read-only: snapshots are created through the publish endpoint."""

    list_display = ['published_at', 'total_income', 'total_expenses', 'balance', 'published_by']
    date_hierarchy = 'published_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
