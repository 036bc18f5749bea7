from django.contrib import admin
from django.db.models import Count
from django.utils.html import format_html
from .models import BookStatus, Receipt, ReceiptBook


STATUS_COLORS = {
    BookStatus.ACTIVE: '#6B8E5E',
    BookStatus.EXHAUSTED: '#C9A227',
    BookStatus.CLOSED: '#B85C5C',
}


class ReceiptInline(admin.TabularInline):
    model = Receipt
    extra = 0
    fields = ['receipt_number', 'giver_name', 'amount', 'issued_by', 'created_at']
    readonly_fields = fields
    can_delete = False
    ordering = ['receipt_number']

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(ReceiptBook)
class ReceiptBookAdmin(admin.ModelAdmin):
    """
    Admin for receipt books.

    Receipts are issued through the API only, so the inline is read-only.
    """

    list_display = [
        'book_number',
        'task',
        'start_number',
        'end_number',
        'assigned_to',
        'status_badge',
        'created_at',
    ]
    list_filter = ['task', 'closed_at']
    search_fields = ['book_number', 'assigned_to__username']
    readonly_fields = ['created_by', 'closed_at', 'closed_by', 'created_at', 'updated_at']
    inlines = [ReceiptInline]

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(receipt_count=Count('receipts'))

    def save_model(self, request, obj, form, change):
        if not change:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)

    def status_badge(self, obj):
        status = obj.status
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            STATUS_COLORS[status], status.label
        )
    status_badge.short_description = 'Status'


@admin.register(Receipt)
class ReceiptAdmin(admin.ModelAdmin):
    list_display = ['receipt_number', 'receipt_book', 'task', 'giver_name', 'amount', 'issued_by', 'created_at']
    list_filter = ['task', 'created_at']
    search_fields = ['giver_name', 'phone_number', 'receipt_book__book_number']
    date_hierarchy = 'created_at'
    readonly_fields = ['receipt_book', 'receipt_number', 'task', 'issued_by', 'created_at', 'updated_at']

    def has_add_permission(self, request):
        return False
