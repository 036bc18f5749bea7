from django.contrib import admin
from .models import Task


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ['name', 'receipt_book_count', 'created_at']
    search_fields = ['name', 'description']
    readonly_fields = ['created_at', 'updated_at']

    def receipt_book_count(self, obj):
        return obj.receipt_books.count()
    receipt_book_count.short_description = 'Receipt books'
