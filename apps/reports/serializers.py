from rest_framework import serializers
from apps.accounts.serializers import UserMinimalSerializer
from apps.receipts.serializers import ReceiptSerializer
from .models import PublishedReport


class TaskIncomeSerializer(serializers.Serializer):
    task_id = serializers.UUIDField()
    task_name = serializers.CharField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    receipt_book_count = serializers.IntegerField()


class FinancialSummarySerializer(serializers.Serializer):
    """Live totals as returned by the aggregator."""

    total_income = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_expenses = serializers.DecimalField(max_digits=14, decimal_places=2)
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    income_by_task = TaskIncomeSerializer(many=True)
    recent_receipts = ReceiptSerializer(many=True, required=False)


class FinancialFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for the financial summary.

    Query Parameters:
        date_from (date): Inclusive lower bound
        date_to (date): Inclusive upper bound
        task (UUID): Narrow income to one task
    """

    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    task = serializers.UUIDField(required=False)

    def validate(self, data):
        if data.get('date_from') and data.get('date_to'):
            if data['date_from'] > data['date_to']:
                raise serializers.ValidationError({
                    'date_to': 'date_to must be on or after date_from.'
                })
        return data


class PublishedReportSerializer(serializers.ModelSerializer):
    """Published snapshot, as shown to managers."""

    income_by_task = TaskIncomeSerializer(many=True, read_only=True)
    published_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = PublishedReport
        fields = [
            'id',
            'total_income',
            'total_expenses',
            'balance',
            'income_by_task',
            'published_at',
            'published_by',
        ]
        read_only_fields = fields


class PublicReportSerializer(serializers.ModelSerializer):
    """Published snapshot for the public page. No user details."""

    income_by_task = TaskIncomeSerializer(many=True, read_only=True)
    organization_name = serializers.SerializerMethodField()

    class Meta:
        model = PublishedReport
        fields = [
            'organization_name',
            'total_income',
            'total_expenses',
            'balance',
            'income_by_task',
            'published_at',
        ]
        read_only_fields = fields

    def get_organization_name(self, obj):
        return self.context.get('organization_name', '')
