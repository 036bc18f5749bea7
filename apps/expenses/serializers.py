from rest_framework import serializers
from apps.accounts.serializers import UserMinimalSerializer
from .models import Expense, ExpenseType


class ExpenseTypeSerializer(serializers.ModelSerializer):
    """Serializer for expense categories."""

    class Meta:
        model = ExpenseType
        fields = ['id', 'name', 'description', 'created_at']
        read_only_fields = ['id', 'created_at']
        extra_kwargs = {'name': {'validators': []}}


class ExpenseSerializer(serializers.ModelSerializer):
    """Read serializer for expenses."""

    expense_type_name = serializers.CharField(source='expense_type.name', read_only=True)
    recorded_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Expense
        fields = [
            'id',
            'expense_type',
            'expense_type_name',
            'amount',
            'description',
            'date',
            'recorded_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ExpenseInputSerializer(serializers.Serializer):
    """Input for recording an expense."""

    expense_type_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    date = serializers.DateField()
    description = serializers.CharField(required=False, allow_blank=True)


class ExpenseFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for expense listing.

    Query Parameters:
        expense_type (UUID): Only this category
        date_from (date): On or after this date
        date_to (date): On or before this date
    """

    expense_type = serializers.UUIDField(required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, data):
        if data.get('date_from') and data.get('date_to'):
            if data['date_from'] > data['date_to']:
                raise serializers.ValidationError({
                    'date_to': 'date_to must be on or after date_from.'
                })
        return data
