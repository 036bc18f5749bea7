from rest_framework import serializers
from apps.accounts.serializers import UserMinimalSerializer
from .models import BookStatus, Receipt, ReceiptBook


class ReceiptBookSerializer(serializers.ModelSerializer):
    """Read serializer for receipt books, including derived status."""

    task_name = serializers.CharField(source='task.name', read_only=True)
    assigned_to = UserMinimalSerializer(read_only=True)
    created_by = UserMinimalSerializer(read_only=True)
    status = serializers.SerializerMethodField()
    issued_count = serializers.IntegerField(read_only=True)
    capacity = serializers.IntegerField(read_only=True)

    class Meta:
        model = ReceiptBook
        fields = [
            'id',
            'book_number',
            'task',
            'task_name',
            'start_number',
            'end_number',
            'assigned_to',
            'created_by',
            'status',
            'issued_count',
            'capacity',
            'closed_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_status(self, obj):
        return obj.status.value


class ReceiptBookCreateSerializer(serializers.Serializer):
    """Input for creating a receipt book."""

    book_number = serializers.CharField(max_length=50)
    task_id = serializers.UUIDField()
    start_number = serializers.IntegerField(min_value=1)
    end_number = serializers.IntegerField(min_value=1)
    assigned_to_id = serializers.UUIDField(required=False, allow_null=True)


class ReceiptBookUpdateSerializer(serializers.Serializer):
    """Input for editing a receipt book. Every field is optional."""

    book_number = serializers.CharField(max_length=50, required=False)
    task_id = serializers.UUIDField(required=False)
    start_number = serializers.IntegerField(min_value=1, required=False)
    end_number = serializers.IntegerField(min_value=1, required=False)


class AssignBookInputSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()


class ReceiptBookFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for receipt book listing.

    Query Parameters:
        task (UUID): Books for this task
        assigned_to (UUID): Books assigned to this user (ignored for collectors)
        status (str): active, exhausted or closed
    """

    task = serializers.UUIDField(required=False)
    assigned_to = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=BookStatus.choices, required=False)


class ReceiptSerializer(serializers.ModelSerializer):
    """Read serializer for receipts."""

    book_number = serializers.CharField(source='receipt_book.book_number', read_only=True)
    task_name = serializers.CharField(source='task.name', read_only=True)
    issued_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Receipt
        fields = [
            'id',
            'receipt_book',
            'book_number',
            'receipt_number',
            'task',
            'task_name',
            'giver_name',
            'address',
            'phone_number',
            'amount',
            'issued_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ReceiptCreateSerializer(serializers.Serializer):
    """
    Input for issuing a receipt.

    Range, task and amount rules are checked by the receipt ledger so that
    they report the ledger's error codes.
    """

    book_id = serializers.UUIDField()
    receipt_number = serializers.IntegerField()
    task_id = serializers.UUIDField()
    giver_name = serializers.CharField(max_length=200)
    address = serializers.CharField(max_length=300)
    phone_number = serializers.CharField(max_length=30, required=False, allow_blank=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class ReceiptUpdateSerializer(serializers.Serializer):
    """Input for editing a receipt. Every field is optional."""

    receipt_book_id = serializers.UUIDField(required=False)
    receipt_number = serializers.IntegerField(required=False)
    task_id = serializers.UUIDField(required=False)
    giver_name = serializers.CharField(max_length=200, required=False)
    address = serializers.CharField(max_length=300, required=False)
    phone_number = serializers.CharField(max_length=30, required=False, allow_blank=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)


class ReceiptFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for receipt listing.

    Query Parameters:
        book (UUID): Receipts from one book (ordered by number)
        task (UUID): Receipts for one task
        date_from (date): Issued on or after this date
        date_to (date): Issued on or before this date
        collector (UUID): Receipts issued by this user
    """

    book = serializers.UUIDField(required=False)
    task = serializers.UUIDField(required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    collector = serializers.UUIDField(required=False)

    def validate(self, data):
        if data.get('date_from') and data.get('date_to'):
            if data['date_from'] > data['date_to']:
                raise serializers.ValidationError({
                    'date_to': 'date_to must be on or after date_from.'
                })
        return data


class NextNumberInputSerializer(serializers.Serializer):
    """
    Validate query parameters for the next-number suggestion.

    Query Parameters:
        book (UUID): Receipt book ID
        bookId (UUID): Alias for ``book``
    """

    book = serializers.UUIDField(required=False)
    bookId = serializers.UUIDField(required=False)

    def validate(self, data):
        book = data.get('book') or data.get('bookId')
        if book is None:
            raise serializers.ValidationError({'book': 'This field is required.'})
        return {'book': book}


class NextNumberResponseSerializer(serializers.Serializer):
    book = serializers.UUIDField()
    next_number = serializers.IntegerField()
