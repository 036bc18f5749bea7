from django.conf import settings
from django.db.models import Count
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.capabilities import Capability
from apps.accounts.permissions import HasRoleCapability
from .models import Receipt, ReceiptBook
from .serializers import (
    ReceiptBookSerializer,
    ReceiptBookCreateSerializer,
    ReceiptBookUpdateSerializer,
    ReceiptBookFilterSerializer,
    AssignBookInputSerializer,
    ReceiptSerializer,
    ReceiptCreateSerializer,
    ReceiptUpdateSerializer,
    ReceiptFilterSerializer,
    NextNumberInputSerializer,
    NextNumberResponseSerializer,
)
from .services import (
    assign_book,
    close_book,
    create_book,
    delete_book,
    get_receipt,
    issue_receipt,
    list_books,
    list_receipts,
    next_available_number,
    update_book,
    update_receipt,
)


class ReceiptPagination(PageNumberPagination):
    """Pagination for receipt listings."""
    page_size = settings.RECEIPTS_PAGE_SIZE
    page_size_query_param = 'page_size'
    max_page_size = 100


class ReceiptBookViewSet(viewsets.ModelViewSet):
    """
    ViewSet for receipt books.

    list: Managers/admins see every book, collectors their assigned books
    retrieve: Same visibility as list
    create/update/destroy: Manager/admin
    assign: Manager/admin, hands the book to a collector
    close: Manager/admin, stops further issuance
    """

    queryset = ReceiptBook.objects.select_related(
        'task', 'assigned_to', 'created_by', 'closed_by'
    ).annotate(receipt_count=Count('receipts'))
    serializer_class = ReceiptBookSerializer
    permission_classes = [IsAuthenticated, HasRoleCapability]
    capabilities = {
        'list': Capability.VIEW_BOOK,
        'retrieve': Capability.VIEW_BOOK,
        'create': Capability.MANAGE_BOOKS,
        'update': Capability.MANAGE_BOOKS,
        'partial_update': Capability.MANAGE_BOOKS,
        'destroy': Capability.MANAGE_BOOKS,
        'assign': Capability.MANAGE_BOOKS,
        'close': Capability.MANAGE_BOOKS,
    }
    object_capabilities = {
        'retrieve': Capability.VIEW_BOOK,
    }

    def get_queryset(self):
        """Filter books using input serializer validation."""
        if self.action != 'list':
            return super().get_queryset()

        filter_serializer = ReceiptBookFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        filters = filter_serializer.validated_data

        return list_books(
            actor=self.request.user,
            task_id=filters.get('task'),
            assigned_to_id=filters.get('assigned_to'),
            status=filters.get('status'),
        )

    def get_serializer_class(self):
        if self.action == 'create':
            return ReceiptBookCreateSerializer
        if self.action in ['update', 'partial_update']:
            return ReceiptBookUpdateSerializer
        return ReceiptBookSerializer

    def _render(self, book_id, status_code=status.HTTP_200_OK):
        book = self.queryset.get(id=book_id)
        return Response(ReceiptBookSerializer(book).data, status=status_code)

    @extend_schema(responses={201: ReceiptBookSerializer})
    def create(self, request, *args, **kwargs):
        """Create a receipt book."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        book = create_book(actor=request.user, **serializer.validated_data)

        return self._render(book.id, status.HTTP_201_CREATED)

    @extend_schema(responses={200: ReceiptBookSerializer})
    def update(self, request, *args, **kwargs):
        """Edit a receipt book; range and task are locked after first receipt."""
        serializer = self.get_serializer(data=request.data, partial=kwargs.pop('partial', False))
        serializer.is_valid(raise_exception=True)

        book = update_book(actor=request.user, book_id=self.kwargs['pk'], **serializer.validated_data)

        return self._render(book.id)

    def destroy(self, request, *args, **kwargs):
        """Delete a receipt book that has no receipts."""
        delete_book(actor=request.user, book_id=self.kwargs['pk'])
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=AssignBookInputSerializer, responses={200: ReceiptBookSerializer})
    @action(detail=True, methods=['post'])
    def assign(self, request, pk=None):
        """
        Assign the book to a user.

        POST /api/receipt-books/{id}/assign/
        Body: {"user_id": "<uuid>"}
        """
        serializer = AssignBookInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        book = assign_book(
            actor=request.user,
            book_id=pk,
            user_id=serializer.validated_data['user_id'],
        )
        return self._render(book.id)

    @extend_schema(request=None, responses={200: ReceiptBookSerializer})
    @action(detail=True, methods=['post'])
    def close(self, request, pk=None):
        """
        Close the book for issuance.

        POST /api/receipt-books/{id}/close/
        """
        book = close_book(actor=request.user, book_id=pk)
        return self._render(book.id)


class ReceiptViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for receipts.

    list: Role-scoped, paginated
    retrieve: Managers/admins any receipt, collectors those in their assigned books
    create: Issue a receipt (collectors only from their assigned books)
    update: Manager/admin, re-validates every receipt rule
    next_number: Advisory next number for a book
    """

    queryset = Receipt.objects.select_related('receipt_book', 'task', 'issued_by')
    serializer_class = ReceiptSerializer
    permission_classes = [IsAuthenticated, HasRoleCapability]
    pagination_class = ReceiptPagination
    capabilities = {
        'list': Capability.VIEW_RECEIPT,
        'retrieve': Capability.VIEW_RECEIPT,
        'create': Capability.ISSUE_RECEIPT,
        'update': Capability.EDIT_RECEIPT,
        'partial_update': Capability.EDIT_RECEIPT,
        'next_number': Capability.VIEW_BOOK,
    }

    def get_queryset(self):
        """Filter receipts using input serializer validation."""
        if self.action != 'list':
            return super().get_queryset()

        filter_serializer = ReceiptFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        filters = filter_serializer.validated_data

        return list_receipts(
            actor=self.request.user,
            book_id=filters.get('book'),
            task_id=filters.get('task'),
            date_from=filters.get('date_from'),
            date_to=filters.get('date_to'),
            collector_id=filters.get('collector'),
        )

    def get_serializer_class(self):
        if self.action == 'create':
            return ReceiptCreateSerializer
        if self.action in ['update', 'partial_update']:
            return ReceiptUpdateSerializer
        return ReceiptSerializer

    def retrieve(self, request, *args, **kwargs):
        """Get a receipt the caller may view."""
        receipt = get_receipt(actor=request.user, receipt_id=self.kwargs['pk'])
        return Response(ReceiptSerializer(receipt).data)

    @extend_schema(responses={201: ReceiptSerializer})
    def create(self, request, *args, **kwargs):
        """Issue a receipt."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        receipt = issue_receipt(actor=request.user, **serializer.validated_data)

        receipt = self.queryset.get(id=receipt.id)
        return Response(ReceiptSerializer(receipt).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: ReceiptSerializer})
    def update(self, request, *args, **kwargs):
        """Edit a receipt."""
        serializer = self.get_serializer(data=request.data, partial=kwargs.pop('partial', False))
        serializer.is_valid(raise_exception=True)

        receipt = update_receipt(
            actor=request.user,
            receipt_id=self.kwargs['pk'],
            **serializer.validated_data,
        )

        receipt = self.queryset.get(id=receipt.id)
        return Response(ReceiptSerializer(receipt).data)

    @extend_schema(
        parameters=[
            OpenApiParameter('book', str, description='Receipt book ID'),
            OpenApiParameter('bookId', str, description='Alias for book'),
        ],
        responses={200: NextNumberResponseSerializer},
    )
    @action(detail=False, methods=['get'], url_path='next-number')
    def next_number(self, request):
        """
        Suggest the next receipt number for a book. Nothing is reserved.

        GET /api/receipts/next-number/?book=<uuid>  (or ?bookId=<uuid>)
        """
        serializer = NextNumberInputSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        book_id = serializer.validated_data['book']

        number = next_available_number(book_id=book_id, actor=request.user)

        return Response({'book': book_id, 'next_number': number})
