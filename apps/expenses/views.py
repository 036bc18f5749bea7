from rest_framework import mixins, viewsets, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.capabilities import Capability
from apps.accounts.permissions import HasRoleCapability
from .models import Expense, ExpenseType
from .serializers import (
    ExpenseTypeSerializer,
    ExpenseSerializer,
    ExpenseInputSerializer,
    ExpenseFilterSerializer,
)
from .services import (
    create_expense_type,
    update_expense_type,
    delete_expense_type,
    record_expense,
    get_expense,
    list_expenses,
)


class ExpenseTypeViewSet(viewsets.ModelViewSet):
    """ViewSet for expense categories (manager/admin)."""

    queryset = ExpenseType.objects.all()
    serializer_class = ExpenseTypeSerializer
    permission_classes = [IsAuthenticated, HasRoleCapability]
    capabilities = {'*': Capability.MANAGE_EXPENSES}

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        expense_type = create_expense_type(actor=request.user, **serializer.validated_data)

        return Response(ExpenseTypeSerializer(expense_type).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        expense_type = self.get_object()
        serializer = self.get_serializer(expense_type, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        expense_type = update_expense_type(
            actor=request.user,
            expense_type_id=expense_type.id,
            **serializer.validated_data,
        )
        return Response(ExpenseTypeSerializer(expense_type).data)

    def destroy(self, request, *args, **kwargs):
        delete_expense_type(actor=request.user, expense_type_id=self.kwargs['pk'])
        return Response(status=status.HTTP_204_NO_CONTENT)


class ExpenseViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for the expense ledger (manager/admin).

    The ledger is append-only, so there is no update or delete.

    list: Filterable by expense_type, date_from, date_to
    retrieve: One recorded expense
    create: Record an expense
    """

    queryset = Expense.objects.select_related('expense_type', 'recorded_by')
    serializer_class = ExpenseSerializer
    permission_classes = [IsAuthenticated, HasRoleCapability]
    capabilities = {'*': Capability.MANAGE_EXPENSES}

    def get_queryset(self):
        """Filter expenses using input serializer validation."""
        if self.action != 'list':
            return super().get_queryset()

        filter_serializer = ExpenseFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        filters = filter_serializer.validated_data

        return list_expenses(
            actor=self.request.user,
            expense_type_id=filters.get('expense_type'),
            date_from=filters.get('date_from'),
            date_to=filters.get('date_to'),
        )

    def get_serializer_class(self):
        if self.action == 'create':
            return ExpenseInputSerializer
        return ExpenseSerializer

    def retrieve(self, request, *args, **kwargs):
        expense = get_expense(actor=request.user, expense_id=self.kwargs['pk'])
        return Response(ExpenseSerializer(expense).data)

    @extend_schema(responses={201: ExpenseSerializer})
    def create(self, request, *args, **kwargs):
        """Record an expense."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        expense = record_expense(actor=request.user, **serializer.validated_data)

        return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)
