from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.capabilities import Capability
from apps.accounts.permissions import capability_required
from .aggregation import compute_totals, recent_receipts
from .serializers import (
    FinancialFilterSerializer,
    FinancialSummarySerializer,
    PublicReportSerializer,
    PublishedReportSerializer,
)
from .services import get_latest_published, list_published, publish_report


@extend_schema(
    parameters=[FinancialFilterSerializer],
    responses={200: FinancialSummarySerializer},
    description="Live income, expenses and balance, with per-task income.",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, capability_required(Capability.VIEW_FINANCIALS)])
def financials(request):
    """Live financial summary for managers and admins."""
    filter_serializer = FinancialFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)
    filters = filter_serializer.validated_data

    totals = compute_totals(
        date_from=filters.get('date_from'),
        date_to=filters.get('date_to'),
        task_id=filters.get('task'),
    )
    totals['recent_receipts'] = recent_receipts()

    return Response(FinancialSummarySerializer(totals).data)


@extend_schema(
    request=None,
    responses={201: PublishedReportSerializer},
    description="Snapshot the current all-time totals as the public report.",
    tags=['reports'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, capability_required(Capability.PUBLISH_REPORT)])
def publish(request):
    """Publish a new report."""
    report = publish_report(actor=request.user)
    return Response(PublishedReportSerializer(report).data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={200: PublicReportSerializer},
    description="Latest published report. No authentication required.",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def published(request):
    """Latest published report, readable by anyone."""
    report = get_latest_published()
    serializer = PublicReportSerializer(
        report,
        context={'organization_name': settings.ORGANIZATION_NAME},
    )
    return Response(serializer.data)


@extend_schema(
    responses={200: PublishedReportSerializer(many=True)},
    description="Every published report, newest first.",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, capability_required(Capability.PUBLISH_REPORT)])
def published_history(request):
    """Publication history for managers and admins."""
    reports = list_published(actor=request.user)
    return Response(PublishedReportSerializer(reports, many=True).data)
