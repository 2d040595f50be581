from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.groups.services import GroupNotFoundError, NotMemberError
from .analytics import AnalyticsQueries
from .serializers import (
    # Input serializers
    MonthlyStatsQuerySerializer,
    # Response serializers
    BalanceSerializer,
    MonthlyStatsSerializer,
    BudgetProgressSerializer,
    DashboardResponseSerializer,
    ErrorSerializer,
)


def _group_error_response(error):
    if isinstance(error, GroupNotFoundError):
        return Response({'error': str(error)}, status=status.HTTP_404_NOT_FOUND)
    return Response({'error': str(error)}, status=status.HTTP_403_FORBIDDEN)


@extend_schema(
    responses={
        200: BalanceSerializer,
        403: ErrorSerializer,
        404: ErrorSerializer,
    },
    description="Get the current user's net balance, loans and settlements in a group. "
                "Use 'personal' as group_id for the personal ledger.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def group_balance(request, group_id):
    """Ledger balance of the current user - thin HTTP handler."""
    try:
        data = AnalyticsQueries.balance(group_id=group_id, user=request.user)
    except (GroupNotFoundError, NotMemberError) as e:
        return _group_error_response(e)

    return Response(BalanceSerializer(data).data)


@extend_schema(
    parameters=[
        OpenApiParameter('period', OpenApiTypes.STR, description='Month period (YYYY-MM), defaults to the current month'),
    ],
    responses={
        200: MonthlyStatsSerializer,
        400: ErrorSerializer,
        403: ErrorSerializer,
        404: ErrorSerializer,
    },
    description="Get the expense summary of a group for one calendar month.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def group_monthly_stats(request, group_id):
    """Monthly statistics of a group - thin HTTP handler."""
    query_serializer = MonthlyStatsQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    try:
        data = AnalyticsQueries.monthly_stats(
            group_id=group_id,
            user=request.user,
            today=query_serializer.validated_data['today'],
        )
    except (GroupNotFoundError, NotMemberError) as e:
        return _group_error_response(e)

    return Response(MonthlyStatsSerializer(data).data)


@extend_schema(
    responses={
        200: BudgetProgressSerializer,
        403: ErrorSerializer,
        404: ErrorSerializer,
    },
    description="Get spending against the group's monthly budget "
                "(the user's own budget for the personal ledger).",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def group_budget_progress(request, group_id):
    """Budget progress of a group - thin HTTP handler."""
    try:
        data = AnalyticsQueries.budget(group_id=group_id, user=request.user)
    except (GroupNotFoundError, NotMemberError) as e:
        return _group_error_response(e)

    return Response(BudgetProgressSerializer(data).data)


@extend_schema(
    responses={
        200: DashboardResponseSerializer,
        403: ErrorSerializer,
        404: ErrorSerializer,
    },
    description="Get every dashboard figure of a group in one response.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def group_dashboard(request, group_id):
    """Dashboard summary of a group for the current user."""
    try:
        data = AnalyticsQueries.dashboard(group_id=group_id, user=request.user)
    except (GroupNotFoundError, NotMemberError) as e:
        return _group_error_response(e)

    return Response(DashboardResponseSerializer(data).data)
