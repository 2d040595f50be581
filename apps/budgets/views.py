from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .models import Budget
from .serializers import BudgetSerializer, BudgetInputSerializer
from .services import upsert_user_budget
from .exceptions import InvalidBudgetError


@extend_schema(
    methods=['GET'],
    responses={200: BudgetSerializer},
    description="Get the current user's monthly budget. amount is null when unset.",
    tags=['budgets'],
)
@extend_schema(
    methods=['PUT'],
    request=BudgetInputSerializer,
    responses={200: BudgetSerializer},
    description="Create or update the current user's monthly budget.",
    tags=['budgets'],
)
@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def my_budget(request):
    """Read or upsert the current user's budget."""
    if request.method == 'GET':
        budget = Budget.objects.filter(user=request.user).first()
        if budget is None:
            return Response({'amount': None, 'updated_at': None})
        return Response(BudgetSerializer(budget).data)

    serializer = BudgetInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        budget = upsert_user_budget(user=request.user, amount=serializer.validated_data['amount'])
    except InvalidBudgetError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(BudgetSerializer(budget).data)
