from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .models import Transaction
from .serializers import (
    TransactionSerializer,
    ExpenseCreatedSerializer,
    # Input serializers
    TransactionFilterSerializer,
    ExpenseCreateSerializer,
    LoanCreateSerializer,
    SettlementCreateSerializer,
)
from .services import TransactionService
from .exceptions import InvalidGroupMembershipError, InvalidTransactionError
from .permissions import IsGroupMemberForTransaction, CanDeleteTransaction
from apps.groups.services import GroupNotFoundError, NotMemberError, resolve_group


class TransactionPagination(PageNumberPagination):
    """Custom pagination for transactions."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class TransactionViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for ledger entries.

    Entries are immutable: there is no update. Creation goes through one
    endpoint per kind so each validates its own fields.

    list: Entries of a group or of the personal scope (?group=)
    retrieve: Get a specific entry
    destroy: Delete an entry (creator only)
    expenses: Record an expense
    loans: Record a loan
    settlements: Record a settlement
    """

    queryset = Transaction.objects.select_related(
        'paid_by',
        'paid_to',
        'loaned_to',
        'created_by',
        'group',
    ).prefetch_related('splits__user')
    serializer_class = TransactionSerializer
    permission_classes = [IsAuthenticated, IsGroupMemberForTransaction]
    pagination_class = TransactionPagination

    def get_permissions(self):
        """Only the creator may delete."""
        if self.action == 'destroy':
            return [IsAuthenticated(), IsGroupMemberForTransaction(), CanDeleteTransaction()]
        return super().get_permissions()

    def get_queryset(self):
        """Scope the list to one group after checking membership."""
        if self.action != 'list':
            return super().get_queryset()

        filter_serializer = TransactionFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        try:
            resolve_group(group_id=params['group'], user=self.request.user)
        except (GroupNotFoundError, NotMemberError):
            raise InvalidGroupMembershipError()

        queryset = TransactionService.list_transactions(
            group_id=params['group'],
            user=self.request.user,
        )
        if 'kind' in params:
            queryset = queryset.filter(kind=params['kind'])
        return queryset

    @extend_schema(
        parameters=[
            OpenApiParameter('group', str, description="Group UUID or 'personal'"),
            OpenApiParameter('kind', str, description='expense, loan or settlement'),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def destroy(self, request, pk=None):
        """Delete an entry and its splits."""
        entry = self.get_object()
        TransactionService.delete_transaction(transaction_id=entry.id, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=ExpenseCreateSerializer, responses={201: ExpenseCreatedSerializer})
    @action(detail=False, methods=['post'])
    def expenses(self, request):
        """
        Record an expense.

        POST /api/transactions/expenses/
        Body: {"title": "Groceries", "amount": "90.00", "group": "<uuid>",
               "split_with": ["<user uuid>", ...]}
        """
        serializer = ExpenseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            expense, share = TransactionService.create_expense(
                created_by=request.user,
                title=data['title'],
                amount=data['amount'],
                paid_by=data.get('paid_by'),
                group_id=data['group'],
                split_with=data['split_with'],
                note=data['note'],
                category=data['category'],
                tag=data['tag'],
            )
        except InvalidTransactionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        expense = self.get_queryset().get(id=expense.id)
        output = ExpenseCreatedSerializer({'transaction': expense, 'share': share})
        return Response(output.data, status=status.HTTP_201_CREATED)

    @extend_schema(request=LoanCreateSerializer, responses={201: TransactionSerializer})
    @action(detail=False, methods=['post'])
    def loans(self, request):
        """
        Record a loan from the current user.

        POST /api/transactions/loans/
        Body: {"amount": "20.00", "loaned_to": "<user uuid>", "group": "<uuid>"}
        """
        serializer = LoanCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            loan = TransactionService.create_loan(
                created_by=request.user,
                amount=data['amount'],
                loaned_to=data['loaned_to'],
                group_id=data['group'],
                note=data['note'],
            )
        except InvalidTransactionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(TransactionSerializer(loan).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=SettlementCreateSerializer, responses={201: TransactionSerializer})
    @action(detail=False, methods=['post'])
    def settlements(self, request):
        """
        Record a settlement paid by the current user.

        POST /api/transactions/settlements/
        Body: {"amount": "20.00", "paid_to": "<user uuid>", "group": "<uuid>"}
        """
        serializer = SettlementCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            settlement = TransactionService.create_settlement(
                created_by=request.user,
                amount=data['amount'],
                paid_to=data['paid_to'],
                group_id=data['group'],
                note=data['note'],
            )
        except InvalidTransactionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(TransactionSerializer(settlement).data, status=status.HTTP_201_CREATED)
