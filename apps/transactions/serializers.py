from decimal import Decimal
from uuid import UUID

from rest_framework import serializers
from .models import Transaction, TransactionSplit
from apps.accounts.models import User
from apps.groups.models import PERSONAL_GROUP_ID, is_personal_group_id
from apps.groups.serializers import UserMinimalSerializer


class GroupIdentifierField(serializers.CharField):
    """Accepts a group UUID or ``'personal'`` (also the default)."""

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_blank', True)
        kwargs.setdefault('default', PERSONAL_GROUP_ID)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if is_personal_group_id(value):
            return PERSONAL_GROUP_ID
        try:
            return UUID(value)
        except ValueError:
            raise serializers.ValidationError("Must be a group id or 'personal'")


# =============================================================================
# Input Serializers
# =============================================================================

class TransactionFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for transaction listing.

    Query Parameters:
        group (UUID | 'personal'): Scope to list, personal by default
        kind (str): Filter by transaction kind
    """

    group = GroupIdentifierField()
    kind = serializers.ChoiceField(
        choices=['expense', 'loan', 'settlement'],
        required=False
    )


class ExpenseCreateSerializer(serializers.Serializer):
    """
    Validate input for recording an expense.

    Fields:
        title (str): Short description
        amount (Decimal): Positive amount
        group (UUID | 'personal'): Target scope
        paid_by (UUID): Payer, defaults to the current user
        split_with (list[UUID]): Other participants, empty for unsplit
    """

    title = serializers.CharField(max_length=200)
    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01')
    )
    group = GroupIdentifierField()
    paid_by = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(is_active=True),
        required=False
    )
    split_with = serializers.ListField(
        child=serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(is_active=True)),
        required=False,
        default=list,
        help_text="Users to split with besides the payer. Leave empty for an unsplit expense."
    )
    note = serializers.CharField(required=False, allow_blank=True, default='')
    category = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    tag = serializers.CharField(max_length=100, required=False, allow_blank=True, default='expense')

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Title is required")
        return value.strip()


class LoanCreateSerializer(serializers.Serializer):
    """Validate input for recording a loan."""

    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01')
    )
    loaned_to = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(is_active=True))
    group = GroupIdentifierField()
    note = serializers.CharField(required=False, allow_blank=True, default='')


class SettlementCreateSerializer(serializers.Serializer):
    """Validate input for recording a settlement."""

    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01')
    )
    paid_to = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(is_active=True))
    group = GroupIdentifierField()
    note = serializers.CharField(required=False, allow_blank=True, default='')


# =============================================================================
# Output Serializers
# =============================================================================


class TransactionSplitSerializer(serializers.ModelSerializer):
    """Serializer for split rows."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = TransactionSplit
        fields = ['id', 'user', 'amount', 'created_at']
        read_only_fields = fields


class TransactionSerializer(serializers.ModelSerializer):
    """Main serializer for ledger entries."""

    paid_by = UserMinimalSerializer(read_only=True)
    paid_to = UserMinimalSerializer(read_only=True)
    loaned_to = UserMinimalSerializer(read_only=True)
    created_by = UserMinimalSerializer(read_only=True)
    splits = TransactionSplitSerializer(many=True, read_only=True)

    class Meta:
        model = Transaction
        fields = [
            'id',
            'title',
            'amount',
            'kind',
            'paid_by',
            'paid_to',
            'loaned_to',
            'split_between',
            'splits',
            'note',
            'category',
            'tag',
            'group',
            'created_by',
            'created_at',
        ]
        read_only_fields = fields


class ExpenseCreatedSerializer(serializers.Serializer):
    """Response for a newly recorded expense."""

    transaction = TransactionSerializer()
    share = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
