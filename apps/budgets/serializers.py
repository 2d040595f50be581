from decimal import Decimal

from rest_framework import serializers
from .models import Budget


class BudgetSerializer(serializers.ModelSerializer):
    """Serializer for the current user's budget."""

    class Meta:
        model = Budget
        fields = ['amount', 'updated_at']
        read_only_fields = ['updated_at']


class BudgetInputSerializer(serializers.Serializer):
    """Validate input for setting a budget."""

    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.00')
    )
