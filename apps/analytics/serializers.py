"""
Serializers for analytics app.

This module contains:
1. Input serializers - Query parameter validation
2. Response serializers - API documentation and output formatting

Input Serializers:
    MonthlyStatsQuerySerializer - Validates the optional month period

Response Serializers:
    BalanceSerializer - Net balance, loans and settlements
    MonthlyStatsSerializer - Current month's expense summary
    BudgetProgressSerializer - Spending against the budget
    DashboardResponseSerializer - All of the above
"""

from datetime import date

from rest_framework import serializers


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class MonthlyStatsQuerySerializer(serializers.Serializer):
    """
    Validate the month to summarize.

    Query Parameters:
        period (str): Month in YYYY-MM format, defaults to the current month

    Note:
        The period is converted to ``today``, the first day of that month.
    """

    period = serializers.RegexField(
        regex=r'^\d{4}-(0[1-9]|1[0-2])$',
        required=False,
        allow_blank=True,
        help_text='Month period in YYYY-MM format'
    )

    def validate(self, attrs):
        period = attrs.pop('period', None)
        attrs['today'] = None
        if period:
            year, month = period.split('-')
            attrs['today'] = date(int(year), int(month), 1)
        return attrs


# =============================================================================
# Response Serializers (API Documentation)
# =============================================================================

class BalanceSerializer(serializers.Serializer):
    """Response serializer for the ledger balance."""
    net_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_paid_by_user = serializers.DecimalField(max_digits=14, decimal_places=2)
    user_split_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    fallback_split_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    you_loaned = serializers.DecimalField(max_digits=14, decimal_places=2)
    you_borrowed = serializers.DecimalField(max_digits=14, decimal_places=2)
    net_loans = serializers.DecimalField(max_digits=14, decimal_places=2)
    settlement_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_settlements = serializers.IntegerField()
    total_transactions = serializers.IntegerField()
    status = serializers.ChoiceField(choices=['owed', 'owes', 'settled'])


class CategoryBucketSerializer(serializers.Serializer):
    """Nested serializer for one category bucket."""
    name = serializers.CharField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    percentage = serializers.IntegerField()


class MonthlyStatsSerializer(serializers.Serializer):
    """Response serializer for monthly statistics."""
    month = serializers.IntegerField()
    year = serializers.IntegerField()
    total_expenses = serializers.DecimalField(max_digits=14, decimal_places=2)
    transaction_count = serializers.IntegerField()
    average_expense = serializers.DecimalField(max_digits=14, decimal_places=2)
    categories = CategoryBucketSerializer(many=True)
    has_data = serializers.BooleanField()


class BudgetProgressSerializer(serializers.Serializer):
    """Response serializer for budget progress."""
    total_spent = serializers.DecimalField(max_digits=14, decimal_places=2)
    monthly_budget = serializers.DecimalField(max_digits=14, decimal_places=2)
    remaining = serializers.DecimalField(max_digits=14, decimal_places=2)
    budget_percentage = serializers.IntegerField()
    pace = serializers.ChoiceField(choices=['excellent', 'good', 'on_track', 'careful', 'limit'])


class DashboardGroupSerializer(serializers.Serializer):
    """Nested serializer for the group in the dashboard."""
    id = serializers.CharField()
    name = serializers.CharField()
    currency = serializers.CharField()


class DashboardResponseSerializer(serializers.Serializer):
    """Response serializer for the dashboard summary."""
    group = DashboardGroupSerializer()
    balance = BalanceSerializer()
    monthly_stats = MonthlyStatsSerializer()
    budget = BudgetProgressSerializer()


class ErrorSerializer(serializers.Serializer):
    """Standard error response serializer."""
    error = serializers.CharField()
