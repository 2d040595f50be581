"""
Achievement condition evaluators.

Each achievement stores a JSON descriptor whose ``type`` selects an
evaluator from the registry below. Evaluators return True when the
condition holds for the user. Malformed or unknown descriptors evaluate
to False; database errors propagate to the engine.

Descriptors:
    ``{"type": "count", "metric": "expenses", "target": 10}``
        The user created at least ``target`` rows of ``metric``
        (``expenses``, ``groups`` or ``invitations``).
    ``{"type": "budget", "condition": "under_limit", "months": 1}``
        The user's expenses stayed within the summed monthly budgets of
        the groups they created, in each of the last ``months`` calendar
        months (the current one included).
"""

import logging
from datetime import datetime
from decimal import Decimal

from django.db.models import Sum
from django.utils import timezone

from apps.groups.models import Group
from apps.transactions.models import Transaction, TransactionKind
from apps.transactions.services import TransactionService

logger = logging.getLogger(__name__)

COUNT_METRICS = ('expenses', 'groups', 'invitations')

_evaluators = {}


def register_condition(condition_type):
    """Register an evaluator ``(user, condition, today) -> bool``."""
    def decorator(func):
        _evaluators[condition_type] = func
        return func
    return decorator


def evaluate_condition(condition, user, today=None):
    """
    Evaluate a condition descriptor for a user.

    Args:
        condition (dict): The achievement's descriptor.
        user (User): The user being checked.
        today (date, optional): Reference day for month windows.

    Returns:
        bool: Whether the condition holds. Unknown types are False.
    """
    if not isinstance(condition, dict):
        return False
    evaluator = _evaluators.get(condition.get('type'))
    if evaluator is None:
        logger.warning("Unknown achievement condition type: %r", condition.get('type'))
        return False
    return evaluator(user, condition, today or timezone.localdate())


def _positive_int(value):
    try:
        value = int(value)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


@register_condition('count')
def count_condition(user, condition, today):
    metric = condition.get('metric')
    target = _positive_int(condition.get('target'))
    if metric not in COUNT_METRICS or target is None:
        return False
    return TransactionService.count_rows(collection=metric, user=user) >= target


def month_bounds(year, month):
    """Start of the month and start of the next one, in the active time zone."""
    start = timezone.make_aware(datetime(year, month, 1))
    if month == 12:
        end = timezone.make_aware(datetime(year + 1, 1, 1))
    else:
        end = timezone.make_aware(datetime(year, month + 1, 1))
    return start, end


def previous_months(today, count):
    """``(year, month)`` pairs from the current month backwards."""
    year, month = today.year, today.month
    for _ in range(count):
        yield year, month
        month -= 1
        if month == 0:
            year, month = year - 1, 12


def total_group_budget(user):
    """Summed monthly budgets of the groups the user created (unset counts as 0)."""
    total = Group.objects.filter(created_by=user).aggregate(total=Sum('monthly_budget'))['total']
    return total or Decimal('0.00')


def spent_in_month(user, year, month):
    """Expenses the user created in the given calendar month."""
    start, end = month_bounds(year, month)
    total = Transaction.objects.filter(
        kind=TransactionKind.EXPENSE,
        created_by=user,
        created_at__gte=start,
        created_at__lt=end,
    ).aggregate(total=Sum('amount'))['total']
    return total or Decimal('0.00')


@register_condition('budget')
def budget_condition(user, condition, today):
    if condition.get('condition') != 'under_limit':
        return False
    months = _positive_int(condition.get('months', 1))
    if months is None:
        return False

    budget = total_group_budget(user)
    return all(
        spent_in_month(user, year, month) <= budget
        for year, month in previous_months(today, months)
    )
