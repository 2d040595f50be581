"""
Budget services.

Personal budgets are one row per user; group budgets are a field on the
group. Both are upserted in place.
"""

import logging
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.accounts.models import User
from apps.groups.models import Group, is_personal_group_id
from apps.groups.services import (
    GroupNotFoundError,
    InsufficientPermissionsError,
    PersonalGroupError,
)

from .exceptions import InvalidBudgetError
from .models import Budget

logger = logging.getLogger(__name__)


def _clean_amount(amount) -> Decimal:
    try:
        amount = Decimal(str(amount))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidBudgetError(f"Invalid budget amount: {amount!r}")

    if not amount.is_finite() or amount < 0:
        raise InvalidBudgetError("Budget cannot be negative")
    return amount.quantize(Decimal('0.01'))


def upsert_user_budget(*, user: User, amount) -> Budget:
    """
    Create the user's budget, or update it if one exists.

    Raises:
        InvalidBudgetError: If amount is negative or not a number
    """
    amount = _clean_amount(amount)
    budget, created = Budget.objects.update_or_create(
        user=user,
        defaults={'amount': amount},
    )
    logger.info("Budget of %s %s: %s", user.id, 'created' if created else 'updated', amount)
    return budget


def get_budget(*, owner):
    """
    Budget amount of a user or a group.

    Args:
        owner: A User, a Group or the personal pseudo-group

    Returns:
        Decimal amount, or None when no budget is set
    """
    if isinstance(owner, User):
        budget = Budget.objects.filter(user=owner).first()
        return budget.amount if budget else None
    return owner.monthly_budget


@transaction.atomic
def update_group_budget(*, group_id, user: User, amount) -> Group:
    """
    Set a group's monthly budget (admins only).

    Args:
        group_id: UUID of the group
        user: User changing the budget (must be admin)
        amount: New non-negative budget

    Returns:
        Updated Group instance

    Raises:
        PersonalGroupError: If the personal pseudo-group is targeted
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not an admin
        InvalidBudgetError: If amount is negative or not a number
    """
    if is_personal_group_id(group_id):
        raise PersonalGroupError("The personal group has no group budget")

    amount = _clean_amount(amount)

    try:
        group = Group.objects.select_for_update().get(id=group_id)
    except (Group.DoesNotExist, ValidationError, ValueError):
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.is_admin(user):
        raise InsufficientPermissionsError("Only group admins can change the budget")

    group.monthly_budget = amount
    group.save(update_fields=['monthly_budget', 'updated_at'])

    logger.info("Budget of group %s set to %s by %s", group.id, amount, user.id)
    return group
