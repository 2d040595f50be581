import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.achievements.models import Achievement
from apps.groups.models import Group, GroupMembership, GroupRole
from apps.transactions.models import Transaction, TransactionKind


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def achiever(db):
    """Create and return the user collecting achievements."""
    return User.objects.create_user(
        email='achiever@example.com',
        password='TestPass123!',
        display_name='Ada Achiever',
    )


@pytest.fixture
def achiever_client(api_client, achiever):
    """Return API client authenticated as the achiever."""
    refresh = RefreshToken.for_user(achiever)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def empty_catalogue(db):
    """Remove the seeded catalogue so tests control every achievement."""
    Achievement.objects.all().delete()


@pytest.fixture
def first_expense_achievement(empty_catalogue):
    return Achievement.objects.create(
        code='first_receipt',
        title='First Receipt',
        description='Record an expense',
        trigger_event='add_expense',
        condition={'type': 'count', 'metric': 'expenses', 'target': 1},
    )


@pytest.fixture
def budget_achievement(empty_catalogue):
    return Achievement.objects.create(
        code='thrifty',
        title='Thrifty',
        description='Stay under budget',
        scope='personal',
        trigger_event='month_end',
        condition={'type': 'budget', 'condition': 'under_limit'},
    )


@pytest.fixture
def budget_groups(db, achiever):
    """Two groups created by the achiever with budgets of 300 and 200."""
    groups = []
    for name, budget in [('Flat', Decimal('300.00')), ('Trip', Decimal('200.00'))]:
        group = Group.objects.create(name=name, created_by=achiever, monthly_budget=budget)
        GroupMembership.objects.create(user=achiever, group=group, role=GroupRole.ADMIN)
        groups.append(group)
    return groups


@pytest.fixture
def record_expense(achiever):
    """Factory creating an expense recorded by the achiever."""
    def _record(amount, group=None):
        return Transaction.objects.create(
            title='Expense',
            amount=Decimal(amount),
            kind=TransactionKind.EXPENSE,
            paid_by=achiever,
            tag='expense',
            group=group,
            created_by=achiever,
        )
    return _record


@pytest.fixture
def stranger(db):
    """Create and return another user."""
    return User.objects.create_user(
        email='stranger@example.com',
        password='TestPass123!',
        display_name='Sol Stranger',
    )
