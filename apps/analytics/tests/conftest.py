import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole
from apps.transactions.models import Transaction, TransactionKind, TransactionSplit


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def analytics_user(db):
    """Create the main analytics test user."""
    return User.objects.create_user(
        email='analytics_user@example.com',
        password='TestPass123!',
        display_name='Analytics User',
    )


@pytest.fixture
def analytics_member(db):
    """Create a group member for analytics tests."""
    return User.objects.create_user(
        email='analytics_member@example.com',
        password='TestPass123!',
        display_name='Analytics Member',
    )


@pytest.fixture
def analytics_outsider(db):
    """Create a user not in any group."""
    return User.objects.create_user(
        email='analytics_outsider@example.com',
        password='TestPass123!',
        display_name='Analytics Outsider',
    )


@pytest.fixture
def analytics_client(api_client, analytics_user):
    """Return API client authenticated as the main user."""
    refresh = RefreshToken.for_user(analytics_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def outsider_client(api_client, analytics_outsider):
    """Return API client authenticated as the outsider."""
    refresh = RefreshToken.for_user(analytics_outsider)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


# =============================================================================
# Groups and ledger
# =============================================================================

@pytest.fixture
def analytics_group(db, analytics_user, analytics_member):
    """Two-member group with a monthly budget of 500."""
    group = Group.objects.create(
        name='Analytics Group',
        created_by=analytics_user,
        monthly_budget=Decimal('500.00'),
    )
    GroupMembership.objects.create(user=analytics_user, group=group, role=GroupRole.ADMIN)
    GroupMembership.objects.create(user=analytics_member, group=group, role=GroupRole.MEMBER)
    return group


@pytest.fixture
def split_expense(db, analytics_group, analytics_user, analytics_member):
    """100.00 paid by the main user, split 50/50."""
    expense = Transaction.objects.create(
        title='Groceries',
        amount=Decimal('100.00'),
        kind=TransactionKind.EXPENSE,
        paid_by=analytics_user,
        split_between=['Analytics User', 'Analytics Member'],
        category='Food',
        tag='expense',
        group=analytics_group,
        created_by=analytics_user,
    )
    TransactionSplit.objects.create(transaction=expense, user=analytics_user, amount=Decimal('50.00'))
    TransactionSplit.objects.create(transaction=expense, user=analytics_member, amount=Decimal('50.00'))
    return expense


@pytest.fixture
def group_loan(db, analytics_group, analytics_user, analytics_member):
    """20.00 lent by the main user."""
    return Transaction.objects.create(
        title='Loan',
        amount=Decimal('20.00'),
        kind=TransactionKind.LOAN,
        paid_by=analytics_user,
        loaned_to=analytics_member,
        tag='loan',
        group=analytics_group,
        created_by=analytics_user,
    )


@pytest.fixture
def personal_expense(db, analytics_user):
    """Unsplit personal expense of 60.00."""
    return Transaction.objects.create(
        title='Shoes',
        amount=Decimal('60.00'),
        kind=TransactionKind.EXPENSE,
        paid_by=analytics_user,
        tag='expense',
        created_by=analytics_user,
    )
