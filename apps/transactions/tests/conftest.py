import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole
from apps.transactions.models import Transaction, TransactionKind


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def expense_payer(db):
    """Create and return a user who pays expenses."""
    return User.objects.create_user(
        email='payer@example.com',
        password='TestPass123!',
        display_name='Ana Payer',
    )


@pytest.fixture
def flatmate(db):
    """Create and return a group member."""
    return User.objects.create_user(
        email='flatmate@example.com',
        password='TestPass123!',
        display_name='Ben Flatmate',
    )


@pytest.fixture
def second_flatmate(db):
    """Create and return another group member."""
    return User.objects.create_user(
        email='flatmate2@example.com',
        password='TestPass123!',
        display_name='Cleo Flatmate',
    )


@pytest.fixture
def transaction_outsider(db):
    """Create and return a user not in any group."""
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
        display_name='Outsider User',
    )


@pytest.fixture
def payer_client(api_client, expense_payer):
    """Return API client authenticated as payer."""
    refresh = RefreshToken.for_user(expense_payer)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def flatmate_client(api_client, flatmate):
    """Return API client authenticated as flatmate."""
    refresh = RefreshToken.for_user(flatmate)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def outsider_client(api_client, transaction_outsider):
    """Return API client authenticated as outsider."""
    refresh = RefreshToken.for_user(transaction_outsider)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def flat_group(db, expense_payer, flatmate, second_flatmate):
    """Create a group with the payer as admin and two members."""
    group = Group.objects.create(
        name='Flat 4B',
        description='Shared flat expenses',
        created_by=expense_payer,
    )
    GroupMembership.objects.create(user=expense_payer, group=group, role=GroupRole.ADMIN)
    GroupMembership.objects.create(user=flatmate, group=group, role=GroupRole.MEMBER)
    GroupMembership.objects.create(user=second_flatmate, group=group, role=GroupRole.MEMBER)
    return group


@pytest.fixture
def personal_expense(db, expense_payer):
    """Create a personal (non-group) expense."""
    return Transaction.objects.create(
        title='Coffee',
        amount=Decimal('3.50'),
        kind=TransactionKind.EXPENSE,
        paid_by=expense_payer,
        tag='expense',
        created_by=expense_payer,
    )


@pytest.fixture
def group_expense(db, flat_group, expense_payer):
    """Create an unsplit group expense."""
    return Transaction.objects.create(
        title='Cleaning supplies',
        amount=Decimal('24.00'),
        kind=TransactionKind.EXPENSE,
        paid_by=expense_payer,
        tag='expense',
        group=flat_group,
        created_by=expense_payer,
    )
