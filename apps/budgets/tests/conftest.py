import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def budget_owner(db):
    """Create and return a user who manages budgets."""
    return User.objects.create_user(
        email='saver@example.com',
        password='TestPass123!',
        display_name='Sam Saver',
    )


@pytest.fixture
def budget_member(db):
    """Create and return a plain group member."""
    return User.objects.create_user(
        email='spender@example.com',
        password='TestPass123!',
        display_name='Sid Spender',
    )


@pytest.fixture
def owner_client(api_client, budget_owner):
    """Return API client authenticated as the budget owner."""
    refresh = RefreshToken.for_user(budget_owner)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def budget_group(db, budget_owner, budget_member):
    """Group administered by the budget owner."""
    group = Group.objects.create(name='Household', created_by=budget_owner)
    GroupMembership.objects.create(user=budget_owner, group=group, role=GroupRole.ADMIN)
    GroupMembership.objects.create(user=budget_member, group=group, role=GroupRole.MEMBER)
    return group
