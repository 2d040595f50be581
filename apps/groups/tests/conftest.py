import pytest
import secrets
from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole, Invitation


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def group_owner(db):
    """Create and return a test user (group creator)."""
    return User.objects.create_user(
        email='owner@example.com',
        password='TestPass123!',
        display_name='Group Owner',
    )


@pytest.fixture
def member_user(db):
    """Create and return a member user."""
    return User.objects.create_user(
        email='member@example.com',
        password='TestPass123!',
        display_name='Group Member',
    )


@pytest.fixture
def group_other_user(db):
    """Create and return a user not in any group."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other User',
    )


@pytest.fixture
def authenticated_client(api_client, group_owner):
    """Return API client authenticated as group owner."""
    refresh = RefreshToken.for_user(group_owner)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def member_client(api_client, member_user):
    """Return API client authenticated as group member."""
    refresh = RefreshToken.for_user(member_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def other_client(api_client, group_other_user):
    """Return API client authenticated as non-member user."""
    refresh = RefreshToken.for_user(group_other_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def group(db, group_owner):
    """Create and return a test group with creator membership."""
    group = Group.objects.create(
        name='Flat 4B',
        description='Shared flat expenses',
        created_by=group_owner,
    )
    GroupMembership.objects.create(
        user=group_owner,
        group=group,
        role=GroupRole.ADMIN,
    )
    return group


@pytest.fixture
def group_with_members(group, member_user):
    """Group with creator and one member."""
    GroupMembership.objects.create(
        user=member_user,
        group=group,
        role=GroupRole.MEMBER,
    )
    return group


@pytest.fixture
def invitation(db, group, group_owner):
    """Create and return a pending invitation."""
    return Invitation.objects.create(
        token=secrets.token_urlsafe(24),
        group=group,
        email='friend@example.com',
        created_by=group_owner,
        expires_at=timezone.now() + timedelta(days=7),
    )


@pytest.fixture
def expired_invitation(db, group, group_owner):
    """Create and return an invitation past its expiry."""
    return Invitation.objects.create(
        token=secrets.token_urlsafe(24),
        group=group,
        created_by=group_owner,
        expires_at=timezone.now() - timedelta(minutes=1),
    )
