"""
Group management service.

Handles group CRUD operations with proper transaction safety.
"""

import logging
from typing import List, Union
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Prefetch

from apps.accounts.models import User
from apps.accounts.signals import ActivityEvent, emit_after_commit
from apps.groups.models import (
    Group,
    GroupMembership,
    GroupRole,
    PersonalGroup,
    is_personal_group_id,
)

from .exceptions import (
    GroupNotFoundError,
    NotMemberError,
    PersonalGroupError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)


def create_group(
    *,
    name: str,
    created_by: User,
    description: str = '',
    emoji: str = '',
    color: str = '',
    currency: str = '',
) -> Group:
    """
    Create a new group and add the creator as admin.

    This is a multi-step operation wrapped in a transaction:
    1. Create the group
    2. Create the creator's admin membership
    3. Announce ``create_group`` once committed

    Args:
        name: Group name (required)
        created_by: User creating the group
        description: Optional group description
        emoji: Display emoji, defaults to the model default
        color: Display color, defaults to the model default
        currency: Currency label, defaults to the model default

    Returns:
        Created Group instance
    """
    if not name or not name.strip():
        raise ValueError("Group name is required")

    fields = {'name': name.strip(), 'description': description or ''}
    # Blank display hints fall back to model defaults
    if emoji:
        fields['emoji'] = emoji
    if color:
        fields['color'] = color
    if currency:
        fields['currency'] = currency.upper()

    with transaction.atomic():
        group = Group.objects.create(created_by=created_by, **fields)

        GroupMembership.objects.create(
            user=created_by,
            group=group,
            role=GroupRole.ADMIN
        )

        emit_after_commit(
            sender=Group,
            user_id=created_by.id,
            event=ActivityEvent.CREATE_GROUP,
        )

    logger.info("Group %s created by %s", group.id, created_by.id)
    return group


def get_group_by_id(*, group_id: UUID) -> Group:
    """
    Get a group by ID with optimized queries.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    try:
        return (
            Group.objects
            .select_related('created_by')
            .prefetch_related(
                Prefetch(
                    'memberships',
                    queryset=GroupMembership.objects.select_related('user')
                )
            )
            .get(id=group_id)
        )
    except (Group.DoesNotExist, ValidationError, ValueError):
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def resolve_group(*, group_id, user: User) -> Union[Group, PersonalGroup]:
    """
    Resolve a group identifier to the group the user is allowed to see.

    ``'personal'`` (or no id) resolves to the user's personal pseudo-group.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not a member of the group
    """
    if is_personal_group_id(group_id):
        return PersonalGroup(user)

    group = get_group_by_id(group_id=group_id)
    if not group.has_member(user):
        raise NotMemberError(f"User is not a member of {group.name}")
    return group


def get_user_groups(*, user: User) -> List[Union[Group, PersonalGroup]]:
    """
    List every group visible to the user.

    The personal pseudo-group always comes first, followed by the real
    groups the user is a member of (newest first).
    """
    groups = (
        Group.objects
        .filter(memberships__user=user)
        .select_related('created_by')
        .prefetch_related(
            Prefetch(
                'memberships',
                queryset=GroupMembership.objects.select_related('user')
            )
        )
        .distinct()
    )
    return [PersonalGroup(user), *groups]


@transaction.atomic
def delete_group(*, group_id, user: User) -> None:
    """
    Delete a group (creator only).

    Rows are removed in a fixed order: memberships, then the group's
    transactions (their splits cascade), then the group row itself.

    Args:
        group_id: UUID of the group
        user: User requesting deletion (must be the creator)

    Raises:
        PersonalGroupError: If the personal pseudo-group is targeted
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not the creator
    """
    from apps.transactions.models import Transaction

    if is_personal_group_id(group_id):
        raise PersonalGroupError("The personal group cannot be deleted")

    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except (Group.DoesNotExist, ValidationError, ValueError):
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if group.created_by_id != user.id:
        raise InsufficientPermissionsError("Only the group creator can delete the group")

    GroupMembership.objects.filter(group=group).delete()
    Transaction.objects.filter(group=group).delete()
    group.delete()

    logger.info("Group %s deleted by %s", group_id, user.id)
