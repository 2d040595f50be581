"""
Membership management service.

Read-side helpers for group membership and the membership guard used by
every group-scoped operation.
"""

from typing import List

from apps.accounts.models import User
from apps.groups.models import GroupMembership

from .exceptions import NotMemberError
from .group_management import resolve_group


def get_group_members(*, group_id, user: User) -> List[User]:
    """
    Get all members of a group visible to ``user``.

    The personal pseudo-group has exactly one member, the requesting user.

    Args:
        group_id: UUID of the group or ``'personal'``
        user: User requesting the list (must be a member)

    Returns:
        List of User instances, admins first then by join date

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not a member
    """
    group = resolve_group(group_id=group_id, user=user)
    if group.is_personal:
        return group.get_members()

    memberships = (
        GroupMembership.objects
        .filter(group=group)
        .select_related('user')
        .order_by('role', 'joined_at')
    )
    return [membership.user for membership in memberships]


def require_membership(*, group, users) -> None:
    """
    Ensure every given user belongs to an already resolved group.

    The personal pseudo-group admits only its owner.

    Raises:
        NotMemberError: If any user is outside the group
    """
    users = [u for u in users if u is not None]
    if group.is_personal:
        outsiders = [u for u in users if not group.has_member(u)]
    else:
        member_ids = set(
            GroupMembership.objects
            .filter(group=group, user__in=users)
            .values_list('user_id', flat=True)
        )
        outsiders = [u for u in users if u.id not in member_ids]

    if outsiders:
        names = ', '.join(u.get_display_name() for u in outsiders)
        raise NotMemberError(f"Not a member of {group.name}: {names}")
