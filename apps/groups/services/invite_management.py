"""
Invite management service.

Handles invitation links: issuing single-use tokens and redeeming them.
"""

import logging
import secrets

from django.conf import settings
from django.db import transaction, IntegrityError
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.signals import ActivityEvent, emit_after_commit
from apps.groups.models import (
    GroupMembership,
    GroupRole,
    Invitation,
    InvitationStatus,
    is_personal_group_id,
)

from .exceptions import (
    AlreadyMemberError,
    InvitationExpiredError,
    InvitationNotFoundError,
    InvitationUsedError,
    NotMemberError,
    PersonalGroupError,
)
from .group_management import get_group_by_id

logger = logging.getLogger(__name__)


@transaction.atomic
def invite_member(
    *,
    group_id,
    invited_by: User,
    email: str = '',
    max_retries: int = 5
) -> Invitation:
    """
    Issue an invitation link into a group.

    Any member may invite. The invitation carries a random URL-safe token
    and expires after ``settings.INVITATION_TTL``. Delivery of the link is
    left to the caller.

    Args:
        group_id: UUID of the group
        invited_by: User issuing the invitation (must be a member)
        email: Optional address of the invitee
        max_retries: Maximum attempts to generate a unique token

    Returns:
        Created Invitation instance

    Raises:
        PersonalGroupError: If the personal pseudo-group is targeted
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If invited_by is not a member
        RuntimeError: If cannot generate unique token after retries
    """
    if is_personal_group_id(group_id):
        raise PersonalGroupError("Nobody can be invited to the personal group")

    group = get_group_by_id(group_id=group_id)
    if not group.has_member(invited_by):
        raise NotMemberError(f"User is not a member of {group.name}")

    expires_at = timezone.now() + settings.INVITATION_TTL

    invitation = None
    for attempt in range(max_retries):
        try:
            with transaction.atomic():
                invitation = Invitation.objects.create(
                    token=secrets.token_urlsafe(24),
                    group=group,
                    email=email or '',
                    created_by=invited_by,
                    expires_at=expires_at,
                )
            break
        except IntegrityError:
            # Token collision, retry
            if attempt == max_retries - 1:
                raise RuntimeError(
                    f"Failed to generate unique invitation token after {max_retries} attempts"
                )

    emit_after_commit(
        sender=Invitation,
        user_id=invited_by.id,
        event=ActivityEvent.INVITE_MEMBER,
    )

    logger.info("Invitation to group %s issued by %s", group.id, invited_by.id)
    return invitation


@transaction.atomic
def accept_invitation(*, token: str, user: User) -> GroupMembership:
    """
    Redeem an invitation token and join its group.

    The invitation row is locked so a token can only be redeemed once.

    Args:
        token: Invitation token from the link
        user: User joining the group

    Returns:
        Created GroupMembership instance

    Raises:
        InvitationNotFoundError: If token is unknown
        InvitationUsedError: If the invitation was already redeemed
        InvitationExpiredError: If the invitation is past its expiry
        AlreadyMemberError: If user already belongs to the group
    """
    try:
        invitation = (
            Invitation.objects
            .select_for_update()
            .select_related('group')
            .get(token=token)
        )
    except Invitation.DoesNotExist:
        raise InvitationNotFoundError("Invitation not found")

    if invitation.status == InvitationStatus.USED:
        raise InvitationUsedError("Invitation has already been used")

    if invitation.is_expired():
        raise InvitationExpiredError("Invitation has expired")

    group = invitation.group
    if group.has_member(user):
        raise AlreadyMemberError(f"User is already a member of {group.name}")

    try:
        with transaction.atomic():
            membership = GroupMembership.objects.create(
                user=user,
                group=group,
                role=GroupRole.MEMBER
            )
    except IntegrityError:
        # Database constraint caught duplicate membership
        raise AlreadyMemberError(f"User is already a member of {group.name}")

    invitation.mark_used(user)

    logger.info("User %s joined group %s via invitation", user.id, group.id)
    return membership


def get_pending_invitations(*, group_id, user: User):
    """List a group's unredeemed, unexpired invitations (members only)."""
    group = get_group_by_id(group_id=group_id)
    if not group.has_member(user):
        raise NotMemberError(f"User is not a member of {group.name}")

    return (
        Invitation.objects
        .filter(group=group, status=InvitationStatus.PENDING, expires_at__gt=timezone.now())
        .select_related('created_by')
    )
