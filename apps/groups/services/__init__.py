"""
Groups app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions.
"""

from .exceptions import (
    GroupsServiceError,
    GroupNotFoundError,
    PersonalGroupError,
    AlreadyMemberError,
    NotMemberError,
    InvitationNotFoundError,
    InvitationExpiredError,
    InvitationUsedError,
    InsufficientPermissionsError,
)

from .group_management import (
    create_group,
    delete_group,
    get_group_by_id,
    get_user_groups,
    resolve_group,
)

from .membership_management import (
    get_group_members,
    require_membership,
)

from .invite_management import (
    invite_member,
    accept_invitation,
    get_pending_invitations,
)


__all__ = [
    # Exceptions
    'GroupsServiceError',
    'GroupNotFoundError',
    'PersonalGroupError',
    'AlreadyMemberError',
    'NotMemberError',
    'InvitationNotFoundError',
    'InvitationExpiredError',
    'InvitationUsedError',
    'InsufficientPermissionsError',

    # Group Management
    'create_group',
    'delete_group',
    'get_group_by_id',
    'get_user_groups',
    'resolve_group',

    # Membership Management
    'get_group_members',
    'require_membership',

    # Invite Management
    'invite_member',
    'accept_invitation',
    'get_pending_invitations',
]
