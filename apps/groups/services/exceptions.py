"""
Domain-specific exceptions for groups app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class GroupsServiceError(Exception):
    """Base exception for all groups service errors."""
    pass


class GroupNotFoundError(GroupsServiceError):
    """Raised when a group does not exist or is inaccessible."""
    pass


class PersonalGroupError(GroupsServiceError):
    """Raised when an operation is not possible on the personal pseudo-group."""
    pass


class AlreadyMemberError(GroupsServiceError):
    """Raised when a user tries to join a group they're already in."""
    pass


class NotMemberError(GroupsServiceError):
    """Raised when a user tries to perform an action requiring membership."""
    pass


class InvitationNotFoundError(GroupsServiceError):
    """Raised when an invitation token is unknown."""
    pass


class InvitationExpiredError(GroupsServiceError):
    """Raised when an invitation is past its expiry date."""
    pass


class InvitationUsedError(GroupsServiceError):
    """Raised when an invitation has already been redeemed."""
    pass


class InsufficientPermissionsError(GroupsServiceError):
    """Raised when a user lacks required permissions for an action."""
    pass
