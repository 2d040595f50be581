"""
Custom permission classes for transactions app.
"""
from rest_framework.permissions import BasePermission


class IsGroupMemberForTransaction(BasePermission):
    """
    Permission to view a ledger entry.

    Allows access if:
    - Entry is personal (no group) and user created it
    - Entry is in a group and user is a member
    """

    message = 'You must be a member of this group to view this transaction.'

    def has_object_permission(self, request, view, obj):
        """Check if user can access the entry."""
        if not obj.group_id:
            return obj.created_by_id == request.user.id

        return obj.group.has_member(request.user)


class CanDeleteTransaction(BasePermission):
    """
    Permission to delete a ledger entry: creator only.
    """

    message = 'Only the creator can delete this transaction.'

    def has_object_permission(self, request, view, obj):
        return obj.created_by_id == request.user.id
