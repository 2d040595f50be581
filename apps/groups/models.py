# ==========================================
# apps/groups/models.py
# ==========================================

from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid


# Identifier of the synthesized personal pseudo-group
PERSONAL_GROUP_ID = 'personal'


def is_personal_group_id(group_id):
    """Personal scope is addressed as ``'personal'`` or by omitting the group."""
    return group_id in (None, '', PERSONAL_GROUP_ID)


class GroupRole(models.TextChoices):
    ADMIN = 'admin', 'Admin'
    MEMBER = 'member', 'Member'


class InvitationStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    USED = 'used', 'Used'


class Group(models.Model):
    """Named collection of members sharing expenses."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    # Display hints
    emoji = models.CharField(max_length=16, default='🏠')
    color = models.CharField(max_length=32, default='emerald')

    # Label only, amounts are never converted
    currency = models.CharField(max_length=3, default='EUR')
    monthly_budget = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    created_by = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='created_groups')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    is_personal = False

    class Meta:
        db_table = 'groups'
        indexes = [
            models.Index(fields=['created_by', 'created_at'], name='groups_creator_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    def has_member(self, user):
        return self.memberships.filter(user=user).exists()

    def get_user_role(self, user):
        try:
            return self.memberships.get(user=user).role
        except GroupMembership.DoesNotExist:
            return None

    def is_admin(self, user):
        return self.get_user_role(user) == GroupRole.ADMIN

    def get_budget_amount(self):
        """Unset budgets count as zero."""
        return self.monthly_budget or Decimal('0.00')


class GroupMembership(models.Model):
    """User membership in a group with role."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='group_memberships')
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='memberships')
    role = models.CharField(max_length=20, choices=GroupRole.choices, default=GroupRole.MEMBER)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'group_members'
        unique_together = [['user', 'group']]
        indexes = [
            models.Index(fields=['group', 'role'], name='group_members_role_idx'),
            models.Index(fields=['user', 'joined_at'], name='group_members_joined_idx'),
        ]
        ordering = ['joined_at']

    def __str__(self):
        return f"{self.user.get_display_name()} in {self.group.name} ({self.role})"

    def save(self, *args, **kwargs):
        if self.group.created_by_id == self.user_id:
            self.role = GroupRole.ADMIN
        super().save(*args, **kwargs)


class Invitation(models.Model):
    """Single-use invitation link into a group."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    token = models.CharField(max_length=64, unique=True, db_index=True, editable=False)
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='invitations')
    email = models.EmailField(blank=True)
    created_by = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='sent_invitations')
    status = models.CharField(max_length=20, choices=InvitationStatus.choices, default=InvitationStatus.PENDING)
    expires_at = models.DateTimeField()
    used_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='used_invitations'
    )
    used_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'invitations'
        indexes = [
            models.Index(fields=['created_by', 'created_at'], name='invitations_creator_idx'),
            models.Index(fields=['group', 'status'], name='invitations_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"Invitation to {self.group.name} ({self.status})"

    def is_expired(self, now=None):
        return (now or timezone.now()) >= self.expires_at

    def mark_used(self, user):
        self.status = InvitationStatus.USED
        self.used_by = user
        self.used_at = timezone.now()
        self.save(update_fields=['status', 'used_by', 'used_at'])


class PersonalGroup:
    """
    The always-present personal pseudo-group.

    Synthesized per request, never persisted. It contains exactly the
    current user and has no deletion path.
    """

    id = PERSONAL_GROUP_ID
    name = 'Personal'
    description = ''
    emoji = '💰'
    color = 'emerald'
    currency = 'EUR'
    monthly_budget = None
    is_personal = True

    def __init__(self, user):
        self.user = user
        self.created_by = user
        self.created_by_id = user.id

    def __str__(self):
        return self.name

    def get_members(self):
        return [self.user]

    def has_member(self, user):
        return user.id == self.user.id

    def get_budget_amount(self):
        return Decimal('0.00')
