from rest_framework import serializers
from .models import Group, GroupMembership, Invitation
from apps.accounts.models import User


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class GroupSerializer(serializers.Serializer):
    """
    Read serializer for real groups and the personal pseudo-group.

    The personal group is not a model instance, so fields are declared
    explicitly instead of through ModelSerializer.
    """

    id = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True)
    emoji = serializers.CharField(read_only=True)
    color = serializers.CharField(read_only=True)
    currency = serializers.CharField(read_only=True)
    monthly_budget = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True, allow_null=True
    )
    is_personal = serializers.BooleanField(read_only=True)
    created_by = UserMinimalSerializer(read_only=True)
    members = serializers.SerializerMethodField()
    user_role = serializers.SerializerMethodField()

    def get_members(self, obj):
        """Members as id + display name."""
        if obj.is_personal:
            users = obj.get_members()
        else:
            users = [m.user for m in obj.memberships.all()]
        return [
            {'id': str(u.id), 'display_name': u.get_display_name()}
            for u in users
        ]

    def get_user_role(self, obj):
        """Get current user's role in the group."""
        if obj.is_personal:
            return None
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.get_user_role(request.user)
        return None


class GroupCreateSerializer(serializers.ModelSerializer):
    """Serializer for creating groups."""

    class Meta:
        model = Group
        fields = ['name', 'description', 'emoji', 'color', 'currency']
        extra_kwargs = {
            'description': {'required': False},
            'emoji': {'required': False},
            'color': {'required': False},
            'currency': {'required': False},
        }

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Group name is required")
        return value.strip()


class GroupMemberSerializer(serializers.ModelSerializer):
    """Detailed member information."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = GroupMembership
        fields = ['id', 'user', 'role', 'joined_at']
        read_only_fields = fields


class InvitationSerializer(serializers.ModelSerializer):
    """Serializer for issued invitations."""

    created_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Invitation
        fields = ['token', 'group', 'email', 'status', 'created_by', 'expires_at', 'created_at']
        read_only_fields = fields


class InviteMemberSerializer(serializers.Serializer):
    """Serializer for inviting someone into a group."""

    email = serializers.EmailField(required=False, allow_blank=True)


class GroupBudgetSerializer(serializers.Serializer):
    """Serializer for setting a group's monthly budget."""

    monthly_budget = serializers.DecimalField(max_digits=12, decimal_places=2)

    def validate_monthly_budget(self, value):
        if value < 0:
            raise serializers.ValidationError("Budget cannot be negative")
        return value
