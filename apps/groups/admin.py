# ==========================================
# apps/groups/admin.py
# ==========================================

from django.contrib import admin
from django.utils import timezone
from apps.groups.models import Group, GroupMembership, Invitation, InvitationStatus


class GroupMembershipInline(admin.TabularInline):
    """Inline admin for group memberships."""
    model = GroupMembership
    extra = 0
    fields = ['user', 'role', 'joined_at']
    readonly_fields = ['joined_at']


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    """Admin interface for Groups."""

    list_display = [
        'name',
        'emoji',
        'created_by',
        'member_count',
        'currency',
        'monthly_budget',
        'created_at'
    ]
    list_filter = ['currency', 'created_at']
    search_fields = ['name', 'description', 'created_by__email']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [GroupMembershipInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'description', 'created_by')
        }),
        ('Display', {
            'fields': ('emoji', 'color')
        }),
        ('Budget', {
            'fields': ('currency', 'monthly_budget')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def member_count(self, obj):
        """Show number of members."""
        return obj.memberships.count()
    member_count.short_description = 'Members'


@admin.register(GroupMembership)
class GroupMembershipAdmin(admin.ModelAdmin):
    """Admin interface for Group Memberships."""

    list_display = ['user', 'group', 'role', 'joined_at']
    list_filter = ['role', 'joined_at']
    search_fields = ['user__email', 'group__name']
    readonly_fields = ['joined_at']
    date_hierarchy = 'joined_at'
    ordering = ['-joined_at']

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('user', 'group')


@admin.register(Invitation)
class InvitationAdmin(admin.ModelAdmin):
    """Admin interface for Invitations."""

    list_display = ['group', 'email', 'created_by', 'status', 'expires_at', 'used_by']
    list_filter = ['status', 'created_at']
    search_fields = ['group__name', 'email', 'created_by__email']
    readonly_fields = ['token', 'used_by', 'used_at', 'created_at']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    actions = ['expire_now']

    def expire_now(self, request, queryset):
        """Expire selected pending invitations immediately."""
        updated = queryset.filter(status=InvitationStatus.PENDING).update(expires_at=timezone.now())
        self.message_user(request, f"Expired {updated} invitations")
    expire_now.short_description = "Expire selected invitations"

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('group', 'created_by', 'used_by')
