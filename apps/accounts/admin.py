# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Users with the name shown in split lists and their unlock count."""

    list_display = ['email', 'get_shown_name', 'get_unlocked_count', 'is_active', 'created_at']
    list_filter = ['is_active', 'is_staff']
    search_fields = ['email', 'display_name']
    ordering = ['-created_at']
    readonly_fields = ['created_at', 'last_login']

    # No username field on this model
    fieldsets = (
        (None, {'fields': ('email', 'display_name', 'password')}),
        ('Access', {'fields': ('is_active', 'is_staff', 'is_superuser')}),
        ('Activity', {'fields': ('created_at', 'last_login')}),
    )
    add_fieldsets = (
        (None, {'fields': ('email', 'display_name', 'password1', 'password2')}),
    )
    filter_horizontal = []

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.annotate(unlocked_count=Count('achievements'))

    def get_shown_name(self, obj):
        return obj.get_display_name()
    get_shown_name.short_description = 'Shown as'

    def get_unlocked_count(self, obj):
        return obj.unlocked_count
    get_unlocked_count.short_description = 'Achievements'
    get_unlocked_count.admin_order_field = 'unlocked_count'
