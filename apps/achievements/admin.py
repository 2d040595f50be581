# ==========================================
# apps/achievements/admin.py
# ==========================================

from django.contrib import admin
from .models import Achievement, UserAchievement


@admin.register(Achievement)
class AchievementAdmin(admin.ModelAdmin):
    """Admin interface for the achievement catalogue."""

    list_display = ['emoji', 'title', 'code', 'scope', 'trigger_event', 'get_unlock_count']
    list_filter = ['scope', 'trigger_event']
    search_fields = ['code', 'title', 'description']
    readonly_fields = ['created_at']
    ordering = ['trigger_event', 'title']

    def get_unlock_count(self, obj):
        return obj.unlocks.count()
    get_unlock_count.short_description = 'Unlocks'


@admin.register(UserAchievement)
class UserAchievementAdmin(admin.ModelAdmin):
    """Unlocks are written by the engine only."""

    list_display = ['user', 'achievement', 'unlocked_at']
    list_filter = ['achievement', 'unlocked_at']
    search_fields = ['user__email', 'user__display_name', 'achievement__title']
    readonly_fields = ['user', 'achievement', 'unlocked_at']
    date_hierarchy = 'unlocked_at'

    def has_add_permission(self, request):
        return False

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('user', 'achievement')
