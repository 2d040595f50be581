# ==========================================
# apps/achievements/models.py
# ==========================================

from django.db import models
import uuid

from apps.accounts.signals import ActivityEvent


class AchievementScope(models.TextChoices):
    GLOBAL = 'global', 'Global'
    GROUP = 'group', 'Group'
    PERSONAL = 'personal', 'Personal'


class Achievement(models.Model):
    """
    Declarative badge from the seeded catalogue.

    ``condition`` is a JSON descriptor evaluated by
    :mod:`apps.achievements.conditions`, e.g.
    ``{"type": "count", "metric": "expenses", "target": 10}`` or
    ``{"type": "budget", "condition": "under_limit", "months": 1}``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.SlugField(max_length=64, unique=True)
    title = models.CharField(max_length=100)
    description = models.CharField(max_length=255, blank=True)
    emoji = models.CharField(max_length=16, default='🏆')
    scope = models.CharField(max_length=20, choices=AchievementScope.choices, default=AchievementScope.GLOBAL)
    trigger_event = models.CharField(max_length=32, choices=ActivityEvent.choices, db_index=True)
    condition = models.JSONField(default=dict)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'achievements'
        ordering = ['trigger_event', 'title']

    def __str__(self):
        return f"{self.emoji} {self.title}"


class UserAchievement(models.Model):
    """An achievement a user unlocked. Written once, never updated."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='achievements')
    achievement = models.ForeignKey(Achievement, on_delete=models.CASCADE, related_name='unlocks')
    unlocked_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'user_achievements'
        unique_together = [['user', 'achievement']]
        indexes = [
            models.Index(fields=['user', 'unlocked_at'], name='user_achievements_user_idx'),
        ]
        ordering = ['-unlocked_at']

    def __str__(self):
        return f"{self.user.get_display_name()} unlocked {self.achievement.title}"
