"""
Signal receivers connecting user activity to the achievement engine.

Connected in ``AchievementsConfig.ready``.
"""

import logging

from django.conf import settings
from django.dispatch import receiver

from apps.accounts.signals import user_activity
from .engine import check_achievements
from .signals import achievement_unlocked

logger = logging.getLogger(__name__)


@receiver(user_activity, dispatch_uid='achievements.check_on_user_activity')
def check_on_user_activity(sender, user_id, event, **kwargs):
    """Run the achievement check for the event the user just triggered."""
    if not getattr(settings, 'ACHIEVEMENTS_ENABLED', True):
        return
    check_achievements(user_id, event)


@receiver(achievement_unlocked, dispatch_uid='achievements.log_unlock')
def log_unlock(sender, user_achievement, **kwargs):
    achievement = user_achievement.achievement
    logger.info(
        "🎉 Achievement unlocked for user %s: %s %s - %s",
        user_achievement.user_id, achievement.emoji, achievement.title, achievement.description
    )
