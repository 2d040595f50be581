"""
Achievement Rule Engine
=======================

Evaluates the achievement catalogue against a user's activity and stores
every achievement whose condition newly holds.

Functions:
    find_unlockable: Locked achievements of an event whose condition holds.
    check_achievements: Evaluate and unlock, never raising to the caller.
    month_end_reference: The month a sweep on a given day judges.
    run_monthly_achievement_sweep: Run the ``month_end`` check for every
        active user.

Example:
    Triggered from a signal receiver after an expense is committed::

        from apps.achievements.engine import check_achievements

        unlocked = check_achievements(user.id, 'add_expense')
        for unlock in unlocked:
            print(f"{unlock.achievement.emoji} {unlock.achievement.title}")

Note:
    Unlocking is one-way. Already unlocked achievements are skipped before
    evaluation, and the (user, achievement) uniqueness constraint turns a
    concurrent duplicate insert into a no-op.
"""

import logging
from datetime import timedelta

from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.signals import ActivityEvent
from .conditions import evaluate_condition
from .models import Achievement, UserAchievement
from .signals import achievement_unlocked

logger = logging.getLogger(__name__)


def find_unlockable(user, trigger_event, today=None):
    """
    Locked achievements of ``trigger_event`` whose condition holds.

    An achievement whose evaluation fails is logged and skipped; the
    others are still evaluated.

    Args:
        user (User): The user being checked.
        trigger_event (str): One of the ActivityEvent values.
        today (date, optional): Reference day for month windows.

    Returns:
        list[Achievement]: Achievements ready to unlock.

    Raises:
        DatabaseError: If the catalogue or the user's unlocks cannot be loaded.
    """
    achievements = list(Achievement.objects.filter(trigger_event=trigger_event))
    unlocked_ids = set(
        UserAchievement.objects.filter(user=user).values_list('achievement_id', flat=True)
    )

    unlockable = []
    for achievement in achievements:
        if achievement.id in unlocked_ids:
            continue
        try:
            met = evaluate_condition(achievement.condition, user, today=today)
        except Exception:
            logger.exception(
                "Failed to evaluate achievement %s for user %s", achievement.code, user.id
            )
            continue
        if met:
            unlockable.append(achievement)
    return unlockable


def _unlock(user, achievement):
    """Store one unlock. Returns None when it already existed or failed."""
    try:
        with transaction.atomic():
            return UserAchievement.objects.create(user=user, achievement=achievement)
    except IntegrityError:
        logger.info("Achievement %s already unlocked by user %s", achievement.code, user.id)
    except DatabaseError:
        logger.exception("Failed to unlock achievement %s for user %s", achievement.code, user.id)
    return None


def _notify(unlock):
    responses = achievement_unlocked.send_robust(sender=UserAchievement, user_achievement=unlock)
    for receiver, response in responses:
        if isinstance(response, Exception):
            logger.error(
                "Unlock notification %r failed for %s: %s", receiver, unlock.id, response
            )


def check_achievements(user_id, trigger_event, today=None):
    """
    Unlock every achievement of ``trigger_event`` the user now qualifies for.

    Args:
        user_id (UUID | User): The user, or their id.
        trigger_event (str): ``add_expense``, ``create_group``,
            ``invite_member`` or ``month_end``.
        today (date, optional): Reference day for month windows.

    Returns:
        list[UserAchievement]: The unlocks created by this call.

    Note:
        Never raises. Loading failures end the check with an empty result,
        per-achievement failures skip that achievement. Each new unlock
        sends ``achievement_unlocked``.
    """
    user_id = getattr(user_id, 'id', user_id)
    try:
        user = User.objects.get(id=user_id)
        candidates = find_unlockable(user, trigger_event, today=today)
    except Exception:
        logger.exception("Achievement check %s failed for user %s", trigger_event, user_id)
        return []

    unlocked = []
    for achievement in candidates:
        unlock = _unlock(user, achievement)
        if unlock is None:
            continue
        unlocked.append(unlock)
        _notify(unlock)

    if unlocked:
        logger.info(
            "User %s unlocked %s on %s",
            user_id, ', '.join(u.achievement.code for u in unlocked), trigger_event
        )
    return unlocked


def month_end_reference(today=None):
    """
    A day inside the month a month-end sweep judges.

    On the 1st the month that just ended is judged, so a job scheduled at
    the month boundary does not evaluate the new, still empty month.
    Any other day judges its own month.
    """
    today = today or timezone.localdate()
    if today.day == 1:
        return today - timedelta(days=1)
    return today


def run_monthly_achievement_sweep(*, dry_run=False, today=None, month=None):
    """
    Run the ``month_end`` check for every active user.

    Args:
        dry_run (bool): Only report what would unlock.
        today (date, optional): Day the sweep runs. The judged month is
            the one before it on the 1st, its own month otherwise.
        month (date, optional): Any day of the month to judge. Overrides
            ``today``.

    Returns:
        dict: ``{user: [Achievement, ...]}`` for users with (would-be) unlocks.
    """
    reference = month or month_end_reference(today)
    results = {}
    users = User.objects.filter(is_active=True).order_by('created_at')
    for user in users.iterator():
        try:
            if dry_run:
                found = find_unlockable(user, ActivityEvent.MONTH_END, today=reference)
            else:
                found = [
                    unlock.achievement
                    for unlock in check_achievements(
                        user.id, ActivityEvent.MONTH_END, today=reference
                    )
                ]
        except Exception:
            logger.exception("Monthly achievement sweep failed for user %s", user.id)
            continue
        if found:
            results[user] = found

    logger.info(
        "Monthly achievement sweep for %04d-%02d done: %d user(s) with unlocks%s",
        reference.year, reference.month, len(results), ' (dry run)' if dry_run else ''
    )
    return results
