"""
Tests for the achievement rule engine.
"""

import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal
from django.db import DatabaseError
from django.utils import timezone

from apps.accounts.signals import ActivityEvent
from apps.achievements import engine
from apps.achievements.engine import (
    check_achievements,
    month_end_reference,
    run_monthly_achievement_sweep,
)
from apps.achievements.models import Achievement, UserAchievement
from apps.achievements.signals import achievement_unlocked
from apps.groups.services import create_group
from apps.transactions.models import Transaction
from apps.transactions.services import TransactionService


@pytest.mark.django_db
class TestCheckAchievements:
    """Tests for check_achievements."""

    def test_first_expense_unlocks_on_first_expense(self, achiever, first_expense_achievement, record_expense):
        """Nothing unlocks before the first expense, then it unlocks."""
        assert check_achievements(achiever.id, ActivityEvent.ADD_EXPENSE) == []

        record_expense('4.20')
        unlocked = check_achievements(achiever.id, ActivityEvent.ADD_EXPENSE)

        assert [u.achievement for u in unlocked] == [first_expense_achievement]
        assert UserAchievement.objects.filter(user=achiever).count() == 1

    def test_idempotent(self, achiever, first_expense_achievement, record_expense):
        """Checking twice never unlocks twice."""
        record_expense('4.20')

        first = check_achievements(achiever.id, ActivityEvent.ADD_EXPENSE)
        second = check_achievements(achiever.id, ActivityEvent.ADD_EXPENSE)

        assert len(first) == 1
        assert second == []
        assert UserAchievement.objects.filter(user=achiever).count() == 1

    def test_only_matching_event(self, achiever, first_expense_achievement, record_expense):
        """Achievements of other events are not evaluated."""
        record_expense('4.20')

        assert check_achievements(achiever.id, ActivityEvent.CREATE_GROUP) == []

    def test_accepts_user_instance(self, achiever, first_expense_achievement, record_expense):
        """A user instance works as well as an id."""
        record_expense('4.20')

        assert len(check_achievements(achiever, ActivityEvent.ADD_EXPENSE)) == 1

    def test_budget_unlock(self, achiever, budget_achievement, budget_groups, record_expense):
        """Budget achievements unlock while spending stays under the limit."""
        record_expense('120.00', group=budget_groups[0])

        unlocked = check_achievements(achiever.id, ActivityEvent.MONTH_END)

        assert [u.achievement for u in unlocked] == [budget_achievement]

    def test_budget_overspend_stays_locked(self, achiever, budget_achievement, budget_groups, record_expense):
        """Overspending keeps the budget achievement locked."""
        record_expense('320.00', group=budget_groups[0])
        record_expense('200.00', group=budget_groups[1])

        assert check_achievements(achiever.id, ActivityEvent.MONTH_END) == []

    def test_evaluation_failure_is_isolated(self, achiever, empty_catalogue, record_expense, monkeypatch):
        """One failing evaluation does not block the others."""
        for title in ['Alpha', 'Beta']:
            Achievement.objects.create(
                code=title.lower(),
                title=title,
                trigger_event='add_expense',
                condition={'type': 'count', 'metric': 'expenses', 'target': 1},
            )
        record_expense('4.20')

        def evaluate(condition, user, today=None):
            if not evaluated:
                evaluated.append(condition)
                raise RuntimeError('boom')
            return True

        evaluated = []
        monkeypatch.setattr(engine, 'evaluate_condition', evaluate)

        unlocked = check_achievements(achiever.id, ActivityEvent.ADD_EXPENSE)

        assert [u.achievement.code for u in unlocked] == ['beta']

    def test_load_failure_returns_empty(self, achiever, first_expense_achievement, monkeypatch):
        """Catalogue loading errors are logged, not raised."""
        def unavailable(*args, **kwargs):
            raise DatabaseError('down')

        monkeypatch.setattr(Achievement.objects, 'filter', unavailable)

        assert check_achievements(achiever.id, ActivityEvent.ADD_EXPENSE) == []

    def test_unknown_user(self, first_expense_achievement):
        """Unknown users are logged, not raised."""
        assert check_achievements('00000000-0000-0000-0000-000000000000', ActivityEvent.ADD_EXPENSE) == []

    def test_duplicate_insert_is_benign(self, achiever, first_expense_achievement, monkeypatch):
        """A concurrent unlock hitting the unique constraint is a no-op."""
        UserAchievement.objects.create(user=achiever, achievement=first_expense_achievement)

        monkeypatch.setattr(
            engine, 'find_unlockable', lambda user, event, today=None: [first_expense_achievement]
        )

        unlocked = check_achievements(achiever.id, ActivityEvent.ADD_EXPENSE)

        assert unlocked == []
        assert UserAchievement.objects.filter(user=achiever).count() == 1

    def test_unlock_signal(self, achiever, first_expense_achievement, record_expense):
        """Each unlock sends achievement_unlocked."""
        received = []

        def handler(sender, user_achievement, **kwargs):
            received.append(user_achievement)

        achievement_unlocked.connect(handler, dispatch_uid='test_unlock_signal')
        record_expense('4.20')

        try:
            unlocked = check_achievements(achiever.id, ActivityEvent.ADD_EXPENSE)
        finally:
            achievement_unlocked.disconnect(dispatch_uid='test_unlock_signal')

        assert received == unlocked

    def test_failing_notification_keeps_unlock(self, achiever, first_expense_achievement, record_expense):
        """A broken receiver does not undo or abort the unlock."""
        def handler(sender, user_achievement, **kwargs):
            raise RuntimeError('toast failed')

        achievement_unlocked.connect(handler, dispatch_uid='test_failing_notification')
        record_expense('4.20')

        try:
            unlocked = check_achievements(achiever.id, ActivityEvent.ADD_EXPENSE)
        finally:
            achievement_unlocked.disconnect(dispatch_uid='test_failing_notification')

        assert len(unlocked) == 1


@pytest.mark.django_db
class TestActivityReceiver:
    """Tests for the user_activity receiver."""

    def test_expense_triggers_check(self, achiever, first_expense_achievement, django_capture_on_commit_callbacks):
        """Recording an expense unlocks after commit."""
        with django_capture_on_commit_callbacks(execute=True):
            TransactionService.create_expense(
                created_by=achiever, title='Lunch', amount=Decimal('12.00')
            )

        assert UserAchievement.objects.filter(
            user=achiever, achievement=first_expense_achievement
        ).exists()

    def test_no_unlock_before_commit(self, achiever, first_expense_achievement, django_capture_on_commit_callbacks):
        """The check waits for the commit."""
        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            TransactionService.create_expense(
                created_by=achiever, title='Lunch', amount=Decimal('12.00')
            )

        assert len(callbacks) == 1
        assert not UserAchievement.objects.filter(user=achiever).exists()

    def test_group_creation_uses_seeded_catalogue(self, achiever, django_capture_on_commit_callbacks):
        """The seeded Group Creator badge unlocks on the first group."""
        with django_capture_on_commit_callbacks(execute=True):
            create_group(name='Flat', created_by=achiever)

        codes = set(
            UserAchievement.objects.filter(user=achiever).values_list('achievement__code', flat=True)
        )
        assert codes == {'group_creator'}

    def test_disabled(self, achiever, first_expense_achievement, settings, django_capture_on_commit_callbacks):
        """ACHIEVEMENTS_ENABLED=False turns the receiver off."""
        settings.ACHIEVEMENTS_ENABLED = False

        with django_capture_on_commit_callbacks(execute=True):
            TransactionService.create_expense(
                created_by=achiever, title='Lunch', amount=Decimal('12.00')
            )

        assert not UserAchievement.objects.filter(user=achiever).exists()


@pytest.mark.django_db
class TestMonthlySweep:
    """Tests for run_monthly_achievement_sweep."""

    def test_sweep_unlocks_for_every_user(self, achiever, stranger, budget_achievement, budget_groups, record_expense):
        """Users under budget unlock, users over budget do not."""
        record_expense('600.00')

        results = run_monthly_achievement_sweep(month=timezone.localdate())

        assert list(results) == [stranger]
        assert UserAchievement.objects.filter(achievement=budget_achievement).count() == 1

    def test_dry_run(self, achiever, budget_achievement):
        """Dry runs report without writing."""
        results = run_monthly_achievement_sweep(dry_run=True)

        assert results == {achiever: [budget_achievement]}
        assert not UserAchievement.objects.exists()

    def test_inactive_users_skipped(self, achiever, budget_achievement):
        """Deactivated users are not swept."""
        achiever.is_active = False
        achiever.save(update_fields=['is_active'])

        assert run_monthly_achievement_sweep() == {}

    def test_user_failure_is_isolated(self, achiever, stranger, budget_achievement, monkeypatch):
        """A failing user does not stop the sweep."""
        checked = []

        def check(user_id, trigger_event, today=None):
            checked.append(user_id)
            if len(checked) == 1:
                raise RuntimeError('boom')
            return []

        monkeypatch.setattr(engine, 'check_achievements', check)

        assert run_monthly_achievement_sweep() == {}
        assert set(checked) == {achiever.id, stranger.id}

    def test_first_of_month_judges_the_month_that_ended(
        self, achiever, budget_achievement, budget_groups, record_expense
    ):
        """On the 1st the finished month is judged, not the empty new one."""
        first = timezone.localdate().replace(day=1)
        last_month = first - timedelta(days=1)
        expense = record_expense('600.00')
        Transaction.objects.filter(id=expense.id).update(
            created_at=timezone.make_aware(datetime(last_month.year, last_month.month, 15, 12))
        )

        results = run_monthly_achievement_sweep(today=first)

        assert results == {}
        assert not UserAchievement.objects.exists()


class TestMonthEndReference:
    """Tests for the month a sweep judges."""

    def test_first_of_month(self):
        assert month_end_reference(date(2024, 3, 1)) == date(2024, 2, 29)

    def test_first_of_year(self):
        assert month_end_reference(date(2024, 1, 1)) == date(2023, 12, 31)

    def test_mid_month(self):
        assert month_end_reference(date(2024, 3, 18)) == date(2024, 3, 18)
