"""
Analytics Module
=================

Query layer behind the dashboard. It loads a group's ledger through the
transaction store, copies it into snapshots and hands those to the pure
engines in :mod:`apps.analytics.ledger` and :mod:`apps.analytics.statistics`.

Classes:
    AnalyticsQueries: Static methods, one per dashboard figure.

Example:
    Balance and monthly summary of a group::

        from apps.analytics.analytics import AnalyticsQueries

        balance = AnalyticsQueries.balance(group_id=group.id, user=user)
        stats = AnalyticsQueries.monthly_stats(group_id=group.id, user=user)
        print(f"Net balance: {balance['net_balance']}")
        print(f"Spent this month: {stats['total_expenses']}")

Note:
    This module is read-only. Group access is checked here, so the engines
    only ever see entries the user is allowed to read.
"""

from apps.budgets.services import get_budget
from apps.groups.services import resolve_group
from apps.transactions.services import TransactionService

from .ledger import reconcile
from .snapshots import TransactionSnapshot
from .statistics import budget_progress, monthly_statistics


class AnalyticsQueries:
    """
    Dashboard figures for one group, from the current user's point of view.

    Every method accepts ``group_id`` as a UUID or ``'personal'`` and
    raises the group service errors when the group cannot be read.

    Methods:
        load_snapshots: The group's ledger as TransactionSnapshot records.
        balance: Net balance, loans and settlements.
        monthly_stats: Current month's expense summary.
        budget: Spending against the group's (or user's) budget.
        dashboard: All of the above in one payload.

    Raises:
        GroupNotFoundError: If the group does not exist.
        NotMemberError: If the user is not a member.
    """

    @staticmethod
    def load_snapshots(*, group_id, user):
        """Fetch and copy the group's entries, newest first."""
        group = resolve_group(group_id=group_id, user=user)
        entries = TransactionService.list_transactions(group_id=group.id, user=user)
        return group, [TransactionSnapshot.from_model(entry) for entry in entries]

    @staticmethod
    def balance(*, group_id, user, snapshots=None):
        """
        Reconcile the group's ledger for ``user``.

        Returns:
            dict: The output of :func:`apps.analytics.ledger.reconcile`.
        """
        if snapshots is None:
            _, snapshots = AnalyticsQueries.load_snapshots(group_id=group_id, user=user)
        return reconcile(snapshots, user_id=user.id, user_name=user.get_display_name())

    @staticmethod
    def monthly_stats(*, group_id, user, today=None, snapshots=None):
        """Current calendar month's expense summary of the group."""
        if snapshots is None:
            _, snapshots = AnalyticsQueries.load_snapshots(group_id=group_id, user=user)
        return monthly_statistics(snapshots, group_id=group_id, today=today)

    @staticmethod
    def budget(*, group_id, user, group=None, snapshots=None):
        """
        Spending against the budget of the selected scope.

        The personal scope uses the user's own budget; real groups use
        their monthly budget.
        """
        if snapshots is None:
            group, snapshots = AnalyticsQueries.load_snapshots(group_id=group_id, user=user)
        elif group is None:
            group = resolve_group(group_id=group_id, user=user)
        owner = user if group.is_personal else group
        return budget_progress(snapshots, get_budget(owner=owner))

    @staticmethod
    def dashboard(*, group_id, user, today=None):
        """
        Everything the dashboard shows for a group, from a single fetch.

        Returns:
            dict: ``group`` (id, name, currency), ``balance``,
            ``monthly_stats`` and ``budget``.
        """
        group, snapshots = AnalyticsQueries.load_snapshots(group_id=group_id, user=user)
        return {
            'group': {
                'id': str(group.id),
                'name': group.name,
                'currency': group.currency,
            },
            'balance': AnalyticsQueries.balance(
                group_id=group.id, user=user, snapshots=snapshots
            ),
            'monthly_stats': AnalyticsQueries.monthly_stats(
                group_id=group.id, user=user, today=today, snapshots=snapshots
            ),
            'budget': AnalyticsQueries.budget(
                group_id=group.id, user=user, group=group, snapshots=snapshots
            ),
        }
