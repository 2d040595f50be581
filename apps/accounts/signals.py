"""
User activity signals.

Mutation services announce what a user just did by sending ``user_activity``
once their database transaction commits. Receivers (the achievement engine)
subscribe without the mutation paths importing them.
"""

from django.db import models, transaction
from django.dispatch import Signal


class ActivityEvent(models.TextChoices):
    ADD_EXPENSE = 'add_expense', 'Expense added'
    CREATE_GROUP = 'create_group', 'Group created'
    INVITE_MEMBER = 'invite_member', 'Member invited'
    MONTH_END = 'month_end', 'Month closed'


# Sent with kwargs: user_id (UUID), event (ActivityEvent value)
user_activity = Signal()


def emit_after_commit(*, user_id, event, sender=None):
    """Send ``user_activity`` once the surrounding transaction commits."""
    transaction.on_commit(
        lambda: user_activity.send(sender=sender, user_id=user_id, event=event)
    )
