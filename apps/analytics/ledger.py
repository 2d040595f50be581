"""
Ledger Reconciliation
=====================

Computes the headline balance figures of one user within one group's
ledger: net balance, loan position and settlement totals.

Functions:
    reconcile: Pure computation over TransactionSnapshot records.
    match_participant_name: Default name matcher of the legacy fallback.

Classes:
    NameMatchingFallback: Estimates a user's share of expenses that carry
        only participant names and no explicit split rows.

Example:
    Balance of the current user::

        from apps.analytics.ledger import reconcile

        result = reconcile(snapshots, user_id=user.id, user_name=user.get_display_name())
        if result['status'] == 'owed':
            print(f"Others owe you {result['net_balance']}")

Note:
    Explicit split rows always take precedence. The name-matching fallback
    is only consulted when the user's split rows sum to zero.
"""

from decimal import Decimal

from apps.accounts.models import SELF_SENTINEL_NAME


ZERO = Decimal('0')


def match_participant_name(names, user_name):
    """
    Whether a participant list names the user.

    Matches the self sentinel, the exact name, or a substring in either
    direction. The sentinel itself is never treated as containing the
    user's name.
    """
    if user_name in names or SELF_SENTINEL_NAME in names:
        return True
    return any(
        name in user_name or (name != SELF_SENTINEL_NAME and user_name in name)
        for name in names
    )


class NameMatchingFallback:
    """
    Share estimate for expenses recorded without split rows.

    Each expense the user did not pay, whose ``split_between`` matches the
    user, contributes ``amount / len(split_between)``.

    Args:
        matcher: Callable ``(names, user_name) -> bool``. Swap in a strict
            matcher once every expense carries split rows.
    """

    def __init__(self, matcher=None):
        self.matcher = matcher or match_participant_name

    def estimate(self, transactions, user_id, user_name=''):
        total = ZERO
        for entry in transactions:
            if not entry.is_expense or _same_id(entry.paid_by, user_id):
                continue
            if not entry.split_between:
                continue
            if self.matcher(entry.split_between, user_name or ''):
                total += entry.amount / (len(entry.split_between) or 1)
        return total


def _same_id(left, right):
    return left is not None and right is not None and str(left) == str(right)


def _balance_status(net_balance):
    if net_balance > 0:
        return 'owed'
    if net_balance < 0:
        return 'owes'
    return 'settled'


def reconcile(transactions, user_id, user_name='', matcher=None):
    """
    Reconcile a group's ledger for one user.

    Args:
        transactions (Iterable[TransactionSnapshot]): Entries of the
            selected group, already scoped by membership.
        user_id: Durable id of the current user.
        user_name (str): The user's stored name, used only by the
            name-matching fallback.
        matcher (callable, optional): Replacement name matcher for the
            fallback.

    Returns:
        dict: A dictionary containing:
            - net_balance (Decimal): Positive when others owe the user.
            - total_paid_by_user (Decimal): Expenses the user paid.
            - user_split_amount (Decimal): Sum of the user's split rows.
            - fallback_split_amount (Decimal): Name-matched estimate, 0 when
              split rows were used.
            - you_loaned (Decimal): Loans the user gave.
            - you_borrowed (Decimal): All other loans.
            - net_loans (Decimal): ``you_loaned - you_borrowed``.
            - settlement_amount (Decimal): Sum of settlements.
            - total_settlements (int): Number of settlements.
            - total_transactions (int): Number of entries.
            - status (str): ``'owed'``, ``'owes'`` or ``'settled'``.

    Note:
        Never raises for empty input; every figure is zero and the status
        is ``'settled'``.
    """
    transactions = list(transactions or [])

    total_paid_by_user = sum(
        (t.amount for t in transactions if t.is_expense and _same_id(t.paid_by, user_id)),
        ZERO,
    )
    user_split_amount = sum(
        (
            split.amount
            for t in transactions
            for split in t.splits
            if _same_id(split.user_id, user_id)
        ),
        ZERO,
    )

    fallback_split_amount = ZERO
    if user_split_amount == 0:
        fallback_split_amount = NameMatchingFallback(matcher).estimate(
            transactions, user_id, user_name
        )

    owed_share = user_split_amount if user_split_amount != 0 else fallback_split_amount
    net_balance = total_paid_by_user - owed_share

    loans = [t for t in transactions if t.kind == 'loan']
    you_loaned = sum((t.amount for t in loans if _same_id(t.paid_by, user_id)), ZERO)
    you_borrowed = sum((t.amount for t in loans if not _same_id(t.paid_by, user_id)), ZERO)

    settlements = [t for t in transactions if t.kind == 'settlement']

    return {
        'net_balance': net_balance,
        'total_paid_by_user': total_paid_by_user,
        'user_split_amount': user_split_amount,
        'fallback_split_amount': fallback_split_amount,
        'you_loaned': you_loaned,
        'you_borrowed': you_borrowed,
        'net_loans': you_loaned - you_borrowed,
        'settlement_amount': sum((t.amount for t in settlements), ZERO),
        'total_settlements': len(settlements),
        'total_transactions': len(transactions),
        'status': _balance_status(net_balance),
    }
