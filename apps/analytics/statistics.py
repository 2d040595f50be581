"""
Monthly statistics and budget progress.

Both functions are pure: they take TransactionSnapshot records that were
already scoped to one group and return plain dictionaries.
"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone

from apps.groups.models import is_personal_group_id


ZERO = Decimal('0')
PERSONAL_DEFAULT_CATEGORY = 'Uncategorized'

# (upper bound exclusive, label)
PACE_THRESHOLDS = [
    (25, 'excellent'),
    (50, 'good'),
    (75, 'on_track'),
    (90, 'careful'),
]
PACE_AT_LIMIT = 'limit'


def round_percentage(part, whole):
    """Integer percentage rounded half up, 0 when ``whole`` is 0."""
    if not whole:
        return 0
    return int((Decimal(part) / Decimal(whole) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def _local_date(moment):
    if moment is None:
        return None
    if isinstance(moment, date) and not hasattr(moment, 'hour'):
        return moment
    if timezone.is_aware(moment):
        moment = timezone.localtime(moment)
    return moment.date()


def _in_group(entry, group_id):
    if is_personal_group_id(group_id):
        return entry.group_id is None
    return entry.group_id is not None and str(entry.group_id) == str(group_id)


def category_label(entry, default_category):
    """Bucket label: category, then tag, then note, then the default."""
    return entry.category or entry.tag or entry.note or default_category


def monthly_statistics(transactions, group_id, today=None, default_category='Other'):
    """
    Summarize the current calendar month's expenses of one group.

    Args:
        transactions (Iterable[TransactionSnapshot]): Entries of the group.
        group_id: Selected group id, or ``'personal'``/None.
        today (date, optional): Reference day. Defaults to today in the
            active time zone.
        default_category (str): Label for entries with no category, tag
            or note. The personal scope always uses ``'Uncategorized'``.

    Returns:
        dict: A dictionary containing:
            - month (int), year (int): The summarized month.
            - total_expenses (Decimal)
            - transaction_count (int)
            - average_expense (Decimal): 0 when there are no expenses.
            - categories (list[dict]): ``name``, ``amount``, ``percentage``
              per bucket, largest amount first.
            - has_data (bool)
    """
    today = today or timezone.localdate()
    if is_personal_group_id(group_id):
        default_category = PERSONAL_DEFAULT_CATEGORY

    expenses = []
    for entry in transactions or []:
        if not entry.is_expense or not _in_group(entry, group_id):
            continue
        created = _local_date(entry.created_at)
        if created and created.year == today.year and created.month == today.month:
            expenses.append(entry)

    result = {
        'month': today.month,
        'year': today.year,
        'total_expenses': ZERO,
        'transaction_count': 0,
        'average_expense': ZERO,
        'categories': [],
        'has_data': False,
    }
    if not expenses:
        return result

    total = sum((entry.amount for entry in expenses), ZERO)
    buckets = {}
    for entry in expenses:
        label = category_label(entry, default_category)
        buckets[label] = buckets.get(label, ZERO) + entry.amount

    categories = [
        {
            'name': name,
            'amount': amount,
            'percentage': round_percentage(amount, total),
        }
        for name, amount in buckets.items()
    ]
    categories.sort(key=lambda bucket: bucket['amount'], reverse=True)

    result.update({
        'total_expenses': total,
        'transaction_count': len(expenses),
        'average_expense': total / len(expenses),
        'categories': categories,
        'has_data': True,
    })
    return result


def pace_label(percentage):
    for bound, label in PACE_THRESHOLDS:
        if percentage < bound:
            return label
    return PACE_AT_LIMIT


def budget_progress(transactions, budget):
    """
    Spending of a ledger against its monthly budget.

    Every expense in ``transactions`` counts; callers pass the scoped set.

    Args:
        transactions (Iterable[TransactionSnapshot]): Entries to total.
        budget (Decimal | None): Budget amount, None when unset.

    Returns:
        dict: ``total_spent``, ``monthly_budget``, ``remaining``,
        ``budget_percentage`` (0 when the budget is 0) and ``pace``.
    """
    monthly_budget = Decimal(budget) if budget is not None else ZERO
    total_spent = sum(
        (entry.amount for entry in transactions or [] if entry.is_expense),
        ZERO,
    )
    percentage = round_percentage(total_spent, monthly_budget) if monthly_budget > 0 else 0

    return {
        'total_spent': total_spent,
        'monthly_budget': monthly_budget,
        'remaining': monthly_budget - total_spent,
        'budget_percentage': percentage,
        'pace': pace_label(percentage),
    }
