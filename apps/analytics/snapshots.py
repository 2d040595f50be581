"""Read-only ledger records handed to the analytics engines.

The engines never see ORM instances. Transactions are copied into closed,
frozen records at the store boundary so the computations stay pure and
cannot trigger queries or mutate shared state.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Tuple

from django.utils.dateparse import parse_datetime


def _to_decimal(value) -> Decimal:
    if value is None or value == '':
        return Decimal('0')
    return Decimal(str(value))


def _to_datetime(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return parse_datetime(str(value))


def _to_id(value):
    """Normalise foreign keys given as ids, nested records or users."""
    if isinstance(value, Mapping):
        value = value.get('id')
    return getattr(value, 'id', value)


def _known_fields(cls, record: Mapping[str, Any]) -> dict:
    names = {f.name for f in fields(cls)}
    return {key: value for key, value in record.items() if key in names}


@dataclass(frozen=True)
class SplitSnapshot:
    """One participant's share of an expense."""

    user_id: Any
    amount: Decimal
    transaction_id: Any = None
    id: Any = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, split):
        return cls(
            id=split.id,
            transaction_id=split.transaction_id,
            user_id=split.user_id,
            amount=Decimal(split.amount),
            created_at=split.created_at,
        )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]):
        """Build from a plain mapping, ignoring keys the record does not define."""
        data = _known_fields(cls, record)
        data['user_id'] = _to_id(record.get('user_id', record.get('user')))
        data['transaction_id'] = _to_id(record.get('transaction_id', record.get('transaction')))
        data['amount'] = _to_decimal(data.get('amount'))
        data['created_at'] = _to_datetime(data.get('created_at'))
        return cls(**data)


@dataclass(frozen=True)
class TransactionSnapshot:
    """
    A ledger entry as seen by the engines.

    Attributes:
        kind: ``'expense'``, ``'loan'`` or ``'settlement'``.
        paid_by: Id of the paying user.
        split_between: Participant names (payer first) or None when unsplit.
        group_id: Owning group id, None for the personal scope.
        splits: Explicit split rows attached to the entry.
    """

    id: Any
    amount: Decimal
    kind: str
    paid_by: Any = None
    title: str = ''
    paid_to: Any = None
    loaned_to: Any = None
    split_between: Optional[Tuple[str, ...]] = None
    note: str = ''
    category: str = ''
    tag: str = ''
    group_id: Any = None
    created_by: Any = None
    created_at: Optional[datetime] = None
    splits: Tuple[SplitSnapshot, ...] = ()

    @classmethod
    def from_model(cls, transaction, splits=None):
        """
        Copy a ``Transaction`` instance.

        Args:
            transaction: The model instance.
            splits: Split rows to attach. Defaults to ``transaction.splits``,
                which should be prefetched by the caller.
        """
        if splits is None:
            splits = transaction.splits.all()
        split_between = transaction.split_between
        return cls(
            id=transaction.id,
            title=transaction.title,
            amount=Decimal(transaction.amount),
            kind=transaction.kind,
            paid_by=transaction.paid_by_id,
            paid_to=transaction.paid_to_id,
            loaned_to=transaction.loaned_to_id,
            split_between=tuple(split_between) if split_between is not None else None,
            note=transaction.note or '',
            category=transaction.category or '',
            tag=transaction.tag or '',
            group_id=transaction.group_id,
            created_by=transaction.created_by_id,
            created_at=transaction.created_at,
            splits=tuple(SplitSnapshot.from_model(split) for split in splits),
        )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]):
        """
        Build from a plain mapping such as an API payload or a ``values()`` row.

        Unknown keys are dropped. ``group`` and ``group_id`` are both
        accepted; ``'personal'`` maps to None. Nested ``splits`` may be
        mappings or SplitSnapshot instances.
        """
        data = _known_fields(cls, record)
        for key in ('paid_by', 'paid_to', 'loaned_to', 'created_by'):
            data[key] = _to_id(record.get(key))

        group_id = _to_id(record.get('group_id', record.get('group')))
        data['group_id'] = None if group_id in ('', 'personal') else group_id

        data['amount'] = _to_decimal(record.get('amount'))
        data['created_at'] = _to_datetime(record.get('created_at'))
        for key in ('title', 'note', 'category', 'tag'):
            data[key] = data.get(key) or ''

        split_between = record.get('split_between')
        data['split_between'] = tuple(split_between) if split_between is not None else None

        data['splits'] = tuple(
            split if isinstance(split, SplitSnapshot) else SplitSnapshot.from_record(split)
            for split in record.get('splits') or ()
        )
        return cls(**data)

    @property
    def is_expense(self):
        return self.kind == 'expense'
