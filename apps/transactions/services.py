"""
Transaction Services Module
===========================

This module provides business logic services for the shared ledger,
including cent-precise expense splitting and the store access helpers
the analytics and achievement layers read through.

Classes:
    TransactionService: Creates, deletes and lists ledger entries.

Example:
    Recording a split expense::

        from apps.transactions.services import TransactionService
        from decimal import Decimal

        expense, share = TransactionService.create_expense(
            created_by=current_user,
            title='Groceries',
            amount=Decimal('90.00'),
            group_id=group.id,
            split_with=[flatmate_a, flatmate_b],
        )

        # Payer and both flatmates get a TransactionSplit of 30.00
        print(f"Each person owes {share}")
"""

import logging
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Prefetch

from apps.accounts.signals import ActivityEvent, emit_after_commit
from apps.groups.models import Group, Invitation, is_personal_group_id
from apps.groups.services import (
    GroupNotFoundError,
    NotMemberError,
    require_membership,
    resolve_group,
)
from .exceptions import (
    InsufficientPermissionsError,
    InvalidGroupMembershipError,
    InvalidTransactionError,
    TransactionNotFoundError,
    UnknownCollectionError,
)
from .models import Transaction, TransactionKind, TransactionSplit

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


class TransactionService:
    """
    Service for recording ledger entries with cent-precise splitting.

    Every mutation validates its input before any row is written and runs
    inside a database transaction. Entries are immutable afterwards; the
    only other mutation is deletion by the creator.

    Splits are computed with integer cent arithmetic: the amount is
    converted to cents, floor-divided among participants, and the
    remainder handed out one cent at a time to the first participants, so
    shares always sum exactly to the total.

    Methods:
        create_expense: Record an expense, optionally split among members.
        create_loan: Record money lent to another member.
        create_settlement: Record a payment that settles a debt.
        delete_transaction: Delete an entry (creator only).
        list_transactions: Entries of a group or of the personal scope.
        list_splits: Split rows of the given entries.
        count_rows: Number of rows a user created in a collection.

    Example:
        Three-way split::

            expense, share = TransactionService.create_expense(
                created_by=payer,
                title='Dinner',
                amount=Decimal('100.00'),
                group_id=group.id,
                split_with=[friend_a, friend_b],
            )
            # Splits are 33.34, 33.33, 33.33 and share is 33.33
    """

    @staticmethod
    def create_expense(
        *,
        created_by,
        title,
        amount,
        paid_by=None,
        group_id=None,
        split_with=None,
        note='',
        category='',
        tag='expense',
    ):
        """
        Record an expense and, when shared, its per-participant splits.

        The payer always takes part in a split. When ``split_with`` is
        empty the expense is unsplit: it carries no ``split_between`` and
        no split rows, so the payer's whole payment counts as theirs.

        Args:
            created_by (User): The user recording the expense.
            title (str): Short description, required.
            amount (Decimal): Positive amount with at most two decimals.
            paid_by (User, optional): Who paid. Defaults to ``created_by``.
            group_id (UUID | str, optional): Target group, or ``'personal'``/
                None for the personal scope.
            split_with (list[User], optional): Other participants.
            note (str, optional): Free-text note.
            category (str, optional): Category label for statistics.
            tag (str, optional): Secondary label. Defaults to ``'expense'``.

        Returns:
            tuple: A tuple containing:
                - Transaction: The created expense.
                - Decimal | None: The per-person share, None when unsplit.

        Raises:
            InvalidTransactionError: If title or amount are invalid.
            InvalidGroupMembershipError: If the creator, payer or a
                participant is not a member of the group.

        Note:
            ``add_expense`` is announced once the surrounding database
            transaction commits.
        """
        title = TransactionService._clean_title(title)
        amount = TransactionService._clean_amount(amount)
        paid_by = paid_by or created_by

        group = TransactionService._resolve_group(group_id, created_by)

        participants = [paid_by]
        for user in split_with or []:
            if user.id not in {p.id for p in participants}:
                participants.append(user)

        TransactionService._require_members(group, participants)

        with transaction.atomic():
            expense = Transaction.objects.create(
                title=title,
                amount=amount,
                kind=TransactionKind.EXPENSE,
                paid_by=paid_by,
                split_between=(
                    [p.get_display_name() for p in participants]
                    if len(participants) > 1 else None
                ),
                note=note or '',
                category=category or '',
                tag=tag or '',
                group=None if group.is_personal else group,
                created_by=created_by,
            )

            share = None
            if len(participants) > 1:
                splits = TransactionService._calculate_splits(amount, participants)
                TransactionSplit.objects.bulk_create([
                    TransactionSplit(transaction=expense, user=user, amount=user_amount)
                    for user, user_amount in splits
                ])
                share = (amount / len(participants)).quantize(CENT)

            emit_after_commit(
                sender=Transaction,
                user_id=created_by.id,
                event=ActivityEvent.ADD_EXPENSE,
            )

        logger.info(
            "Expense %s of %s recorded by %s (%d participants)",
            expense.id, amount, created_by.id, len(participants)
        )
        return expense, share

    @staticmethod
    def create_loan(*, created_by, amount, loaned_to, group_id=None, note=''):
        """
        Record money the creator lent to another member.

        Loans never carry ``split_between`` or split rows.

        Raises:
            InvalidTransactionError: If amount is invalid or the borrower
                is the creator.
            InvalidGroupMembershipError: If either party is outside the group.
        """
        amount = TransactionService._clean_amount(amount)
        if loaned_to is None or loaned_to.id == created_by.id:
            raise InvalidTransactionError("A loan needs a borrower other than yourself")

        group = TransactionService._resolve_group(group_id, created_by)
        TransactionService._require_members(group, [created_by, loaned_to])

        loan = Transaction.objects.create(
            title='Loan',
            amount=amount,
            kind=TransactionKind.LOAN,
            paid_by=created_by,
            loaned_to=loaned_to,
            note=note or '',
            tag='loan',
            group=None if group.is_personal else group,
            created_by=created_by,
        )
        logger.info("Loan %s of %s recorded by %s", loan.id, amount, created_by.id)
        return loan

    @staticmethod
    def create_settlement(*, created_by, amount, paid_to, group_id=None, note=''):
        """
        Record a payment from the creator that settles a debt.

        Raises:
            InvalidTransactionError: If amount is invalid or the recipient
                is the creator.
            InvalidGroupMembershipError: If either party is outside the group.
        """
        amount = TransactionService._clean_amount(amount)
        if paid_to is None or paid_to.id == created_by.id:
            raise InvalidTransactionError("A settlement needs a recipient other than yourself")

        group = TransactionService._resolve_group(group_id, created_by)
        TransactionService._require_members(group, [created_by, paid_to])

        settlement = Transaction.objects.create(
            title='Settlement',
            amount=amount,
            kind=TransactionKind.SETTLEMENT,
            paid_by=created_by,
            paid_to=paid_to,
            note=note or '',
            tag='settlement',
            group=None if group.is_personal else group,
            created_by=created_by,
        )
        logger.info("Settlement %s of %s recorded by %s", settlement.id, amount, created_by.id)
        return settlement

    @staticmethod
    @transaction.atomic
    def delete_transaction(*, transaction_id, user):
        """
        Delete a ledger entry and its splits.

        Raises:
            TransactionNotFoundError: If the entry doesn't exist.
            InsufficientPermissionsError: If user is not the creator.
        """
        try:
            entry = Transaction.objects.select_for_update().get(id=transaction_id)
        except (Transaction.DoesNotExist, ValidationError, ValueError):
            raise TransactionNotFoundError()

        if entry.created_by_id != user.id:
            raise InsufficientPermissionsError('Only the creator can delete this transaction.')

        entry.delete()
        logger.info("Transaction %s deleted by %s", transaction_id, user.id)

    @staticmethod
    def list_transactions(*, group_id, user):
        """
        List the entries of a scope, newest first.

        The personal scope (``'personal'`` or None) holds the records the
        user created without a group. Callers check group access first.

        Returns:
            QuerySet of Transaction instances with splits prefetched.
        """
        queryset = (
            Transaction.objects
            .select_related('paid_by', 'paid_to', 'loaned_to', 'created_by')
            .prefetch_related(
                Prefetch('splits', queryset=TransactionSplit.objects.select_related('user'))
            )
        )
        if is_personal_group_id(group_id):
            queryset = queryset.filter(group__isnull=True, created_by=user)
        else:
            queryset = queryset.filter(group_id=group_id)
        return queryset.order_by('-created_at')

    @staticmethod
    def list_splits(*, transaction_ids):
        """Split rows belonging to the given entries."""
        return (
            TransactionSplit.objects
            .filter(transaction_id__in=list(transaction_ids))
            .select_related('user')
        )

    @staticmethod
    def count_rows(*, collection, user):
        """
        Count the rows ``user`` created in a collection.

        Args:
            collection (str): ``'expenses'`` (expense entries), ``'groups'``
                or ``'invitations'``.
            user (User | UUID): The creator.

        Raises:
            UnknownCollectionError: If the collection is not supported.
        """
        querysets = {
            'expenses': lambda: Transaction.objects.filter(kind=TransactionKind.EXPENSE),
            'groups': lambda: Group.objects.all(),
            'invitations': lambda: Invitation.objects.all(),
        }
        if collection not in querysets:
            raise UnknownCollectionError(f"Cannot count rows of {collection!r}")

        user_id = getattr(user, 'id', user)
        return querysets[collection]().filter(created_by_id=user_id).count()

    @staticmethod
    def _calculate_splits(total, participants):
        """
        Split amount with cent precision (no rounding errors).

        Algorithm:
            1. Convert to cents: ``total_cents = int(total * 100)``
            2. Base share: ``base = total_cents // N``
            3. Remainder: ``remainder = total_cents % N``
            4. First 'remainder' participants get ``(base + 1)`` cents
            5. Rest get 'base' cents

        Args:
            total (Decimal): The amount to split, two decimals.
            participants (list[User]): Users to split among, payer first.

        Returns:
            list[tuple]: ``(User, Decimal)`` pairs summing exactly to total.

        Raises:
            ValueError: If participants list is empty.
            ValueError: If calculated split doesn't sum to total.

        Example:
            100.00 split among 3 people::

                >>> splits = TransactionService._calculate_splits(
                ...     Decimal('100.00'),
                ...     [user1, user2, user3]
                ... )
                >>> [amount for _, amount in splits]
                [Decimal('33.34'), Decimal('33.33'), Decimal('33.33')]
        """
        if not participants:
            raise ValueError("At least one participant required")

        total_cents = int(total * 100)
        num_participants = len(participants)

        base_cents = total_cents // num_participants
        remainder_cents = total_cents % num_participants

        shares = []
        for i, user in enumerate(participants):
            # First 'remainder' participants get +1 cent
            user_cents = base_cents + 1 if i < remainder_cents else base_cents
            shares.append((user, Decimal(user_cents) / Decimal(100)))

        total_check = sum(amount for _, amount in shares)
        if total_check != total:
            raise ValueError(
                f"Split calculation error: {total_check} != {total}"
            )

        return shares

    @staticmethod
    def _clean_title(title):
        title = (title or '').strip()
        if not title:
            raise InvalidTransactionError("Title is required")
        return title

    @staticmethod
    def _clean_amount(amount):
        try:
            amount = Decimal(str(amount))
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidTransactionError(f"Invalid amount: {amount!r}")

        if not amount.is_finite() or amount <= 0:
            raise InvalidTransactionError("Amount must be greater than zero")
        if amount != amount.quantize(CENT):
            raise InvalidTransactionError("Amount cannot have more than two decimal places")
        return amount.quantize(CENT)

    @staticmethod
    def _resolve_group(group_id, user):
        try:
            return resolve_group(group_id=group_id, user=user)
        except (GroupNotFoundError, NotMemberError):
            raise InvalidGroupMembershipError()

    @staticmethod
    def _require_members(group, users):
        try:
            require_membership(group=group, users=users)
        except NotMemberError as e:
            raise InvalidGroupMembershipError(str(e))
