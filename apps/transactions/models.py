from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class TransactionKind(models.TextChoices):
    EXPENSE = 'expense', 'Expense'
    LOAN = 'loan', 'Loan'
    SETTLEMENT = 'settlement', 'Settlement'


class Transaction(models.Model):
    """
    Ledger entry: an expense, a loan or a settlement.

    Entries are immutable after creation; only the creator may delete them.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)

    # Financial details
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    kind = models.CharField(max_length=20, choices=TransactionKind.choices)

    # Parties
    paid_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='transactions_paid'
    )
    paid_to = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='settlements_received'
    )
    loaned_to = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='loans_received'
    )

    # Participant display names, payer first (expenses only)
    split_between = models.JSONField(null=True, blank=True)

    # Metadata
    note = models.TextField(blank=True)
    category = models.CharField(max_length=100, blank=True)
    tag = models.CharField(max_length=100, blank=True)

    # Group context (null for personal records)
    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='transactions'
    )

    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='transactions_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'transactions'
        indexes = [
            models.Index(fields=['group', 'created_at'], name='transactions_group_idx'),
            models.Index(fields=['created_by', 'kind'], name='transactions_creator_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        context = f"Group: {self.group.name}" if self.group_id else "Personal"
        return f"{self.title} - {self.amount} ({self.kind}, {context})"

    @property
    def is_split(self):
        return bool(self.split_between)


class TransactionSplit(models.Model):
    """One participant's share of a split expense."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    transaction = models.ForeignKey(
        Transaction,
        on_delete=models.CASCADE,
        related_name='splits'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='transaction_splits'
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'transaction_splits'
        unique_together = [['transaction', 'user']]
        indexes = [
            models.Index(fields=['user', 'created_at'], name='transaction_splits_user_idx'),
        ]
        ordering = ['created_at']

    def __str__(self):
        return f"{self.user.get_display_name()} owes {self.amount} for {self.transaction.title}"
