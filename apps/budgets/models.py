from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class Budget(models.Model):
    """
    A user's personal monthly budget.

    One row per user, upserted in place without history. Group budgets
    live on ``Group.monthly_budget``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='budget'
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'budgets'

    def __str__(self):
        return f"{self.user.get_display_name()}: {self.amount}"
