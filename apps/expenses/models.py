from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class BudgetCategory(models.Model):
    """A user's spending budget that expenses can be filed under."""

    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='budget_categories'
    )
    name = models.CharField(max_length=100)
    budget_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    icon = models.CharField(max_length=16, blank=True)
    color = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'budget_categories'
        constraints = [
            models.UniqueConstraint(fields=['user', 'name'], name='unique_budget_name_per_user'),
        ]
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.budget_amount})"


class Expense(models.Model):
    """
    A single payment event.

    ``amount`` is the historical total at creation time; repayments reduce
    the splits, never the expense.
    """

    description = models.CharField(max_length=255)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    date = models.DateField()

    payer = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='expenses_paid'
    )
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='expenses_created'
    )

    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='expenses'
    )
    category = models.ForeignKey(
        BudgetCategory,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='expenses'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expenses'
        indexes = [
            models.Index(fields=['payer', 'date'], name='expenses_payer_date_idx'),
            models.Index(fields=['group', 'date'], name='expenses_group_date_idx'),
        ]
        ordering = ['-date', '-id']

    def __str__(self):
        return f"{self.description} - {self.amount} ({self.date})"


class Split(models.Model):
    """One participant's owed share of an expense."""

    expense = models.ForeignKey(
        Expense,
        on_delete=models.CASCADE,
        related_name='splits'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='splits'
    )

    # Outstanding debt, reduced by repayments
    amount_owed = models.DecimalField(max_digits=12, decimal_places=2)
    # Allocation at creation time, never changes
    original_amount = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        db_table = 'expense_splits'
        constraints = [
            models.UniqueConstraint(fields=['expense', 'user'], name='unique_split_per_participant'),
            models.CheckConstraint(
                condition=models.Q(amount_owed__gte=0),
                name='split_amount_owed_non_negative',
            ),
            models.CheckConstraint(
                condition=models.Q(amount_owed__lte=models.F('original_amount')),
                name='split_amount_owed_within_allocation',
            ),
        ]
        indexes = [
            models.Index(fields=['user', 'expense'], name='splits_user_expense_idx'),
        ]
        ordering = ['id']

    def __str__(self):
        return f"{self.user.get_display_name()} owes {self.amount_owed} on expense #{self.expense_id}"

    @property
    def amount_repaid(self):
        return self.original_amount - self.amount_owed
