from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from apps.accounts.models import default_currency


class WalletAccount(models.Model):
    """
    A user's virtual wallet.

    Created lazily the first time it is needed. Balance never goes
    negative; every change is mirrored by a WalletTransaction.
    """

    user = models.OneToOneField(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='wallet'
    )
    balance = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    currency = models.CharField(max_length=3, default=default_currency)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'wallet_accounts'
        constraints = [
            models.CheckConstraint(
                condition=models.Q(balance__gte=0),
                name='wallet_balance_non_negative',
            ),
        ]

    def __str__(self):
        return f"Wallet({self.user.email}: {self.balance} {self.currency})"


class TransactionType(models.TextChoices):
    CREDIT = 'credit', 'Credit'
    DEBIT = 'debit', 'Debit'


class WalletTransaction(models.Model):
    """
    Append-only record of a wallet balance change.

    Rows are written once and never updated or deleted.
    """

    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='wallet_transactions'
    )
    type = models.CharField(max_length=10, choices=TransactionType.choices)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    description = models.CharField(max_length=255, blank=True)
    # Set on debits that repaid a debt
    creditor = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='repayments_received'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'wallet_transactions'
        ordering = ['-created_at', '-id']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name='wallet_transaction_amount_positive',
            ),
        ]
        indexes = [
            models.Index(fields=['user', 'created_at'], name='wallet_tx_user_time_idx'),
        ]

    def __str__(self):
        return f"{self.get_type_display()} {self.amount} for {self.user.email}"

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            raise ValidationError("Wallet transactions cannot be modified")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Wallet transactions cannot be deleted")
