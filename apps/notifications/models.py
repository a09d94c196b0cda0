from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class NotificationType(models.TextChoices):
    PAYMENT_RECEIVED = 'payment_received', 'Payment Received'
    PAYMENT_REMINDER = 'payment_reminder', 'Payment Reminder'
    GENERAL = 'general', 'General'


class Notification(models.Model):
    """
    A message for one user.

    The stored row is authoritative; live push delivery is best effort.
    """

    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='notifications'
    )
    type = models.CharField(
        max_length=32,
        choices=NotificationType.choices,
        default=NotificationType.GENERAL
    )
    title = models.CharField(max_length=200)
    message = models.TextField()
    data = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notifications'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notif_user_read_idx'),
        ]

    def __str__(self):
        return f"{self.title} -> {self.user.email}"

    def to_payload(self):
        return {
            'id': self.id,
            'type': self.type,
            'title': self.title,
            'message': self.message,
            'data': self.data,
            'is_read': self.is_read,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class PaymentReminder(models.Model):
    """A creditor's request that a debtor settle an amount."""

    creditor = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='reminders_sent'
    )
    debtor = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='reminders_received'
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    due_date = models.DateField(null=True, blank=True)
    description = models.CharField(max_length=255, blank=True)
    paid = models.BooleanField(default=False)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payment_reminders'
        ordering = ['paid', '-created_at', '-id']
        indexes = [
            models.Index(fields=['debtor', 'paid'], name='reminder_debtor_paid_idx'),
        ]

    def __str__(self):
        return f"{self.debtor.email} owes {self.creditor.email} {self.amount}"
