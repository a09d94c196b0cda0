"""
Receivers for domain events raised by other apps.
"""

from django.dispatch import receiver

from apps.notifications.models import NotificationType
from apps.notifications.services import notify
from apps.wallet.signals import debt_repaid


@receiver(debt_repaid, dispatch_uid='notify_creditor_of_repayment')
def notify_creditor_of_repayment(sender, payer, creditor, amount, splits_updated, **kwargs):
    notify(
        user=creditor,
        type=NotificationType.PAYMENT_RECEIVED,
        title="Payment received",
        message=f"{payer.get_display_name()} paid you {amount}",
        data={
            'payer_id': payer.id,
            'amount': str(amount),
            'split_ids': [update.split_id for update in splits_updated],
        },
    )
