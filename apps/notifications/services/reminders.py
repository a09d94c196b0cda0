"""
Payment reminder service.

A creditor reminds a debtor of money owed; the debtor can settle the
reminder straight from their wallet.
"""

import logging

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.services import get_friends
from apps.expenses.services import compute_friend_balance
from apps.notifications.models import NotificationType, PaymentReminder
from apps.wallet.services import PaymentResult, pay_debt, to_money

from .exceptions import (
    ReminderAlreadyPaidError,
    ReminderNotFoundError,
    ReminderValidationError,
)
from .notification_dispatch import notify

logger = logging.getLogger(__name__)


def _notify_debtor(reminder: PaymentReminder) -> None:
    creditor_name = reminder.creditor.get_display_name()
    notify(
        user=reminder.debtor,
        type=NotificationType.PAYMENT_REMINDER,
        title="Payment reminder",
        message=f"{creditor_name} reminded you that you owe {reminder.amount}",
        data={
            'reminder_id': reminder.id,
            'creditor_id': reminder.creditor_id,
            'amount': str(reminder.amount),
        },
    )


@transaction.atomic
def create_reminder(
    *,
    creditor: User,
    debtor_id,
    amount,
    due_date=None,
    description: str = '',
) -> PaymentReminder:
    """
    Remind ``debtor_id`` that they owe ``creditor`` money, and notify them.

    Raises:
        ReminderValidationError: If the debtor is unknown or is the creditor
        InvalidAmountError: If amount is not a valid positive amount
    """
    amount = to_money(amount)

    if str(debtor_id) == str(creditor.id):
        raise ReminderValidationError("You cannot send a reminder to yourself")
    try:
        debtor = User.objects.get(id=debtor_id, is_active=True)
    except (User.DoesNotExist, ValueError, TypeError):
        raise ReminderValidationError(f"User with ID {debtor_id} not found")

    reminder = PaymentReminder.objects.create(
        creditor=creditor,
        debtor=debtor,
        amount=amount,
        due_date=due_date,
        description=description,
    )
    _notify_debtor(reminder)

    logger.info("Reminder %s for %s sent by user %s to user %s", reminder.id, amount, creditor.id, debtor.id)
    return reminder


@transaction.atomic
def send_all_reminders(*, creditor: User) -> int:
    """
    Send a reminder to every friend who currently owes the creditor money.

    The reminder amount is the friend's net balance towards the creditor.

    Returns:
        Number of reminders sent
    """
    sent = 0
    for friend in get_friends(user=creditor):
        balance = compute_friend_balance(user=creditor, friend=friend)
        if balance <= 0:
            continue
        create_reminder(
            creditor=creditor,
            debtor_id=friend.id,
            amount=balance,
            description="Outstanding balance",
        )
        sent += 1
    return sent


def list_reminders(*, user: User) -> QuerySet[PaymentReminder]:
    """Reminders addressed to the user, unpaid first."""
    return (
        PaymentReminder.objects
        .filter(debtor=user)
        .select_related('creditor')
        .order_by('paid', '-created_at', '-id')
    )


@transaction.atomic
def pay_reminder(*, user: User, reminder_id) -> PaymentResult:
    """
    Pay a reminder from the user's wallet.

    The wallet debit, the debt settlement and marking the reminder paid
    happen in one transaction.

    Raises:
        ReminderNotFoundError: If the reminder is not addressed to the user
        ReminderAlreadyPaidError: If it has already been paid
        plus anything ``pay_debt`` raises
    """
    reminder = (
        PaymentReminder.objects
        .select_for_update()
        .filter(id=reminder_id, debtor=user)
        .first()
    )
    if reminder is None:
        raise ReminderNotFoundError(f"Reminder with ID {reminder_id} not found")
    if reminder.paid:
        raise ReminderAlreadyPaidError("This reminder has already been paid")

    result = pay_debt(
        user=user,
        amount=reminder.amount,
        creditor_id=reminder.creditor_id,
        description=reminder.description or "Payment reminder",
    )

    reminder.paid = True
    reminder.paid_at = timezone.now()
    reminder.save(update_fields=['paid', 'paid_at'])

    logger.info("Reminder %s paid by user %s", reminder.id, user.id)
    return result
