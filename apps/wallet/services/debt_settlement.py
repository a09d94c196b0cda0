"""
Debt settlement service.

Applies a repayment from a debtor to a creditor across the debtor's
outstanding splits on expenses the creditor paid for. The oldest expense
is settled first (expense date, then expense id), so the same repayment
against the same data always touches the same splits.

``pay_debt`` is the single entry point for "pay what I owe": it debits the
wallet and allocates the repayment in one transaction. Either both happen
or neither does.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from django.db import transaction

from apps.accounts.models import User
from apps.expenses.models import Split
from apps.wallet.models import TransactionType, WalletTransaction
from apps.wallet.signals import debt_repaid

from .exceptions import (
    AllocationConflictError,
    CreditorNotFoundError,
    InvalidCreditorError,
    OverpaymentError,
)
from .wallet_transactions import record_transaction, to_money

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


@dataclass(frozen=True)
class SplitUpdate:
    split_id: int
    new_amount: Decimal


@dataclass(frozen=True)
class AllocationResult:
    splits_updated: List[SplitUpdate] = field(default_factory=list)
    # Always zero while overpayments are rejected
    remainder_unapplied: Decimal = ZERO


@dataclass(frozen=True)
class PaymentResult:
    new_balance: Decimal
    splits_updated: List[SplitUpdate]
    transaction: WalletTransaction


def outstanding_splits(*, payer: User, creditor: User):
    """Splits ``payer`` still owes on ``creditor``'s expenses, oldest first."""
    return (
        Split.objects
        .filter(user=payer, expense__payer=creditor, amount_owed__gt=0)
        .order_by('expense__date', 'expense_id', 'id')
    )


@transaction.atomic
def allocate_repayment(*, payer: User, creditor: User, amount) -> AllocationResult:
    """
    Reduce ``payer``'s outstanding splits owed to ``creditor`` by ``amount``.

    The matching splits are locked for the rest of the transaction and
    settled oldest first; each split is reduced by as much of the remaining
    amount as it can absorb. Splits that are not touched are not written.

    Args:
        payer: The debtor making the repayment
        creditor: The user who paid the expenses
        amount: Repayment, positive with at most 2 decimal places

    Returns:
        AllocationResult listing every split written and its new amount

    Raises:
        InvalidAmountError: If amount is not a valid positive amount
        OverpaymentError: If amount exceeds everything owed to the creditor
        AllocationConflictError: If a split changed after it was locked
    """
    amount = to_money(amount)

    splits = list(outstanding_splits(payer=payer, creditor=creditor).select_for_update(of=('self',)))
    total_owed = sum((split.amount_owed for split in splits), ZERO)

    if amount > total_owed:
        logger.warning(
            "Repayment of %s from user %s to user %s refused: only %s owed",
            amount, payer.id, creditor.id, total_owed
        )
        raise OverpaymentError(
            f"Payment of {amount} exceeds the {total_owed} owed to this user"
        )

    remaining = amount
    updates = []
    for split in splits:
        if remaining == ZERO:
            break

        reduction = min(remaining, split.amount_owed)
        new_amount = split.amount_owed - reduction

        written = (
            Split.objects
            .filter(id=split.id, amount_owed=split.amount_owed)
            .update(amount_owed=new_amount)
        )
        if written != 1:
            raise AllocationConflictError(
                f"Split {split.id} changed while the repayment was being applied"
            )

        updates.append(SplitUpdate(split_id=split.id, new_amount=new_amount))
        remaining -= reduction

    logger.info(
        "Repayment of %s from user %s to user %s applied to %d split(s)",
        amount, payer.id, creditor.id, len(updates)
    )
    return AllocationResult(splits_updated=updates, remainder_unapplied=remaining)


def _resolve_creditor(*, user: User, creditor_id) -> User:
    if str(creditor_id) == str(user.id):
        raise InvalidCreditorError("You cannot repay a debt to yourself")
    try:
        return User.objects.get(id=creditor_id, is_active=True)
    except (User.DoesNotExist, ValueError, TypeError):
        raise CreditorNotFoundError(f"User with ID {creditor_id} not found")


def _announce_repayment(*, payer: User, creditor: User, amount: Decimal, splits_updated: List[SplitUpdate]) -> None:
    # Runs after commit; a failing receiver must not fail the committed payment
    responses = debt_repaid.send_robust(
        sender=WalletTransaction,
        payer=payer,
        creditor=creditor,
        amount=amount,
        splits_updated=splits_updated,
    )
    for receiver, response in responses:
        if isinstance(response, Exception):
            logger.error(
                "debt_repaid receiver %r failed for repayment from user %s to user %s",
                receiver, payer.id, creditor.id,
                exc_info=response,
            )


def pay_debt(*, user: User, amount, creditor_id=None, description: str = '') -> PaymentResult:
    """
    Pay from the user's wallet, settling debts to ``creditor_id`` if given.

    The wallet row is locked before any split row, so concurrent payments
    by the same user queue up behind each other. Any failure rolls back
    both the debit and the allocation.

    Without ``creditor_id`` this is a plain wallet debit.

    Returns:
        PaymentResult with the new balance, the splits written and the
        wallet transaction

    Raises:
        InvalidAmountError: If amount is not a valid positive amount
        InvalidCreditorError: If the user names themselves as creditor
        CreditorNotFoundError: If the creditor does not exist
        InsufficientBalanceError: If amount exceeds the wallet balance
        OverpaymentError: If amount exceeds what is owed to the creditor
        AllocationConflictError: If a split changed underneath the allocation
    """
    amount = to_money(amount)
    creditor: Optional[User] = None

    with transaction.atomic():
        if creditor_id is not None:
            creditor = _resolve_creditor(user=user, creditor_id=creditor_id)

        if not description:
            description = f"Debt repayment to {creditor.get_display_name()}" if creditor else "Wallet payment"

        new_balance, record = record_transaction(
            user=user,
            type=TransactionType.DEBIT,
            amount=amount,
            description=description,
            creditor=creditor,
        )

        splits_updated = []
        if creditor is not None:
            splits_updated = allocate_repayment(payer=user, creditor=creditor, amount=amount).splits_updated

            transaction.on_commit(lambda: _announce_repayment(
                payer=user,
                creditor=creditor,
                amount=amount,
                splits_updated=splits_updated,
            ))

    return PaymentResult(new_balance=new_balance, splits_updated=splits_updated, transaction=record)
