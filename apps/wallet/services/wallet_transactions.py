"""
Wallet transaction service.

Every balance change locks the wallet row, updates it, and appends exactly
one WalletTransaction inside the same transaction, so the balance always
equals the sum of credits minus the sum of debits.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from django.db import IntegrityError, transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.wallet.models import TransactionType, WalletAccount, WalletTransaction

from .exceptions import InsufficientBalanceError, InvalidAmountError

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')
# Largest value a 12-digit, 2-place amount column holds
MAX_AMOUNT = Decimal('9999999999.99')


def to_money(value) -> Decimal:
    """
    Normalise a monetary amount to a two-decimal Decimal.

    Raises:
        InvalidAmountError: If the value is not a finite positive number
            with at most 2 decimal places
    """
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmountError(f"Invalid amount: {value!r}")

    if not amount.is_finite():
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    if amount <= 0:
        raise InvalidAmountError("Amount must be positive")
    if amount > MAX_AMOUNT:
        raise InvalidAmountError(f"Amount cannot exceed {MAX_AMOUNT}")
    if amount != amount.quantize(CENT):
        raise InvalidAmountError("Amount cannot have more than 2 decimal places")
    return amount.quantize(CENT)


def get_or_create_wallet(*, user: User) -> WalletAccount:
    """
    Return the user's wallet, creating an empty one on first use.

    Two requests racing to create the wallet both end up with the same row:
    the loser's insert hits the unique constraint and falls back to a read.
    """
    try:
        return WalletAccount.objects.get(user=user)
    except WalletAccount.DoesNotExist:
        pass

    try:
        with transaction.atomic():
            wallet = WalletAccount.objects.create(user=user, currency=user.currency)
    except IntegrityError:
        return WalletAccount.objects.get(user=user)

    logger.info("Wallet created for user %s", user.id)
    return wallet


def _lock_wallet(user: User) -> WalletAccount:
    get_or_create_wallet(user=user)
    return WalletAccount.objects.select_for_update().get(user=user)


def record_transaction(
    *,
    user: User,
    type: str,
    amount,
    description: str = '',
    creditor: Optional[User] = None,
) -> Tuple[Decimal, WalletTransaction]:
    """Apply one credit or debit under a wallet row lock; returns (new balance, record)."""
    amount = to_money(amount)

    with transaction.atomic():
        wallet = _lock_wallet(user)

        if type == TransactionType.DEBIT:
            if amount > wallet.balance:
                logger.warning(
                    "Debit of %s refused for user %s: balance is %s",
                    amount, user.id, wallet.balance
                )
                raise InsufficientBalanceError(
                    f"Insufficient balance: {wallet.balance} available, {amount} requested"
                )
            wallet.balance -= amount
        else:
            wallet.balance += amount
        wallet.save(update_fields=['balance', 'updated_at'])

        record = WalletTransaction.objects.create(
            user=user,
            type=type,
            amount=amount,
            description=description,
            creditor=creditor,
        )

    logger.info("Wallet %s of %s for user %s, balance now %s", type, amount, user.id, wallet.balance)
    return wallet.balance, record


def credit(*, user: User, amount, description: str = '') -> Decimal:
    """
    Add funds to the user's wallet.

    Returns:
        The new balance

    Raises:
        InvalidAmountError: If amount is not a valid positive amount
    """
    balance, _ = record_transaction(user=user, type=TransactionType.CREDIT, amount=amount, description=description)
    return balance


def debit(*, user: User, amount, description: str = '', creditor: Optional[User] = None) -> Decimal:
    """
    Take funds out of the user's wallet.

    Args:
        user: Wallet owner
        amount: Positive amount with at most 2 decimal places
        description: Free text stored on the transaction
        creditor: The user being repaid, when the debit settles a debt

    Returns:
        The new balance

    Raises:
        InvalidAmountError: If amount is not a valid positive amount
        InsufficientBalanceError: If amount exceeds the balance
    """
    balance, _ = record_transaction(
        user=user,
        type=TransactionType.DEBIT,
        amount=amount,
        description=description,
        creditor=creditor,
    )
    return balance


def get_wallet_transactions(*, user: User) -> QuerySet[WalletTransaction]:
    """The user's wallet history, newest first."""
    return (
        WalletTransaction.objects
        .filter(user=user)
        .select_related('creditor')
        .order_by('-created_at', '-id')
    )
