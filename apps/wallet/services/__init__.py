"""
Wallet app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions.
"""

from .exceptions import (
    WalletServiceError,
    InvalidAmountError,
    InsufficientBalanceError,
    OverpaymentError,
    AllocationConflictError,
    CreditorNotFoundError,
    InvalidCreditorError,
)

from .wallet_transactions import (
    to_money,
    get_or_create_wallet,
    record_transaction,
    credit,
    debit,
    get_wallet_transactions,
)

from .debt_settlement import (
    SplitUpdate,
    AllocationResult,
    PaymentResult,
    outstanding_splits,
    allocate_repayment,
    pay_debt,
)


__all__ = [
    # Exceptions
    'WalletServiceError',
    'InvalidAmountError',
    'InsufficientBalanceError',
    'OverpaymentError',
    'AllocationConflictError',
    'CreditorNotFoundError',
    'InvalidCreditorError',

    # Wallet Transactions
    'to_money',
    'get_or_create_wallet',
    'record_transaction',
    'credit',
    'debit',
    'get_wallet_transactions',

    # Debt Settlement
    'SplitUpdate',
    'AllocationResult',
    'PaymentResult',
    'outstanding_splits',
    'allocate_repayment',
    'pay_debt',
]
