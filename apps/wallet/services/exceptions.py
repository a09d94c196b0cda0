"""
Domain-specific exceptions for wallet app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class WalletServiceError(Exception):
    """Base exception for all wallet service errors."""
    pass


class InvalidAmountError(WalletServiceError):
    """Raised when an amount is not positive, not finite, or has more than 2 decimals."""
    pass


class InsufficientBalanceError(WalletServiceError):
    """Raised when a debit exceeds the wallet balance."""
    pass


class OverpaymentError(WalletServiceError):
    """Raised when a repayment exceeds what is owed to the creditor."""
    pass


class AllocationConflictError(WalletServiceError):
    """Raised when a split changed underneath a repayment allocation."""
    pass


class CreditorNotFoundError(WalletServiceError):
    """Raised when the creditor of a repayment does not exist."""
    pass


class InvalidCreditorError(WalletServiceError):
    """Raised when a user tries to repay a debt to themselves."""
    pass
