"""
Domain-specific exceptions for expenses app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class ExpensesServiceError(Exception):
    """Base exception for all expenses service errors."""
    pass


class ExpenseValidationError(ExpensesServiceError):
    """Raised when expense or split input is malformed."""
    pass


class ExpenseNotFoundError(ExpensesServiceError):
    """Raised when an expense does not exist or is not editable by the user."""
    pass


class PartiallyRepaidExpenseError(ExpensesServiceError):
    """Raised when editing an expense whose splits already received repayments."""
    pass


class BudgetNotFoundError(ExpensesServiceError):
    """Raised when a budget category does not exist for the user."""
    pass


class BudgetValidationError(ExpensesServiceError):
    """Raised when budget input is invalid (duplicate name, bad amount)."""
    pass
