"""
Domain-specific exceptions for notifications app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class NotificationsServiceError(Exception):
    """Base exception for all notifications service errors."""
    pass


class NotificationNotFoundError(NotificationsServiceError):
    """Raised when a notification does not exist for the user."""
    pass


class ReminderNotFoundError(NotificationsServiceError):
    """Raised when a reminder does not exist or is not addressed to the user."""
    pass


class ReminderValidationError(NotificationsServiceError):
    """Raised when reminder input is invalid (unknown or self debtor)."""
    pass


class ReminderAlreadyPaidError(NotificationsServiceError):
    """Raised when paying a reminder that has already been paid."""
    pass
