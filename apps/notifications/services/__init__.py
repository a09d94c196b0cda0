"""
Notifications app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions.
"""

from .exceptions import (
    NotificationsServiceError,
    NotificationNotFoundError,
    ReminderNotFoundError,
    ReminderValidationError,
    ReminderAlreadyPaidError,
)

from .broker import NotificationBroker, broker

from .notification_dispatch import (
    notify,
    list_notifications,
    mark_as_read,
    mark_all_as_read,
)

from .reminders import (
    create_reminder,
    send_all_reminders,
    list_reminders,
    pay_reminder,
)


__all__ = [
    # Exceptions
    'NotificationsServiceError',
    'NotificationNotFoundError',
    'ReminderNotFoundError',
    'ReminderValidationError',
    'ReminderAlreadyPaidError',

    # Broker
    'NotificationBroker',
    'broker',

    # Notification Dispatch
    'notify',
    'list_notifications',
    'mark_as_read',
    'mark_all_as_read',

    # Reminders
    'create_reminder',
    'send_all_reminders',
    'list_reminders',
    'pay_reminder',
]
