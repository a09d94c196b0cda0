"""
Notification dispatch service.

Stores notifications and pushes them to live subscribers once the
surrounding transaction has committed.
"""

import logging
from typing import Optional

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.notifications.models import Notification, NotificationType

from .broker import broker
from .exceptions import NotificationNotFoundError

logger = logging.getLogger(__name__)


def notify(
    *,
    user: User,
    type: str = NotificationType.GENERAL,
    title: str,
    message: str,
    data: Optional[dict] = None,
) -> Notification:
    """
    Store a notification for ``user`` and push it after commit.

    Args:
        user: Recipient
        type: One of NotificationType
        title: Short heading
        message: Body text
        data: Extra JSON-serialisable context for the client

    Returns:
        The stored Notification
    """
    notification = Notification.objects.create(
        user=user,
        type=type,
        title=title,
        message=message,
        data=data or {},
    )
    logger.info("Notification %s (%s) sent to user %s", notification.id, type, user.id)

    payload = {'event': 'notification', 'notification': notification.to_payload()}
    transaction.on_commit(lambda: broker.publish(user.id, payload))
    return notification


def list_notifications(*, user: User, unread_only: bool = False) -> QuerySet[Notification]:
    """The user's notifications, newest first."""
    queryset = Notification.objects.filter(user=user)
    if unread_only:
        queryset = queryset.filter(is_read=False)
    return queryset.order_by('-created_at', '-id')


def mark_as_read(*, user: User, notification_id) -> Notification:
    """
    Mark one of the user's notifications as read.

    Raises:
        NotificationNotFoundError: If the notification is not the user's
    """
    notification = Notification.objects.filter(id=notification_id, user=user).first()
    if notification is None:
        raise NotificationNotFoundError(f"Notification with ID {notification_id} not found")

    if not notification.is_read:
        notification.is_read = True
        notification.save(update_fields=['is_read'])

    payload = {'event': 'notification_read', 'notification_id': notification.id}
    transaction.on_commit(lambda: broker.publish(user.id, payload))
    return notification


def mark_all_as_read(*, user: User) -> int:
    """Mark every unread notification of the user as read; returns how many changed."""
    return Notification.objects.filter(user=user, is_read=False).update(is_read=True)
