"""
Notifications app configuration.
"""

from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    """Configuration for the Notifications app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.notifications'
    verbose_name = 'Notifications & Reminders'

    def ready(self):
        # Connects the domain event receivers
        from . import receivers  # noqa: F401
