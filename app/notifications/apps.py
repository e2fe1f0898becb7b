"""Django app configuration for notifications."""

from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    """Email templates and the delivery task. The app has no models."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"
    verbose_name = "Email notifications"
