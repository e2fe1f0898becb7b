"""
Celery configuration for the refunds platform.

Celery runs the asynchronous side of the refund engine:
- Refund execution (refunds.tasks.process_refund_log)
- Event-cancellation fan-out (refunds.tasks.refund_cancelled_event)
- Email delivery (notifications.tasks.send_templated_email)

Redis is both the message broker and result backend. Tasks are
auto-discovered from all installed Django apps.

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

# Set the default Django settings module for the Celery worker
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# Load configuration from Django settings
# All Celery settings should be prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Celery will look for a tasks.py module in each installed app
app.autodiscover_tasks()
