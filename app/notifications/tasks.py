"""
Celery tasks for notification delivery.

Tasks:
    send_templated_email: Deliver a rendered email through Django's
        configured email backend

Transient SMTP and connection failures are retried with exponential
backoff; anything else fails the task.

Usage:
    from notifications.tasks import send_templated_email

    # Normally called by EmailNotifier.send()
    send_templated_email.delay("buyer@example.com", subject, body)
"""

from __future__ import annotations

import logging
from smtplib import SMTPException

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)

MAX_EMAIL_RETRIES = 5


@shared_task(
    bind=True,
    autoretry_for=(SMTPException, ConnectionError),
    retry_backoff=True,
    retry_backoff_max=600,
    retry_kwargs={"max_retries": MAX_EMAIL_RETRIES},
)
def send_templated_email(self, recipient: str, subject: str, body: str) -> bool:
    """
    Send one plain-text email.

    Args:
        recipient: Email address
        subject: Rendered subject line
        body: Rendered plain-text body

    Returns:
        True once the backend accepted the message
    """
    logger.info(
        f"Sending email to {recipient}: {subject}",
        extra={"attempt": self.request.retries + 1},
    )
    send_mail(
        subject,
        body,
        settings.DEFAULT_FROM_EMAIL,
        [recipient],
        fail_silently=False,
    )
    return True
