"""
Templated email notifications.

Every notification is identified by a template key. A key maps to two
templates under notifications/email/: "<key>_subject.txt" and "<key>.txt".
Templates are rendered in the calling process and the rendered text is
delivered by the send_templated_email Celery task, so a slow or failing
mail server never blocks the caller.

Usage:
    from notifications.services import EmailNotifier

    notifier = EmailNotifier()
    notifier.send("refund_request_received", order.email, context)
"""

from __future__ import annotations

import logging
from typing import Any

from django.template.loader import render_to_string

from notifications.tasks import send_templated_email

logger = logging.getLogger(__name__)

TEMPLATE_DIR = "notifications/email"

TEMPLATE_KEYS = frozenset(
    {
        "refund_request_received",
        "refund_request_vendor_alert",
        "refund_request_approved",
        "refund_request_rejected",
        "refund_processed",
        "refund_processed_vendor",
    }
)


class EmailNotifier:
    """
    Sends registered email templates.

    Raises ValueError for unknown template keys. A blank recipient is
    skipped rather than treated as an error: orders are not required to
    carry an email address.
    """

    def render(self, template_key: str, context: dict[str, Any]) -> tuple[str, str]:
        """
        Render a template pair.

        Returns:
            (subject, body), with the subject collapsed to a single line
        """
        if template_key not in TEMPLATE_KEYS:
            raise ValueError(f"Unknown email template: {template_key}")

        subject = render_to_string(f"{TEMPLATE_DIR}/{template_key}_subject.txt", context)
        body = render_to_string(f"{TEMPLATE_DIR}/{template_key}.txt", context)
        return " ".join(subject.split()), body

    def send(self, template_key: str, recipient: str, context: dict[str, Any]) -> None:
        subject, body = self.render(template_key, context)

        if not recipient:
            logger.info(
                f"Skipping {template_key} email: no recipient",
                extra={"template_key": template_key},
            )
            return

        send_templated_email.delay(recipient, subject, body)
        logger.info(
            f"Queued {template_key} email to {recipient}",
            extra={"template_key": template_key},
        )
