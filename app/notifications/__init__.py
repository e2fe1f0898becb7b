"""
Notifications app for templated email delivery.

This app provides:
- EmailNotifier, which renders a registered email template and hands it
  to Celery for delivery
- send_templated_email, the Celery task that talks to the email backend

Usage:
    from notifications.services import EmailNotifier

    EmailNotifier().send(
        "refund_processed",
        "buyer@example.com",
        {"event_title": "Summer Gala", "refunded_amount": "AUD 75.00"},
    )
"""
