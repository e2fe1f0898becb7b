"""
Tests for notification Celery tasks.
"""

from smtplib import SMTPException
from unittest.mock import patch

import pytest
from django.core import mail

from notifications.tasks import send_templated_email


class TestSendTemplatedEmail:
    def test_sends_through_email_backend(self, settings):
        settings.DEFAULT_FROM_EMAIL = "refunds@example.com"

        result = send_templated_email("buyer@example.com", "Refund processed", "Body text")

        assert result is True
        assert len(mail.outbox) == 1
        message = mail.outbox[0]
        assert message.to == ["buyer@example.com"]
        assert message.subject == "Refund processed"
        assert message.body == "Body text"
        assert message.from_email == "refunds@example.com"

    def test_delay_runs_eagerly_in_tests(self):
        send_templated_email.delay("vendor@example.com", "Subject", "Body")

        assert [m.to for m in mail.outbox] == [["vendor@example.com"]]

    def test_transient_failures_are_retried(self):
        assert send_templated_email.autoretry_for == (SMTPException, ConnectionError)
        assert send_templated_email.retry_kwargs == {"max_retries": 5}
        assert send_templated_email.retry_backoff is True

    def test_failure_propagates(self):
        with patch("notifications.tasks.send_mail", side_effect=ValueError("bad address")):
            with pytest.raises(ValueError):
                send_templated_email("buyer@example.com", "Subject", "Body")
