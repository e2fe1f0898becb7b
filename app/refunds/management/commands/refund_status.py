"""
Show refund logs and the payments they ran against.

    python manage.py refund_status --order 42
    python manage.py refund_status --log 7
"""

from django.core.management.base import BaseCommand, CommandError

from payments.models import Payment
from refunds.models import RefundLog
from refunds.services.money import format_cents, to_cents


class Command(BaseCommand):
    help = "Show refund log status for an order or a single refund log."

    def add_arguments(self, parser):
        parser.add_argument("--order", type=int, help="Order id")
        parser.add_argument("--log", type=int, help="Refund log id")

    def handle(self, *args, **options):
        order_id = options.get("order")
        log_id = options.get("log")

        if (order_id is None) == (log_id is None):
            raise CommandError("Provide exactly one of --order=ORDER_ID or --log=LOG_ID.")

        logs = RefundLog.objects.order_by("-id")
        if log_id is not None:
            logs = logs.filter(pk=log_id)
        else:
            logs = logs.filter(order_id=order_id)
        logs = list(logs)

        if not logs:
            if log_id is not None:
                self.stdout.write(self.style.WARNING(f"No refund log found with id {log_id}."))
            else:
                self.stdout.write(self.style.WARNING(f"No refund logs found for order {order_id}."))
            return

        self.stdout.write(self.style.MIGRATE_HEADING("Refund log(s)"))
        for log in logs:
            completed = log.completed_at.strftime("%Y-%m-%d %H:%M") if log.completed_at else "-"
            self.stdout.write(
                f"  #{log.pk}  order={log.order_id}  {format_cents(log.amount_cents, log.currency)}  "
                f"{log.refund_type}/{log.refund_scope}  status={log.status}  "
                f"refund_id={log.gateway_refund_id or '-'}  "
                f"created={log.created_at:%Y-%m-%d %H:%M}  completed={completed}"
            )
            if log.error_message:
                self.stdout.write(self.style.ERROR(f"      error: {log.error_message}"))

        if order_id is None:
            return

        payments = Payment.objects.filter(order_id=order_id).order_by("id")
        if not payments:
            self.stdout.write(f"Order {order_id}: no payments found.")
            return

        self.stdout.write(self.style.MIGRATE_HEADING(f"Payments for order {order_id}"))
        for payment in payments:
            self.stdout.write(
                f"  #{payment.pk}  state={payment.state}  "
                f"amount={format_cents(to_cents(payment.amount), payment.currency)}  "
                f"refunded={format_cents(to_cents(payment.refunded_amount), payment.currency)}  "
                f"remote_id={payment.remote_id or '-'}"
            )
