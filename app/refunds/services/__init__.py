"""
Refund services.

- money: integer-cents arithmetic over orders and payments
- eligibility: buyer self-service refund gates
- access: vendor ownership checks
- ledger: CRUD for refund requests
- orchestrator: request, decision and execution workflow
- cancellation: bulk refunds when an event is cancelled
- vendor_orders: vendor-facing order overview for an event
"""
