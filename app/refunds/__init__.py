"""
Refunds app: buyer refund requests, vendor decisions and refund execution.

Request flow:
    buyer asks  -> RefundRequest (requested)
    vendor approves -> RefundRequest (approved) + RefundLog (pending) + queued job
    worker executes -> RefundLog (completed | failed), request completed

Entry points live on refunds.services.orchestrator.RefundOrchestrator;
obtain a production-wired instance with refunds.adapters.get_refund_orchestrator().
"""
