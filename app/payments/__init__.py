"""
Payments app: captured payments and the gateway that refunds them.

This app provides:
- Payment: money captured against a commerce order, with its refunded total
- StripeAdapter: the single entry point for Stripe API calls
- StripeRefundGateway: refunds one payment and records the result on it
- DistributedLock: Redis-based mutual exclusion for refund execution
"""
