"""
Tests for refunds app.

This package contains test modules for:
- test_money.py, test_eligibility.py, test_access.py: pure rules
- test_orchestrator.py, test_process_refund.py: request, decision and execution
- test_cancellation.py, test_tasks.py: cancelled-event fan-out and Celery tasks
- test_integration.py: end-to-end journeys through the production wiring

Usage:
    pytest refunds/tests/
    pytest -m unit
"""
