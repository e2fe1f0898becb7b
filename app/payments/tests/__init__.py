"""
Tests for payments app.

This package contains test modules for:
- test_models.py: Payment refund bookkeeping and transitions
- test_locks.py: DistributedLock acquire/release behaviour

Usage:
    pytest payments/tests/
"""
