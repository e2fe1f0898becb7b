"""
Pytest fixtures for payments tests.
"""

from unittest.mock import MagicMock, patch

import pytest


@pytest.fixture
def mock_redis():
    """
    Mock the Redis connection used by DistributedLock.

    ``set`` succeeds (lock free) and ``eval`` returns 1 (we held it) unless
    a test overrides them.
    """
    redis = MagicMock()
    redis.set.return_value = True
    redis.eval.return_value = 1
    with patch("payments.locks.get_redis_connection", return_value=redis):
        yield redis
