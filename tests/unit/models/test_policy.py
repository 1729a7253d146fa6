"""
Module: test_policy.py
Description: Unit tests for RetryPolicy validation and delay computation.
"""

import pytest
from pydantic import ValidationError

from flying_events.models.policy import RetryPolicy


class TestRetryPolicy:
    """Test cases for RetryPolicy."""

    def test_defaults(self):
        """Test defaults allow 20 retries from one minute up to twenty minutes."""
        policy = RetryPolicy()

        assert policy.max_attempts == 21
        assert policy.backoff_factor == 5
        assert policy.min_delay_ms == 60000
        assert policy.max_delay_ms == 1200000
        assert policy.jitter is True

    @pytest.mark.parametrize("overrides", [
        {"max_attempts": 0},
        {"backoff_factor": 1},
        {"backoff_factor": 0.5},
        {"min_delay_ms": -1},
        {"min_delay_ms": 2000, "max_delay_ms": 1000},
    ])
    def test_invalid_policies_rejected(self, overrides):
        with pytest.raises(ValidationError):
            RetryPolicy(**overrides)

    def test_base_delay_grows_geometrically(self):
        """Test delay after attempt n is min * factor ** (n - 1)."""
        policy = RetryPolicy(backoff_factor=5, min_delay_ms=1000, max_delay_ms=100000)

        assert policy.base_delay_ms(1) == 1000
        assert policy.base_delay_ms(2) == 5000
        assert policy.base_delay_ms(3) == 25000

    def test_base_delay_capped(self):
        """Test delay never exceeds max_delay_ms."""
        policy = RetryPolicy(backoff_factor=5, min_delay_ms=1000, max_delay_ms=10000)

        assert policy.base_delay_ms(3) == 10000
        assert policy.base_delay_ms(5000) == 10000

    def test_policy_is_immutable(self):
        policy = RetryPolicy()

        with pytest.raises(ValidationError):
            policy.max_attempts = 3
