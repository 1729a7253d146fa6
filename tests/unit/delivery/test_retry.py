"""
Module: test_retry.py
Description: Unit tests for the retry loop.

Drives RetryController with scripted attempt results and a recording
sleep, so attempt counts and backoff delays are observed directly.
"""

import pytest
from structlog.testing import capture_logs

from flying_events.delivery.failsafe import FailsafeDispatcher
from flying_events.delivery.retry import RetryController
from flying_events.exceptions import TokenExchangeError
from flying_events.models.outcome import (
    ClientErrorOutcome,
    DeliveryAttempt,
    ServerErrorOutcome,
    SuccessOutcome,
)
from flying_events.models.policy import RetryPolicy


def scripted(*results):
    """Attempt function returning (or raising) the given results in order."""
    remaining = list(results)
    calls = []

    async def attempt():
        calls.append(len(calls) + 1)
        result = remaining.pop(0)
        if isinstance(result, Exception):
            raise result
        return DeliveryAttempt(result, "failsafe")

    attempt.calls = calls
    return attempt


def should_retry(attempt):
    return FailsafeDispatcher.should_retry(attempt.outcome)


class TestRetryController:
    """Test cases for RetryController."""

    @pytest.mark.asyncio
    async def test_success_first_attempt(self, retry_policy, fake_sleep, sleeps):
        attempt = scripted(SuccessOutcome(status_code=200, body="ok"))

        result = await RetryController(retry_policy, fake_sleep).run(attempt, should_retry)

        assert result.outcome.body == "ok"
        assert attempt.calls == [1]
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self, retry_policy, fake_sleep, sleeps):
        attempt = scripted(ClientErrorOutcome(status_code=400))

        result = await RetryController(retry_policy, fake_sleep).run(attempt, should_retry)

        assert result.outcome.status_code == 400
        assert attempt.calls == [1]
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_retries_until_success(self, retry_policy, fake_sleep, sleeps):
        attempt = scripted(
            ServerErrorOutcome(status_code=500),
            ClientErrorOutcome(status_code=408),
            SuccessOutcome(status_code=200, body="ok"),
        )

        result = await RetryController(retry_policy, fake_sleep).run(attempt, should_retry)

        assert result.outcome.is_success
        assert attempt.calls == [1, 2, 3]
        assert sleeps == [1.0, 5.0]

    @pytest.mark.asyncio
    async def test_exhaustion_returns_last_failure(self, retry_policy, fake_sleep, sleeps):
        """Test the last outcome is returned once the budget is spent."""
        attempt = scripted(
            ServerErrorOutcome(status_code=500, body="first"),
            ServerErrorOutcome(status_code=502, body="second"),
            ServerErrorOutcome(status_code=503, body="third"),
            ServerErrorOutcome(status_code=504, body="last"),
        )

        result = await RetryController(retry_policy, fake_sleep).run(attempt, should_retry)

        assert result.outcome.status_code == 504
        assert result.outcome.body == "last"
        assert attempt.calls == [1, 2, 3, 4]
        assert sleeps == [1.0, 5.0, 25.0]

    @pytest.mark.asyncio
    async def test_delays_capped(self, fake_sleep, sleeps):
        policy = RetryPolicy(max_attempts=4, backoff_factor=5, min_delay_ms=1000, max_delay_ms=1000, jitter=False)
        attempt = scripted(*[ServerErrorOutcome(status_code=500)] * 4)

        await RetryController(policy, fake_sleep).run(attempt, should_retry)

        assert sleeps == [1.0, 1.0, 1.0]

    @pytest.mark.asyncio
    async def test_jitter_stays_within_bounds(self, fake_sleep, sleeps):
        """Test randomized delays stay within [0, capped base delay]."""
        policy = RetryPolicy(max_attempts=6, backoff_factor=2, min_delay_ms=1000, max_delay_ms=8000, jitter=True)
        attempt = scripted(*[ServerErrorOutcome(status_code=500)] * 6)

        await RetryController(policy, fake_sleep).run(attempt, should_retry)

        assert len(sleeps) == 5
        for attempt_number, delay in enumerate(sleeps, start=1):
            assert 0 <= delay <= policy.base_delay_ms(attempt_number) / 1000

    @pytest.mark.asyncio
    async def test_single_attempt_policy(self, fake_sleep, sleeps):
        policy = RetryPolicy(max_attempts=1)
        attempt = scripted(ServerErrorOutcome(status_code=500))

        result = await RetryController(policy, fake_sleep).run(attempt, should_retry)

        assert result.outcome.status_code == 500
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_retryable_token_failure_retried(self, retry_policy, fake_sleep, sleeps):
        attempt = scripted(
            TokenExchangeError("token endpoint down", 503),
            SuccessOutcome(status_code=200),
        )

        result = await RetryController(retry_policy, fake_sleep).run(attempt, should_retry)

        assert result.outcome.is_success
        assert attempt.calls == [1, 2]
        assert sleeps == [1.0]

    @pytest.mark.asyncio
    async def test_rejected_token_failure_raised(self, retry_policy, fake_sleep, sleeps):
        attempt = scripted(TokenExchangeError("bad credentials", 401))

        with pytest.raises(TokenExchangeError) as exc_info:
            await RetryController(retry_policy, fake_sleep).run(attempt, should_retry)

        assert exc_info.value.code == 401
        assert attempt.calls == [1]
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_exhausted_token_failures_raise_last(self, fake_sleep):
        policy = RetryPolicy(max_attempts=2, min_delay_ms=0, jitter=False)
        attempt = scripted(
            TokenExchangeError("first", 500),
            TokenExchangeError("second", -1),
        )

        with pytest.raises(TokenExchangeError, match="second"):
            await RetryController(policy, fake_sleep).run(attempt, should_retry)

    @pytest.mark.asyncio
    async def test_bound_coroutine_method_with_arguments(self, retry_policy, fake_sleep, sleeps):
        """Test the attempt is awaited when given as a bound method plus arguments."""
        class Pipeline:
            def __init__(self):
                self.received = []
                self.results = [ServerErrorOutcome(status_code=500), SuccessOutcome(status_code=200, body="ok")]

            async def attempt(self, event):
                self.received.append(event)
                return DeliveryAttempt(self.results.pop(0), "failsafe")

        pipeline = Pipeline()

        result = await RetryController(retry_policy, fake_sleep).run(pipeline.attempt, should_retry, "order.created")

        assert isinstance(result, DeliveryAttempt)
        assert result.outcome.body == "ok"
        assert pipeline.received == ["order.created", "order.created"]
        assert sleeps == [1.0]

    @pytest.mark.asyncio
    async def test_retry_log_reports_capped_delay(self, fake_sleep):
        """Test each scheduled retry logs its delay and the policy's capped delay."""
        policy = RetryPolicy(max_attempts=4, backoff_factor=5, min_delay_ms=1000, max_delay_ms=10000, jitter=True)
        attempt = scripted(*[ServerErrorOutcome(status_code=500)] * 4)

        with capture_logs() as logs:
            await RetryController(policy, fake_sleep).run(attempt, should_retry)

        retries = [entry for entry in logs if entry["event"] == "Delivery attempt failed, retry scheduled"]
        assert [entry["max_delay_seconds"] for entry in retries] == [1.0, 5.0, 10.0]
        for entry in retries:
            assert 0 <= entry["delay_seconds"] <= entry["max_delay_seconds"]
