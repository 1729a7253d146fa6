"""
Module: conftest.py
Description: Shared pytest fixtures for Flying Events client tests.

Provides signed test tokens, a client wired to a recording sleep so
retry delays are observed instead of waited for, and sample events.
HTTP traffic is mocked with pytest-httpx.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from flying_events.client import FlyingEventsClient
from flying_events.models.policy import RetryPolicy


def make_token(expires_in: timedelta, subject: str = "8591ce4a-ba4e-47bb-b214-2bd34c51b408") -> str:
    """Encode a JWT expiring after the given delta (negative for expired)."""
    exp = datetime.now(timezone.utc) + expires_in
    return jwt.encode(
        {"sub": subject, "role": "APPLICATION", "exp": int(exp.timestamp())},
        "flying-events-test-signing-secret-0123456789",
        algorithm="HS256"
    )


@pytest.fixture
def token_factory():
    """Factory for JWTs with a chosen lifetime."""
    return make_token


@pytest.fixture
def valid_token():
    """Token valid for one hour."""
    return make_token(timedelta(hours=1))


@pytest.fixture
def expired_token():
    """Token that expired an hour ago."""
    return make_token(timedelta(hours=-1))


@pytest.fixture
def sleeps():
    """Delays requested by the retry loop, in seconds."""
    return []


@pytest.fixture
def fake_sleep(sleeps):
    """Async sleep that records the delay and returns immediately."""
    async def _sleep(seconds):
        sleeps.append(seconds)
    return _sleep


@pytest.fixture
def retry_policy():
    """Deterministic policy: 4 attempts, 1s then 5s then 25s (capped at 30s)."""
    return RetryPolicy(
        max_attempts=4,
        backoff_factor=5,
        min_delay_ms=1000,
        max_delay_ms=30000,
        jitter=False
    )


@pytest.fixture
def client(retry_policy, fake_sleep):
    """Client for the LIVE environment with no credential yet."""
    return FlyingEventsClient(
        "xxx",
        "yyy",
        "LIVE",
        retry_policy=retry_policy,
        sleep=fake_sleep
    )


@pytest.fixture
def authed_client(client, valid_token):
    """Client already holding a valid credential."""
    client.set_access_token(valid_token)
    return client


@pytest.fixture
def sample_event():
    """Typical event as a caller would pass it."""
    return {
        "eventName": "order.created",
        "payload": {"order_id": "12345", "amount": 99.99},
        "subscribersIds": ["1", "2"]
    }
