"""
Package: flying_events
Description: Async client for the Flying Events distribution service.

Delivers events to subscribers through the worker endpoint, falls back
to the failsafe endpoint on server-side failures and retries whole
attempts with exponential backoff.
"""

from .client import FlyingEventsClient
from .config.settings import ClientSettings
from .exceptions import (
    ClientError,
    FlyingEventsError,
    FlyingEventsValidationError,
    ServerError,
    TokenExchangeError,
    TransportError,
)
from .models import Environment, EventRequest, RetryPolicy, SubscriberTokenRequest

__all__ = [
    "FlyingEventsClient",
    "ClientSettings",
    "Environment",
    "EventRequest",
    "SubscriberTokenRequest",
    "RetryPolicy",
    "FlyingEventsError",
    "FlyingEventsValidationError",
    "ClientError",
    "ServerError",
    "TransportError",
    "TokenExchangeError",
]

__version__ = "0.3.0"
