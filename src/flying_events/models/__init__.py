"""
Module: models
Description: Package initialization for Pydantic data models.

This package contains all data models used by the Flying Events client:
- EventRequest / SubscriberTokenRequest: Requests sent to the API
- RetryPolicy: Backoff configuration for event dispatch
- Outcome variants: Classified results of single API calls

All models are exported here for convenient importing.
"""

from .event import Environment, EventRequest, SubscriberTokenRequest
from .outcome import (
    ClientErrorOutcome,
    DeliveryAttempt,
    Outcome,
    ServerErrorOutcome,
    SuccessOutcome,
    TransportErrorOutcome,
)
from .policy import RetryPolicy

__all__ = [
    "Environment",
    "EventRequest",
    "SubscriberTokenRequest",
    "RetryPolicy",
    "Outcome",
    "SuccessOutcome",
    "ClientErrorOutcome",
    "ServerErrorOutcome",
    "TransportErrorOutcome",
    "DeliveryAttempt",
]
