"""
Module: event.py
Description: Event data models for the Flying Events client.

Defines the request models sent to the remote API. Field names are
snake_case in Python and camelCase on the wire; both spellings are
accepted when validating caller input.

Key Components:
- Environment: LIVE / TEST target environment
- EventRequest: Event to distribute to a list of subscribers
- SubscriberTokenRequest: Subscriber whose token is requested

Dependencies: pydantic, enum, typing
Author: Flying Events Team
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Environment(str, Enum):
    """Target environment for events and subscriber tokens."""

    LIVE = "LIVE"
    TEST = "TEST"


class EventRequest(BaseModel):
    """
    Event to deliver through the worker (and, on failure, failsafe) endpoint.

    Immutable once built. The environment is injected by the client,
    never by the caller, through with_environment().

    Attributes:
        event_name: Name of the event (e.g. 'order.created')
        payload: Event payload, a string or any JSON structure
        subscribers_ids: Ordered subscriber identifiers to notify
        environment: Target environment, set by the client
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel
    )

    event_name: str = Field(
        ...,
        min_length=1,
        description="Event name"
    )
    payload: Union[str, Dict[str, Any], List[Any]] = Field(
        ...,
        description="Event payload data"
    )
    subscribers_ids: List[str] = Field(
        ...,
        min_length=1,
        description="Subscribers that receive the event"
    )
    environment: Optional[Environment] = Field(
        default=None,
        description="Target environment, injected by the client"
    )

    @field_validator('event_name')
    @classmethod
    def validate_event_name(cls, v: str) -> str:
        """Reject whitespace-only event names."""
        if not v.strip():
            raise ValueError("eventName cannot be blank")
        return v

    @field_validator('payload')
    @classmethod
    def validate_payload(cls, v: Any) -> Any:
        """Validate the payload is present, preserving all JSON types."""
        if not v:
            raise ValueError("payload cannot be empty")
        return v

    def with_environment(self, environment: Environment) -> "EventRequest":
        """Return a copy of this request targeting the given environment."""
        return self.model_copy(update={"environment": environment})

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the camelCase JSON body expected by the API."""
        return self.model_dump(mode="json", by_alias=True)


class SubscriberTokenRequest(BaseModel):
    """Request for a subscriber-scoped bearer token."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True
    )

    subscriber_id: str = Field(
        ...,
        min_length=1,
        description="Subscriber identifier"
    )
