"""
Module: outcome.py
Description: Classified results of a single remote API call.

Every network call yields exactly one Outcome. HTTP-level failures
travel through the delivery pipeline as values and are only turned
into exceptions (to_error) at the public boundary.

Key Components:
- SuccessOutcome: 2xx response with body and headers
- ClientErrorOutcome: 4xx response
- ServerErrorOutcome: 5xx response
- TransportErrorOutcome: connection fault, timeout or unexpected status
- DeliveryAttempt: Outcome of one attempt and the endpoint that produced it

Dependencies: pydantic, typing
Author: Flying Events Team
"""

from typing import Dict, Literal, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from flying_events.exceptions import (
    DEFAULT_ERROR_CODE,
    ClientError,
    FlyingEventsError,
    ServerError,
    TransportError,
)


class _OutcomeBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_server_side(self) -> bool:
        """True for 5xx responses and transport faults."""
        return False


class SuccessOutcome(_OutcomeBase):
    """2xx response."""

    kind: Literal["success"] = "success"
    status_code: int
    body: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return True

    @property
    def authorization(self) -> Optional[str]:
        """Value of the Authorization response header, if any."""
        return self.headers.get("authorization")


class ClientErrorOutcome(_OutcomeBase):
    """4xx response. Terminal."""

    kind: Literal["client_error"] = "client_error"
    status_code: int
    body: str = ""

    def to_error(self) -> FlyingEventsError:
        return ClientError(self.body or f"HTTP {self.status_code}", self.status_code, self.body)


class ServerErrorOutcome(_OutcomeBase):
    """5xx response. Recoverable."""

    kind: Literal["server_error"] = "server_error"
    status_code: int
    body: str = ""

    @property
    def is_server_side(self) -> bool:
        return True

    def to_error(self) -> FlyingEventsError:
        return ServerError(self.body or f"HTTP {self.status_code}", self.status_code, self.body)


class TransportErrorOutcome(_OutcomeBase):
    """No usable HTTP response. Recoverable, like a 5xx."""

    kind: Literal["transport_error"] = "transport_error"
    cause: str
    status_code: int = DEFAULT_ERROR_CODE

    @property
    def is_server_side(self) -> bool:
        return True

    def to_error(self) -> FlyingEventsError:
        return TransportError(self.cause, self.status_code)


Outcome = Union[SuccessOutcome, ClientErrorOutcome, ServerErrorOutcome, TransportErrorOutcome]


class DeliveryAttempt(NamedTuple):
    """Final outcome of one delivery attempt and the endpoint that produced it."""

    outcome: Outcome
    endpoint: str
