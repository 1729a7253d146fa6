"""
Module: exceptions.py
Description: Error hierarchy for the Flying Events client.

Every failure surfaced to callers is a FlyingEventsError carrying a
numeric code: the HTTP status returned by the remote API, or
DEFAULT_ERROR_CODE when no real HTTP status exists (validation
failures, connection errors, timeouts, unexpected responses).

Key Components:
- FlyingEventsError: Base error with message, code and response body
- FlyingEventsValidationError: Bad input, raised before any network I/O
- ClientError / ServerError / TransportError: Remote call failures
- TokenExchangeError: Application or subscriber token request failed

Dependencies: typing
Author: Flying Events Team
"""

from typing import Optional

# Sentinel code for failures that carry no real HTTP status
DEFAULT_ERROR_CODE = -1


class FlyingEventsError(Exception):
    """
    Base error raised by the Flying Events client.

    Attributes:
        message: Human readable description
        code: HTTP status code, or DEFAULT_ERROR_CODE
        body: Raw response body when the remote API answered
    """

    def __init__(
        self,
        message: str,
        code: int = DEFAULT_ERROR_CODE,
        body: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.body = body

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, code={self.code})"


class FlyingEventsValidationError(FlyingEventsError, ValueError):
    """Missing or invalid parameter. Never reaches the network."""


class ClientError(FlyingEventsError):
    """Remote API answered with a 4xx status."""


class ServerError(FlyingEventsError):
    """Remote API answered with a 5xx status."""


class TransportError(FlyingEventsError):
    """Connection failure, timeout or unexpected response."""


class TokenExchangeError(FlyingEventsError):
    """A token request failed or returned no authorization header."""

    @property
    def retryable(self) -> bool:
        """True when the failure came from the server side or the transport."""
        return self.code == DEFAULT_ERROR_CODE or self.code // 100 == 5
