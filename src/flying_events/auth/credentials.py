"""
Module: credentials.py
Description: Bearer credential state for the Flying Events client.

Holds the application's current bearer token and lazily decodes its
expiry from the JWT "exp" claim. The signature is never verified here;
the remote API does that. A token that cannot be decoded is treated
exactly like an expired one.

Key Components:
- decode_expiry(): Extract the expiry instant from a JWT
- Credential: Token plus its decoded expiry
- CredentialStore: Mutable holder shared by all calls of one client

Dependencies: PyJWT, datetime
Author: Flying Events Team
"""

from datetime import datetime, timezone
from typing import Callable, Optional

import jwt

ExpiryDecoder = Callable[[str], datetime]

_UNDECODED = object()


def decode_expiry(token: str) -> datetime:
    """
    Decode the expiry instant of a JWT without verifying its signature.

    Args:
        token: Encoded JWT

    Returns:
        Expiry as an aware UTC datetime

    Raises:
        jwt.InvalidTokenError: If the token is malformed or has no usable exp claim
    """
    claims = jwt.decode(token, options={"verify_signature": False})
    try:
        return datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
    except (KeyError, TypeError, ValueError, OverflowError, OSError) as e:
        raise jwt.InvalidTokenError("Token has no usable exp claim") from e


class Credential:
    """
    Opaque bearer token with a lazily decoded expiry.

    A credential is valid when its expiry decodes and lies in the
    future; otherwise it is expired or unparsable.
    """

    def __init__(self, token: str, decoder: ExpiryDecoder = decode_expiry):
        if not token or not isinstance(token, str):
            raise ValueError("token must be a non-empty string")

        self.token = token
        self._decoder = decoder
        self._expires_at = _UNDECODED

    @property
    def expires_at(self) -> Optional[datetime]:
        """Decoded expiry, or None when the token is unparsable."""
        if self._expires_at is _UNDECODED:
            try:
                self._expires_at = self._decoder(self.token)
            except jwt.InvalidTokenError:
                self._expires_at = None
        return self._expires_at

    def is_valid(self, now: datetime) -> bool:
        expires_at = self.expires_at
        return expires_at is not None and expires_at > now

    def __repr__(self) -> str:
        return f"Credential(expires_at={self.expires_at!r})"


class CredentialStore:
    """
    Holds the current credential of one client instance.

    Read by every request; written only on a successful token refresh.
    Concurrent refreshes are allowed, the last write wins.
    """

    def __init__(self, decoder: ExpiryDecoder = decode_expiry):
        self._decoder = decoder
        self._credential: Optional[Credential] = None

    @property
    def current(self) -> Optional[Credential]:
        return self._credential

    @property
    def token(self) -> Optional[str]:
        return self._credential.token if self._credential else None

    def set(self, token: str) -> Credential:
        credential = Credential(token, self._decoder)
        self._credential = credential
        return credential

    def clear(self) -> None:
        self._credential = None
