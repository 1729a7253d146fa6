"""
Module: token.py
Description: Application token lifecycle.

TokenService keeps the shared CredentialStore usable: when the held
credential is absent, expired or unparsable it exchanges the
application key and secret for a new one. Tokens come back in the
Authorization response header, not in the body.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from flying_events.auth.credentials import Credential, CredentialStore
from flying_events.delivery.executor import RequestExecutor
from flying_events.exceptions import TokenExchangeError
from flying_events.models.outcome import Outcome
from flying_events.utils.logger import get_logger

logger = get_logger(__name__)

APPLICATION_TOKEN_PATH = "/api/application/request-token"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def read_authorization(outcome: Outcome, action: str) -> str:
    """
    Extract the token carried by a token-endpoint response.

    Args:
        outcome: Outcome of the token request
        action: Description used in error messages

    Returns:
        Value of the Authorization response header

    Raises:
        TokenExchangeError: If the request failed or the header is missing
    """
    if not outcome.is_success:
        error = outcome.to_error()
        raise TokenExchangeError(f"{action} failed: {error.message}", error.code, error.body)

    token = outcome.authorization
    if not token:
        raise TokenExchangeError(f"{action} returned no authorization header", body=outcome.body)
    return token


class TokenService:
    """
    Ensures the client holds a usable application credential.

    Failures are raised to the caller; retrying is the job of the
    delivery pipeline, one full attempt at a time.
    """

    def __init__(
        self,
        store: CredentialStore,
        executor: RequestExecutor,
        application_key: str,
        application_secret: str,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.store = store
        self.executor = executor
        self._application_key = application_key
        self._application_secret = application_secret
        self._clock = clock or _utcnow

    async def ensure_valid(self) -> Credential:
        """
        Return the held credential, refreshing it first when unusable.

        Issues no network call while the held credential is valid.

        Returns:
            A credential that was valid when checked

        Raises:
            TokenExchangeError: If the token exchange fails
        """
        credential = self.store.current
        if credential is not None and credential.is_valid(self._clock()):
            return credential

        if credential is None:
            reason = "missing"
        elif credential.expires_at is None:
            reason = "unparsable"
        else:
            reason = "expired"
        logger.info("Requesting application token", reason=reason)

        outcome = await self.executor.execute(
            "POST",
            APPLICATION_TOKEN_PATH,
            {
                "applicationKey": self._application_key,
                "applicationSecret": self._application_secret,
            },
            authenticated=False,
        )
        token = read_authorization(outcome, "Application token request")

        credential = self.store.set(token)
        logger.info("Application token refreshed", expires_at=str(credential.expires_at))
        return credential
