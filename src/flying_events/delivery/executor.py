"""
Module: executor.py
Description: Single HTTP calls against the Flying Events API.

Implements one request/response exchange with timeout handling and
classifies the result into an Outcome. HTTP failures are returned,
never raised, so callers can route them (failsafe, retry, terminal).
"""

import json
from typing import Any, Dict, Optional

import httpx

from flying_events.auth.credentials import CredentialStore
from flying_events.models.outcome import (
    ClientErrorOutcome,
    Outcome,
    ServerErrorOutcome,
    SuccessOutcome,
    TransportErrorOutcome,
)
from flying_events.utils.logger import get_logger

logger = get_logger(__name__)

API_BASE_URL = "https://app.flying.events"
DEFAULT_TIMEOUT_SECONDS = 30.0


def classify_response(response: httpx.Response) -> Outcome:
    """
    Classify a response by its status class.

    Args:
        response: Completed HTTP response

    Returns:
        SuccessOutcome for 2xx, ClientErrorOutcome for 4xx,
        ServerErrorOutcome for 5xx, TransportErrorOutcome otherwise
    """
    status_class = response.status_code // 100

    if status_class == 2:
        return SuccessOutcome(
            status_code=response.status_code,
            body=response.text,
            headers=dict(response.headers)
        )
    if status_class == 4:
        return ClientErrorOutcome(status_code=response.status_code, body=response.text)
    if status_class == 5:
        return ServerErrorOutcome(status_code=response.status_code, body=response.text)

    return TransportErrorOutcome(cause=f"Unexpected response (HTTP {response.status_code})")


class RequestExecutor:
    """
    HTTP client for the Flying Events API.

    Attaches JSON headers and, when a credential is held, the bearer
    token from the shared CredentialStore.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        base_url: str = API_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    ):
        """
        Initialize request executor.

        Args:
            credentials: Store holding the current bearer credential
            base_url: API base URL
            timeout_seconds: Per-request timeout in seconds

        Raises:
            ValueError: If base_url is invalid
        """
        if not base_url or not isinstance(base_url, str):
            raise ValueError("base_url must be a non-empty string")
        if not base_url.startswith(('http://', 'https://')):
            raise ValueError("base_url must be a valid HTTP/HTTPS URL")

        self.credentials = credentials
        self.base_url = base_url.rstrip('/')
        self.timeout = httpx.Timeout(timeout_seconds)

        logger.debug(
            "Request executor initialized",
            base_url=self.base_url,
            timeout_seconds=timeout_seconds
        )

    def _headers(self, authenticated: bool) -> Dict[str, str]:
        headers = {
            'Content-Type': 'application/json',
            'Accept': 'application/json',
            'Accept-Charset': 'utf-8',
        }
        token = self.credentials.token
        if authenticated and token:
            headers['Authorization'] = f'Bearer {token}'
        return headers

    async def execute(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        authenticated: bool = True
    ) -> Outcome:
        """
        Issue one request and classify its result.

        Args:
            method: HTTP method
            path: API path, starting with '/'
            body: JSON-serializable body, or a pre-encoded string
            authenticated: Attach the bearer credential when one is held

        Returns:
            Outcome of the call; transport faults become TransportErrorOutcome
        """
        content = None
        if body is not None:
            content = body if isinstance(body, str) else json.dumps(body)

        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout) as client:
            try:
                logger.debug("Sending API request", method=method, path=path)

                response = await client.request(
                    method,
                    path,
                    content=content,
                    headers=self._headers(authenticated)
                )

            except httpx.TimeoutException as e:
                logger.warning("API request timeout", method=method, path=path, error=str(e))
                return TransportErrorOutcome(cause=f"Request timed out: {e}")

            except httpx.RequestError as e:
                logger.warning(
                    "API request transport error",
                    method=method,
                    path=path,
                    error=str(e),
                    error_type=type(e).__name__
                )
                return TransportErrorOutcome(cause=str(e) or type(e).__name__)

        outcome = classify_response(response)
        log = logger.debug if outcome.is_success else logger.warning
        log(
            "API request completed",
            method=method,
            path=path,
            status_code=response.status_code,
            response=response.text[:500]
        )
        return outcome
