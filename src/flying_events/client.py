"""
Module: client.py
Description: Public entry point of the Flying Events client.

FlyingEventsClient validates caller input, then drives one dispatch
call through the delivery pipeline:

    token check -> worker endpoint -> (failsafe endpoint) -> backoff -> retry

Every call ends in exactly one result: the response body on success,
or a FlyingEventsError describing the last observed failure.

Key Components:
- FlyingEventsClient: send_event(), request_subscriber_token(),
  retry policy override, credential seeding
- from_settings(): Build a client from FLYING_EVENTS_* settings

Dependencies: pydantic, urllib, typing
Author: Flying Events Team
"""

from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Type, TypeVar, Union
from urllib.parse import quote

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from flying_events.auth.credentials import CredentialStore, ExpiryDecoder, decode_expiry
from flying_events.auth.tokens import TokenService, read_authorization
from flying_events.config.settings import ClientSettings
from flying_events.delivery.executor import API_BASE_URL, DEFAULT_TIMEOUT_SECONDS, RequestExecutor
from flying_events.delivery.failsafe import FailsafeDispatcher
from flying_events.delivery.retry import RetryController, Sleep
from flying_events.exceptions import FlyingEventsValidationError
from flying_events.models.event import Environment, EventRequest, SubscriberTokenRequest
from flying_events.models.outcome import DeliveryAttempt
from flying_events.models.policy import RetryPolicy
from flying_events.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)

WORKER_PATH = "/api/worker/send-event"
SUBSCRIBER_TOKEN_PATH = "/api/subscriber/{subscriber_id}/request-token"

WORKER_ENDPOINT = "worker"
FAILSAFE_ENDPOINT = "failsafe"

M = TypeVar("M", bound=BaseModel)


def _enforce(model: Type[M], params: Any) -> M:
    """
    Validate caller parameters into a model.

    Raises:
        FlyingEventsValidationError: If params are undefined or a
            required field is missing or empty
    """
    if params is None:
        raise FlyingEventsValidationError("Parameters for this call are undefined")
    if isinstance(params, model):
        return params

    try:
        return model.model_validate(params)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or model.__name__
        raise FlyingEventsValidationError(
            f'Missing or invalid required parameter "{field}": {error["msg"]}'
        ) from e


class FlyingEventsClient:
    """
    Client for the Flying Events distribution service.

    One instance holds one application credential, shared by all of its
    concurrent calls, and one retry policy, read at the start of each
    send_event() call.
    """

    def __init__(
        self,
        application_key: str,
        application_secret: str,
        environment: Union[Environment, str],
        *,
        retry_policy: Optional[RetryPolicy] = None,
        base_url: str = API_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        sleep: Optional[Sleep] = None,
        clock: Optional[Callable[[], datetime]] = None,
        decoder: ExpiryDecoder = decode_expiry
    ):
        """
        Initialize the client.

        Args:
            application_key: Application key issued by Flying Events
            application_secret: Application secret issued by Flying Events
            environment: LIVE or TEST
            retry_policy: Backoff policy for send_event (defaults to RetryPolicy())
            base_url: API base URL
            timeout_seconds: Per-request timeout in seconds
            sleep: Coroutine used to wait between attempts
            clock: Returns the current aware datetime, for expiry checks
            decoder: Extracts the expiry of a bearer token

        Raises:
            FlyingEventsValidationError: If a credential is missing or the
                environment is not LIVE or TEST
        """
        if not application_key:
            raise FlyingEventsValidationError('Missing required parameter "applicationKey"')
        if not application_secret:
            raise FlyingEventsValidationError('Missing required parameter "applicationSecret"')
        if not environment:
            raise FlyingEventsValidationError('Missing required parameter "environment"')
        try:
            self.environment = Environment(environment)
        except ValueError as e:
            raise FlyingEventsValidationError(
                "Error with environment - please use available environment types (LIVE, TEST)"
            ) from e

        self._retry_policy = retry_policy or RetryPolicy()
        self._retry_kwargs = {"sleep": sleep} if sleep else {}

        self.credentials = CredentialStore(decoder)
        self.executor = RequestExecutor(self.credentials, base_url, timeout_seconds)
        self.tokens = TokenService(
            self.credentials,
            self.executor,
            application_key,
            application_secret,
            clock=clock
        )
        self.failsafe = FailsafeDispatcher(self.executor)

        logger.info(
            "Flying Events client initialized",
            environment=self.environment.value,
            base_url=self.executor.base_url
        )

    @classmethod
    def from_settings(cls, settings: Optional[ClientSettings] = None, **kwargs) -> "FlyingEventsClient":
        """
        Build a client from FLYING_EVENTS_* settings.

        Also applies the configured log level.

        Raises:
            FlyingEventsValidationError: If the environment holds invalid settings
        """
        if settings is None:
            try:
                settings = ClientSettings()
            except PydanticValidationError as e:
                raise FlyingEventsValidationError(f"Invalid client settings: {e}") from e
        configure_logging(settings.log_level)
        return cls(
            settings.application_key,
            settings.application_secret,
            settings.environment,
            retry_policy=settings.retry_policy(),
            base_url=settings.api_base_url,
            timeout_seconds=settings.request_timeout,
            **kwargs
        )

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    def set_retry_policy(self, policy: Union[RetryPolicy, Mapping[str, Any]]) -> None:
        """
        Replace the retry policy used by later send_event() calls.

        Calls already in flight keep the policy they started with.

        Raises:
            FlyingEventsValidationError: If the policy is invalid
        """
        self._retry_policy = _enforce(RetryPolicy, policy)

    def set_access_token(self, token: str) -> None:
        """Seed the client with a bearer token obtained elsewhere."""
        self.credentials.set(token)

    async def send_event(self, request: Union[EventRequest, Mapping[str, Any]]) -> str:
        """
        Deliver an event to its subscribers.

        Args:
            request: EventRequest, or a mapping with eventName, payload
                and subscribersIds (snake_case keys also accepted)

        Returns:
            Response body of the endpoint that accepted the event

        Raises:
            FlyingEventsValidationError: Before any I/O, on missing fields
            ClientError: The worker or failsafe endpoint answered 4xx
            ServerError: Every attempt ended with a 5xx from the failsafe
            TransportError: Every attempt ended with a transport fault
            TokenExchangeError: No application token could be obtained
        """
        event = _enforce(EventRequest, request).with_environment(self.environment)
        controller = RetryController(self._retry_policy, **self._retry_kwargs)

        logger.info(
            "Sending event",
            event_name=event.event_name,
            subscribers=len(event.subscribers_ids)
        )

        attempt = await controller.run(self._attempt_delivery, self._should_retry, event)
        outcome = attempt.outcome

        if outcome.is_success:
            logger.info(
                "Event delivered",
                event_name=event.event_name,
                endpoint=attempt.endpoint,
                status_code=outcome.status_code
            )
            return outcome.body

        logger.error(
            "Event delivery failed",
            event_name=event.event_name,
            endpoint=attempt.endpoint,
            status_code=outcome.status_code
        )
        raise outcome.to_error()

    async def _attempt_delivery(self, event: EventRequest) -> DeliveryAttempt:
        await self.tokens.ensure_valid()

        outcome = await self.executor.execute("POST", WORKER_PATH, event.to_wire())
        if not outcome.is_server_side:
            return DeliveryAttempt(outcome, WORKER_ENDPOINT)

        logger.warning(
            "Worker endpoint failed, falling back to failsafe",
            event_name=event.event_name,
            status_code=outcome.status_code
        )
        outcome = await self.failsafe.send_to_failsafe(event)
        return DeliveryAttempt(outcome, FAILSAFE_ENDPOINT)

    @staticmethod
    def _should_retry(attempt: DeliveryAttempt) -> bool:
        return attempt.endpoint == FAILSAFE_ENDPOINT and FailsafeDispatcher.should_retry(attempt.outcome)

    async def request_subscriber_token(self, request: Union[SubscriberTokenRequest, Mapping[str, Any], str]) -> str:
        """
        Request a bearer token scoped to one subscriber.

        Performs a single request, without retries.

        Args:
            request: SubscriberTokenRequest, a mapping with subscriberId,
                or the subscriber id itself

        Returns:
            Subscriber token read from the Authorization response header

        Raises:
            FlyingEventsValidationError: Before any I/O, on a missing subscriberId
            TokenExchangeError: If either token request fails
        """
        if isinstance(request, str):
            request = {"subscriber_id": request}
        params = _enforce(SubscriberTokenRequest, request)

        await self.tokens.ensure_valid()

        path = SUBSCRIBER_TOKEN_PATH.format(subscriber_id=quote(params.subscriber_id, safe=""))
        outcome = await self.executor.execute("POST", path, {"environment": self.environment.value})

        token = read_authorization(outcome, "Subscriber token request")
        logger.info("Subscriber token issued", subscriber_id=params.subscriber_id)
        return token
