"""
Module: delivery/retry.py
Description: Retry logic for event dispatch.

Runs full delivery attempts one after another with exponential
backoff and optional jitter, driven by a RetryPolicy. The attempt
function decides nothing about retrying; the should_retry predicate
does, and a retryable token exchange failure counts as a failed attempt.
"""

import asyncio
from typing import Any, Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
    wait_random_exponential,
)

from flying_events.exceptions import TokenExchangeError
from flying_events.models.outcome import DeliveryAttempt
from flying_events.models.policy import RetryPolicy
from flying_events.utils.logger import get_logger

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def build_wait(policy: RetryPolicy):
    """
    Build the tenacity wait strategy for a policy.

    The delay after attempt n is min_delay * backoff_factor ** (n - 1),
    capped at max_delay. With jitter, it is drawn uniformly from
    [0, capped delay].
    """
    multiplier = policy.min_delay_ms / 1000
    maximum = policy.max_delay_ms / 1000

    if policy.jitter:
        return wait_random_exponential(multiplier=multiplier, exp_base=policy.backoff_factor, max=maximum)
    return wait_exponential(
        multiplier=multiplier,
        exp_base=policy.backoff_factor,
        min=multiplier,
        max=maximum
    )


def _is_retryable_token_failure(exc: BaseException) -> bool:
    return isinstance(exc, TokenExchangeError) and exc.retryable


def _last_result(retry_state: RetryCallState):
    # Exhausted: hand back the last outcome, or re-raise the last error
    return retry_state.outcome.result()


class RetryController:
    """
    Sequential retry loop over full delivery attempts.

    Attempt n + 1 starts only after attempt n has completed and its
    backoff delay has elapsed.
    """

    def __init__(self, policy: RetryPolicy, sleep: Sleep = asyncio.sleep):
        self.policy = policy
        self.sleep = sleep

    def _log_attempt(self, retry_state: RetryCallState) -> None:
        logger.info(
            "Starting delivery attempt",
            attempt=retry_state.attempt_number,
            max_attempts=self.policy.max_attempts
        )

    def _log_retry(self, retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        if outcome.failed:
            status_code = getattr(outcome.exception(), "code", None)
        else:
            status_code = outcome.result().outcome.status_code
        logger.warning(
            "Delivery attempt failed, retry scheduled",
            attempt=retry_state.attempt_number,
            status_code=status_code,
            delay_seconds=retry_state.next_action.sleep,
            max_delay_seconds=self.policy.base_delay_ms(retry_state.attempt_number) / 1000
        )

    async def run(
        self,
        attempt_fn: Callable[..., Awaitable[DeliveryAttempt]],
        should_retry: Callable[[DeliveryAttempt], bool],
        *args: Any
    ) -> DeliveryAttempt:
        """
        Run attempts until one is not retryable or the budget is spent.

        Args:
            attempt_fn: Coroutine function performing one full attempt
            should_retry: Decides whether a result warrants another attempt
            *args: Passed to attempt_fn on every attempt

        Returns:
            Result of the last attempt

        Raises:
            TokenExchangeError: If the last attempt failed to obtain a token
        """
        retrying = AsyncRetrying(
            sleep=self.sleep,
            stop=stop_after_attempt(self.policy.max_attempts),
            wait=build_wait(self.policy),
            retry=retry_if_result(should_retry) | retry_if_exception(_is_retryable_token_failure),
            before=self._log_attempt,
            before_sleep=self._log_retry,
            retry_error_callback=_last_result,
        )
        return await retrying(attempt_fn, *args)
