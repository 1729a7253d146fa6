"""
Module: failsafe.py
Description: Secondary delivery endpoint.

Used only after the worker endpoint reports a server-side failure.
The event is re-sent unchanged, with whatever credential is current.
"""

from flying_events.delivery.executor import RequestExecutor
from flying_events.models.event import EventRequest
from flying_events.models.outcome import Outcome
from flying_events.utils.logger import get_logger

logger = get_logger(__name__)

FAILSAFE_PATH = "/api/failsafe/send-event"
REQUEST_TIMEOUT_STATUS = 408


class FailsafeDispatcher:
    """Sends events to the failsafe endpoint."""

    def __init__(self, executor: RequestExecutor):
        self.executor = executor

    async def send_to_failsafe(self, request: EventRequest) -> Outcome:
        """
        Post the event, environment included, to the failsafe endpoint.

        Args:
            request: Event exactly as it was sent to the worker endpoint

        Returns:
            Outcome of the failsafe call
        """
        logger.info(
            "Sending event to failsafe",
            event_name=request.event_name,
            subscribers=len(request.subscribers_ids)
        )
        return await self.executor.execute("POST", FAILSAFE_PATH, request.to_wire())

    @staticmethod
    def should_retry(outcome: Outcome) -> bool:
        """True when a failsafe outcome warrants another full attempt."""
        return outcome.is_server_side or outcome.status_code == REQUEST_TIMEOUT_STATUS
