"""Consume-side decision logic, independent of the broker.

For one delivered message body this decides the outcome (sent, duplicate,
retry scheduled, failed, malformed) and writes the matching status. The
consumer maps outcomes to ack/reject.
"""

import time
from enum import Enum
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from infrastructure.logging import bind_request_context, get_module_logger
from infrastructure.operations import OperationResult
from infrastructure.resilience import CircuitBreakerRegistry, guarded_result_call
from modules.delivery.collaborators.base import DeliveryTransport, Renderer
from modules.delivery.models import Channel, NotificationMessage, NotificationStatus
from modules.delivery.retry import RetryScheduler
from modules.delivery.status import StatusTracker

logger = get_module_logger()

RENDERER_BREAKER = "renderer"


class DeliveryOutcome(Enum):
    """Outcome of processing one broker message."""

    SENT = "sent"
    DUPLICATE = "duplicate"
    RETRY_SCHEDULED = "retry_scheduled"
    FAILED = "failed"
    MALFORMED = "malformed"

    @property
    def should_ack(self) -> bool:
        """Whether the broker message is acknowledged (vs. rejected)."""
        return self in (
            DeliveryOutcome.SENT,
            DeliveryOutcome.DUPLICATE,
            DeliveryOutcome.RETRY_SCHEDULED,
        )


class DeliveryProcessor:
    """Renders and delivers one message and records the result.

    Every rendering or delivery failure is retryable until the retry budget
    is spent; only a body that cannot be parsed is terminal immediately.

    Args:
        tracker: Status tracker
        renderer: Template renderer
        transports: Delivery transport per channel
        scheduler: Retry scheduler
        breakers: Circuit breaker registry (``renderer``, ``transport:<channel>``)
        clock: Monotonic clock used to measure processing time
    """

    def __init__(
        self,
        tracker: StatusTracker,
        renderer: Renderer,
        transports: Mapping[Channel, DeliveryTransport],
        scheduler: RetryScheduler,
        breakers: CircuitBreakerRegistry,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._tracker = tracker
        self._renderer = renderer
        self._transports = dict(transports)
        self._scheduler = scheduler
        self._breakers = breakers
        self._clock = clock

    def process(self, body: Any) -> DeliveryOutcome:
        """Process one message body (decoded JSON dict, or raw JSON text)."""
        try:
            message = NotificationMessage.from_payload(body)
        except (ValidationError, ValueError, TypeError) as e:
            logger.error("message_malformed", error=str(e))
            return DeliveryOutcome.MALFORMED

        with bind_request_context(
            correlation_id=message.request_id,
            notification_id=message.notification_id,
            channel=message.channel.value,
            retry_count=message.retry_count,
        ):
            return self._process(message)

    def _process(self, message: NotificationMessage) -> DeliveryOutcome:
        current = self._tracker.get_by_request_id(message.request_id)
        if current is not None and current.status == NotificationStatus.SENT:
            logger.info("message_duplicate_discarded", status=current.status.value)
            return DeliveryOutcome.DUPLICATE

        started = self._clock()
        result = self._deliver(message)
        elapsed_ms = int((self._clock() - started) * 1000)

        if result.is_success:
            self._tracker.record(
                message,
                NotificationStatus.SENT,
                delivery_id=(result.data or {}).get("delivery_id"),
                processing_time_ms=elapsed_ms,
            )
            logger.info("notification_sent", processing_time_ms=elapsed_ms)
            return DeliveryOutcome.SENT

        return self._handle_failure(message, result)

    def _deliver(self, message: NotificationMessage) -> OperationResult:
        transport = self._transports.get(message.channel)
        if transport is None:
            return OperationResult.transient_error(
                f"No transport configured for channel {message.channel.value}",
                error_code="TRANSPORT_NOT_CONFIGURED",
            )

        rendered = guarded_result_call(
            self._breakers.get_or_create(RENDERER_BREAKER),
            self._renderer.render,
            message.template_code,
            message.variables,
        )
        if not rendered.is_success:
            return rendered

        return guarded_result_call(
            self._breakers.get_or_create(f"transport:{message.channel.value}"),
            transport.deliver,
            message.recipient,
            rendered.data,
        )

    def _handle_failure(
        self, message: NotificationMessage, result: OperationResult
    ) -> DeliveryOutcome:
        if self._scheduler.should_retry(message):
            retry = self._scheduler.schedule_retry(
                message,
                before_start=lambda next_message: self._tracker.record(
                    next_message, NotificationStatus.RETRYING, error=result.message
                ),
            )
            logger.warning(
                "delivery_failed_retrying",
                error=result.message,
                error_code=result.error_code,
                next_retry_count=retry.retry_count,
            )
            return DeliveryOutcome.RETRY_SCHEDULED

        self._tracker.record(message, NotificationStatus.FAILED, error=result.message)
        logger.error(
            "delivery_failed_permanently",
            error=result.message,
            error_code=result.error_code,
            retry_count=message.retry_count,
        )
        return DeliveryOutcome.FAILED
