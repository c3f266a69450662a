"""Retry scheduling with exponential backoff.

A retry is a new broker message published after an in-process timer
fires; the failed delivery itself is acknowledged by the consumer. Timers
live only in this process: if it stops while retries are pending, those
retries are lost (``shutdown`` logs how many). Their status records stay
at ``retrying`` until they expire.
"""

import threading
from datetime import timedelta
from typing import Callable, Dict, Optional

from infrastructure.logging import get_module_logger
from infrastructure.messaging import BrokerClient
from infrastructure.persistence import StoreUnavailableError
from infrastructure.resilience import CircuitBreakerRegistry, RetryConfig
from modules.delivery.models import NotificationMessage, NotificationStatus, utc_now
from modules.delivery.status import StatusTracker

logger = get_module_logger()

BROKER_BREAKER = "broker"

TimerFactory = Callable[[float, Callable[[], None]], threading.Timer]


class RetryScheduler:
    """Decides on and schedules retries of failed deliveries.

    Args:
        broker: Broker client used to re-publish
        tracker: Status tracker, written when a re-publish fails
        breakers: Circuit breaker registry (re-publishes use the broker breaker)
        config: Retry budget and backoff
        timer_factory: ``threading.Timer``-compatible factory, injectable for tests
        clock: Wall clock used for ``scheduled_for``
    """

    def __init__(
        self,
        broker: BrokerClient,
        tracker: StatusTracker,
        breakers: CircuitBreakerRegistry,
        config: Optional[RetryConfig] = None,
        timer_factory: TimerFactory = threading.Timer,
        clock=utc_now,
    ):
        self._broker = broker
        self._tracker = tracker
        self._breakers = breakers
        self.config = config or RetryConfig()
        self._timer_factory = timer_factory
        self._clock = clock
        self._pending: Dict[str, threading.Timer] = {}
        self._lock = threading.Lock()
        self._closed = False

    def should_retry(self, message: NotificationMessage) -> bool:
        """True iff the message has retries left."""
        return self.config.should_retry(message.retry_count)

    def schedule_retry(
        self,
        message: NotificationMessage,
        before_start: Optional[Callable[[NotificationMessage], None]] = None,
    ) -> NotificationMessage:
        """Schedule the next attempt of a failed message.

        Args:
            message: The message whose delivery failed
            before_start: Called with the retry message before its timer
                starts, so a status written there cannot overtake the retry

        Returns:
            The message as it will be re-published (retry_count incremented,
            scheduled_for set).

        Raises:
            ValueError: If the message has no retries left.
            RuntimeError: If the scheduler was shut down.
        """
        if not self.should_retry(message):
            raise ValueError(
                f"Retry budget exhausted for {message.notification_id} "
                f"({message.retry_count}/{self.config.max_retries})"
            )

        with self._lock:
            if self._closed:
                raise RuntimeError("Retry scheduler is shut down")

        delay_ms = self.config.calculate_delay_ms(message.retry_count + 1)
        retry = message.with_retry(self._clock() + timedelta(milliseconds=delay_ms))
        if before_start is not None:
            before_start(retry)

        with self._lock:
            if self._closed:
                raise RuntimeError("Retry scheduler is shut down")
            timer = self._timer_factory(delay_ms / 1000.0, lambda: self._fire(retry))
            timer.daemon = True
            self._pending[retry.notification_id] = timer
            timer.start()

        logger.info(
            "retry_scheduled",
            notification_id=retry.notification_id,
            request_id=retry.request_id,
            retry_count=retry.retry_count,
            delay_ms=delay_ms,
        )
        return retry

    def _fire(self, message: NotificationMessage) -> None:
        with self._lock:
            self._pending.pop(message.notification_id, None)
            if self._closed:
                return

        try:
            self._breakers.get_or_create(BROKER_BREAKER).call(
                self._broker.publish,
                message.to_payload(),
                routing_key=message.channel.value,
                message_id=message.notification_id,
            )
        except Exception as e:  # pylint: disable=broad-except
            logger.error(
                "retry_republish_failed",
                notification_id=message.notification_id,
                retry_count=message.retry_count,
                error=str(e),
            )
            try:
                self._tracker.record(
                    message,
                    NotificationStatus.FAILED,
                    error=f"Retry could not be re-published: {e}",
                )
            except StoreUnavailableError as store_error:
                logger.error(
                    "status_store_unavailable",
                    notification_id=message.notification_id,
                    error=str(store_error),
                )
            return

        logger.info(
            "retry_republished",
            notification_id=message.notification_id,
            retry_count=message.retry_count,
        )

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def shutdown(self) -> int:
        """Cancel pending timers.

        Returns:
            Number of retries that were pending and are now lost.
        """
        with self._lock:
            self._closed = True
            pending, self._pending = self._pending, {}

        for timer in pending.values():
            timer.cancel()

        if pending:
            logger.warning(
                "pending_retries_lost",
                count=len(pending),
                notification_ids=list(pending.keys()),
            )
        return len(pending)
