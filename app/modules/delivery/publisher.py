"""Publish path: validate, deduplicate, resolve, enqueue, record."""

import uuid
from typing import Any, Dict, List, Optional

from infrastructure.idempotency import IdempotencyKeyBuilder
from infrastructure.logging import get_module_logger
from infrastructure.messaging import BrokerClient
from infrastructure.operations import OperationResult
from infrastructure.persistence import StoreUnavailableError
from infrastructure.resilience import (
    CircuitBreakerOpenError,
    CircuitBreakerRegistry,
    guarded_result_call,
)
from modules.delivery.collaborators.base import RecipientResolver
from modules.delivery.models import (
    Channel,
    NotificationMessage,
    NotificationRequest,
    NotificationStatus,
)
from modules.delivery.status import StatusTracker

logger = get_module_logger()

BROKER_BREAKER = "broker"
RESOLVER_BREAKER = "user_service"


def _response(
    notification_id: str,
    request_id: str,
    status: NotificationStatus,
    duplicate: bool = False,
) -> Dict[str, Any]:
    return {
        "notification_id": notification_id,
        "request_id": request_id,
        "status": status.value,
        "duplicate": duplicate,
    }


class NotificationPublisher:
    """Accepts notification requests and enqueues them on the broker.

    At most one message is enqueued per idempotency key: the key is claimed
    with an atomic set-if-absent before publishing and released again when
    the publish fails, so a failed submission leaves nothing behind.

    Args:
        broker: Connected broker client
        tracker: Status tracker (also holds idempotency reservations)
        resolver: Recipient resolver
        breakers: Circuit breaker registry shared with the rest of the process
        key_builder: Idempotency key builder
    """

    def __init__(
        self,
        broker: BrokerClient,
        tracker: StatusTracker,
        resolver: RecipientResolver,
        breakers: CircuitBreakerRegistry,
        key_builder: Optional[IdempotencyKeyBuilder] = None,
    ):
        self._broker = broker
        self._tracker = tracker
        self._resolver = resolver
        self._breakers = breakers
        self._keys = key_builder or IdempotencyKeyBuilder(namespace="idempotency")

    def idempotency_key(self, request: NotificationRequest, request_id: str) -> str:
        return self._keys.build(
            "send",
            user_id=request.user_id,
            channel=request.channel,
            template_code=request.template_code,
            request_id=request_id,
        )

    def send(self, request: NotificationRequest) -> OperationResult:
        """Submit one notification.

        Returns:
            SUCCESS with ``{notification_id, request_id, status, duplicate}``;
            INVALID_ARGUMENT for an unsupported channel; NOT_FOUND when the
            recipient cannot be resolved; UNAVAILABLE when the broker, the
            store or the user service is down, or when a concurrent submission
            of the same idempotency key keeps the reservation.
        """
        try:
            channel = Channel(request.channel)
        except ValueError:
            return OperationResult.invalid_argument(
                f"Unsupported channel '{request.channel}'",
                error_code="INVALID_CHANNEL",
            )

        request_id = request.request_id or str(uuid.uuid4())
        key = self.idempotency_key(request, request_id)

        try:
            existing = self._existing(key, request_id)
            if existing is not None:
                logger.info(
                    "notification_duplicate",
                    request_id=request_id,
                    notification_id=existing["notification_id"],
                    status=existing["status"],
                )
                return OperationResult.success(data=existing, message="duplicate")

            resolved = guarded_result_call(
                self._breakers.get_or_create(RESOLVER_BREAKER),
                self._resolver.resolve,
                request.user_id,
                channel,
            )
            if not resolved.is_success:
                if resolved.is_retryable:
                    return OperationResult.unavailable(
                        f"Recipient lookup unavailable: {resolved.message}",
                        retry_after=resolved.retry_after,
                    )
                return resolved

            message = NotificationMessage(
                request_id=request_id,
                user_id=request.user_id,
                channel=channel,
                recipient=resolved.data["address"],
                template_code=request.template_code,
                variables=request.variables,
                priority=request.priority,
                metadata=request.metadata,
            )

            conflict = self._claim(key, message.notification_id, request_id)
            if conflict is not None:
                return conflict

            published = self._publish(message)
            if not published.is_success:
                self._tracker.release(key)
                return published
        except StoreUnavailableError as e:
            logger.error("status_store_unavailable", request_id=request_id, error=str(e))
            return OperationResult.unavailable(
                f"Status store unavailable: {e}", error_code="STORE_UNAVAILABLE"
            )

        try:
            self._tracker.record(message, NotificationStatus.QUEUED)
        except StoreUnavailableError as e:
            # Already enqueued; the consumer writes the next status
            logger.error(
                "initial_status_write_failed",
                notification_id=message.notification_id,
                error=str(e),
            )

        logger.info(
            "notification_queued",
            notification_id=message.notification_id,
            request_id=request_id,
            channel=channel.value,
        )
        return OperationResult.success(
            data=_response(message.notification_id, request_id, NotificationStatus.QUEUED),
            message="queued",
        )

    def send_bulk(self, requests: List[NotificationRequest]) -> List[OperationResult]:
        """Submit several notifications; each gets its own independent result."""
        return [self.send(request) for request in requests]

    def _claim(
        self, key: str, notification_id: str, request_id: str
    ) -> Optional[OperationResult]:
        """Reserve ``key`` for ``notification_id``.

        Returns None when this caller holds the reservation, otherwise the
        result to answer with. A reservation that vanished between a lost
        claim and the lookup (released after a failed publish, or expired)
        is claimed once more; nothing is published without holding it.
        """
        for _ in range(2):
            if self._tracker.reserve(key, notification_id):
                return None
            existing = self._existing(key, request_id)
            if existing is not None:
                return OperationResult.success(data=existing, message="duplicate")

        logger.warning("idempotency_conflict", request_id=request_id)
        return OperationResult.unavailable(
            "Concurrent submission with the same idempotency key",
            error_code="IDEMPOTENCY_CONFLICT",
        )

    def _existing(self, key: str, request_id: str) -> Optional[Dict[str, Any]]:
        notification_id = self._tracker.reservation(key)
        if notification_id is None:
            return None
        record = self._tracker.get_by_notification_id(notification_id)
        if record is None:
            # Reserved by a submission that is still publishing
            return _response(
                notification_id, request_id, NotificationStatus.QUEUED, duplicate=True
            )
        return _response(
            record.notification_id, record.request_id, record.status, duplicate=True
        )

    def _publish(self, message: NotificationMessage) -> OperationResult:
        breaker = self._breakers.get_or_create(BROKER_BREAKER)
        try:
            breaker.call(
                self._broker.publish,
                message.to_payload(),
                routing_key=message.channel.value,
                message_id=message.notification_id,
            )
        except CircuitBreakerOpenError as e:
            logger.warning(
                "publish_short_circuited",
                notification_id=message.notification_id,
                error=str(e),
            )
            retry_after = int(e.retry_after) if e.retry_after is not None else None
            return OperationResult.unavailable(
                "Message broker unavailable",
                error_code="CIRCUIT_OPEN",
                retry_after=retry_after,
            )
        except Exception as e:  # pylint: disable=broad-except
            logger.error(
                "publish_failed",
                notification_id=message.notification_id,
                error=str(e),
            )
            return OperationResult.unavailable(
                f"Message broker unavailable: {e}", error_code="BROKER_UNAVAILABLE"
            )
        return OperationResult.success()
