"""Status tracking over the key-value store.

Records are stored twice, under the request id and under the notification
id, so a status query works with either. Every write refreshes the TTL;
after expiry a query returns nothing even if the notification was
delivered, so status is telemetry rather than an audit log.
"""

from typing import Optional

from pydantic import ValidationError

from infrastructure.logging import get_module_logger
from infrastructure.persistence import KeyValueStore
from modules.delivery.models import (
    NotificationMessage,
    NotificationStatus,
    StatusRecord,
    utc_now,
)

logger = get_module_logger()

REQUEST_PREFIX = "status:request:"
NOTIFICATION_PREFIX = "status:notification:"


class StatusTracker:
    """Reads and writes StatusRecords and idempotency reservations.

    Args:
        store: Backing key-value store
        status_ttl_seconds: Retention of status records
        idempotency_ttl_seconds: Retention of idempotency reservations
    """

    def __init__(
        self,
        store: KeyValueStore,
        status_ttl_seconds: int = 86400,
        idempotency_ttl_seconds: int = 86400,
    ):
        self._store = store
        self.status_ttl_seconds = status_ttl_seconds
        self.idempotency_ttl_seconds = idempotency_ttl_seconds

    def get(self, key: str) -> Optional[StatusRecord]:
        """Get the record stored under a raw key, if any."""
        raw = self._store.get(key)
        if raw is None:
            return None
        try:
            return StatusRecord.model_validate_json(raw)
        except ValidationError:
            logger.warning("status_record_corrupt", key=key)
            return None

    def set(self, key: str, record: StatusRecord, ttl_seconds: Optional[int] = None) -> None:
        """Store a record under a raw key."""
        self._store.set(
            key,
            record.model_dump_json(),
            ttl_seconds if ttl_seconds is not None else self.status_ttl_seconds,
        )

    def get_by_request_id(self, request_id: str) -> Optional[StatusRecord]:
        return self.get(REQUEST_PREFIX + request_id)

    def get_by_notification_id(self, notification_id: str) -> Optional[StatusRecord]:
        return self.get(NOTIFICATION_PREFIX + notification_id)

    def save(self, record: StatusRecord) -> StatusRecord:
        """Store a record under both its request id and notification id."""
        self.set(REQUEST_PREFIX + record.request_id, record)
        self.set(NOTIFICATION_PREFIX + record.notification_id, record)
        return record

    def record(
        self,
        message: NotificationMessage,
        status: NotificationStatus,
        error: Optional[str] = None,
        delivery_id: Optional[str] = None,
        processing_time_ms: Optional[int] = None,
    ) -> StatusRecord:
        """Write the current status of a message under both of its keys."""
        record = StatusRecord(
            notification_id=message.notification_id,
            request_id=message.request_id,
            channel=message.channel,
            status=status,
            updated_at=utc_now(),
            error=error,
            retry_count=message.retry_count,
            delivery_id=delivery_id,
            processing_time_ms=processing_time_ms,
        )
        self.save(record)
        logger.info(
            "status_recorded",
            notification_id=message.notification_id,
            request_id=message.request_id,
            status=status.value,
            retry_count=message.retry_count,
        )
        return record

    def reserve(self, idempotency_key: str, notification_id: str) -> bool:
        """Atomically claim an idempotency key.

        Returns:
            True if this caller owns the key, False if it was already claimed.
        """
        return self._store.set_if_absent(
            idempotency_key, notification_id, self.idempotency_ttl_seconds
        )

    def reservation(self, idempotency_key: str) -> Optional[str]:
        """Notification id holding an idempotency key, if any."""
        return self._store.get(idempotency_key)

    def release(self, idempotency_key: str) -> None:
        """Drop a reservation whose publish failed."""
        self._store.delete(idempotency_key)
