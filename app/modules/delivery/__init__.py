"""Notification delivery pipeline.

Publish path:
    NotificationPublisher.send() validates the channel, deduplicates on an
    idempotency key, resolves the recipient and publishes through the
    ``broker`` circuit breaker, then records ``queued``.

Consume path:
    DeliveryWorker (one or more per channel queue) hands each message to
    DeliveryProcessor, which renders and delivers it, records ``sent``,
    ``retrying`` or ``failed``, and asks RetryScheduler for a delayed
    re-publish while retries remain.
"""

from modules.delivery.models import (
    Channel,
    NotificationMessage,
    NotificationRequest,
    NotificationStatus,
    StatusRecord,
)
from modules.delivery.processor import DeliveryOutcome, DeliveryProcessor
from modules.delivery.publisher import NotificationPublisher
from modules.delivery.retry import RetryScheduler
from modules.delivery.status import StatusTracker

__all__ = [
    "Channel",
    "NotificationMessage",
    "NotificationRequest",
    "NotificationStatus",
    "StatusRecord",
    "DeliveryOutcome",
    "DeliveryProcessor",
    "NotificationPublisher",
    "RetryScheduler",
    "StatusTracker",
]
