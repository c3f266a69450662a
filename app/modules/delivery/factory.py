"""Assembles delivery components from settings and shared infrastructure."""

from typing import Dict, List, Optional, TYPE_CHECKING

from infrastructure.logging import get_module_logger
from infrastructure.messaging import BrokerClient
from infrastructure.operations import OperationResult
from infrastructure.persistence import KeyValueStore
from infrastructure.resilience import CircuitBreakerRegistry, RetryConfig
from modules.delivery.collaborators import (
    DeliveryTransport,
    HttpPushTransport,
    HttpRecipientResolver,
    HttpTemplateRenderer,
    RecipientResolver,
    Renderer,
    SmtpEmailTransport,
)
from modules.delivery.consumer import WorkerPool
from modules.delivery.metrics import PipelineMetrics
from modules.delivery.models import Channel
from modules.delivery.processor import DeliveryProcessor
from modules.delivery.publisher import NotificationPublisher
from modules.delivery.retry import RetryScheduler
from modules.delivery.status import StatusTracker

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()


def build_status_tracker(settings: "Settings", store: KeyValueStore) -> StatusTracker:
    return StatusTracker(
        store,
        status_ttl_seconds=settings.store.status_ttl_seconds,
        idempotency_ttl_seconds=settings.store.idempotency_ttl_seconds,
    )


def build_recipient_resolver(settings: "Settings") -> RecipientResolver:
    return HttpRecipientResolver(
        settings.users.USER_SERVICE_URL,
        timeout=settings.users.USER_SERVICE_TIMEOUT_SECONDS,
    )


def build_renderer(settings: "Settings") -> Renderer:
    return HttpTemplateRenderer(
        settings.templates.TEMPLATE_SERVICE_URL,
        timeout=settings.templates.TEMPLATE_SERVICE_TIMEOUT_SECONDS,
    )


def build_transports(settings: "Settings") -> Dict[Channel, DeliveryTransport]:
    return {
        Channel.EMAIL: SmtpEmailTransport(settings.smtp),
        Channel.PUSH: HttpPushTransport(settings.push),
    }


def check_transports(
    transports: Dict[Channel, DeliveryTransport], channels: List[str]
) -> Dict[Channel, OperationResult]:
    """Run the configuration checks of the transports a worker will use.

    A misconfigured transport does not stop the worker; its deliveries fail
    and are retried.
    """
    results: Dict[Channel, OperationResult] = {}
    for name in channels:
        channel = Channel(name)
        transport = transports.get(channel)
        if transport is None:
            results[channel] = OperationResult.unavailable(
                f"No transport for channel {name}", error_code="NOT_CONFIGURED"
            )
        else:
            results[channel] = transport.health_check()
        if not results[channel].is_success:
            logger.warning(
                "transport_not_ready",
                channel=name,
                error=results[channel].message,
                error_code=results[channel].error_code,
            )
    return results


def build_publisher(
    settings: "Settings",
    broker: BrokerClient,
    store: KeyValueStore,
    breakers: CircuitBreakerRegistry,
    resolver: Optional[RecipientResolver] = None,
) -> NotificationPublisher:
    return NotificationPublisher(
        broker=broker,
        tracker=build_status_tracker(settings, store),
        resolver=resolver or build_recipient_resolver(settings),
        breakers=breakers,
    )


def build_worker_pool(
    settings: "Settings",
    broker: BrokerClient,
    store: KeyValueStore,
    breakers: CircuitBreakerRegistry,
    channels: Optional[list] = None,
    concurrency: Optional[int] = None,
    renderer: Optional[Renderer] = None,
    transports: Optional[Dict[Channel, DeliveryTransport]] = None,
) -> WorkerPool:
    """Build the retry scheduler, processor and worker pool for a worker process."""
    channels = channels or settings.worker.channels
    transports = transports or build_transports(settings)
    check_transports(transports, channels)

    tracker = build_status_tracker(settings, store)
    scheduler = RetryScheduler(
        broker=broker,
        tracker=tracker,
        breakers=breakers,
        config=RetryConfig.from_settings(settings.retry),
    )
    processor = DeliveryProcessor(
        tracker=tracker,
        renderer=renderer or build_renderer(settings),
        transports=transports,
        scheduler=scheduler,
        breakers=breakers,
    )
    return WorkerPool(
        broker=broker,
        processor=processor,
        scheduler=scheduler,
        channels=channels,
        concurrency=concurrency or settings.worker.CONCURRENCY,
        prefetch_count=settings.broker.prefetch_count,
        shutdown_timeout=settings.worker.SHUTDOWN_TIMEOUT_SECONDS,
    )


def build_metrics(
    broker: BrokerClient, breakers: CircuitBreakerRegistry, store: KeyValueStore
) -> PipelineMetrics:
    return PipelineMetrics(broker, breakers, store)
