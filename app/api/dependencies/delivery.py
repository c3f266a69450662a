"""FastAPI dependencies for components built at startup.

The lifespan attaches the publisher, status tracker, metrics, broker client,
key-value store and breaker registry to ``app.state``; these providers read
them back per request so tests can swap them on the app.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from infrastructure.messaging import BrokerClient
from infrastructure.persistence import KeyValueStore
from infrastructure.resilience import CircuitBreakerRegistry
from modules.delivery.metrics import PipelineMetrics
from modules.delivery.publisher import NotificationPublisher
from modules.delivery.status import StatusTracker


def _from_state(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        raise HTTPException(status_code=503, detail=f"{name} not initialized")
    return component


def get_publisher(request: Request) -> NotificationPublisher:
    return _from_state(request, "publisher")


def get_status_tracker(request: Request) -> StatusTracker:
    return _from_state(request, "status_tracker")


def get_pipeline_metrics(request: Request) -> PipelineMetrics:
    return _from_state(request, "metrics")


def get_app_breakers(request: Request) -> CircuitBreakerRegistry:
    return _from_state(request, "breakers")


def get_app_broker(request: Request) -> BrokerClient:
    return _from_state(request, "broker")


def get_app_store(request: Request) -> KeyValueStore:
    return _from_state(request, "store")


PublisherDep = Annotated[NotificationPublisher, Depends(get_publisher)]
StatusTrackerDep = Annotated[StatusTracker, Depends(get_status_tracker)]
PipelineMetricsDep = Annotated[PipelineMetrics, Depends(get_pipeline_metrics)]
AppBreakersDep = Annotated[CircuitBreakerRegistry, Depends(get_app_breakers)]
