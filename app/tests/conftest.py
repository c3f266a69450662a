"""Root-level fixtures shared by unit, API and integration tests.

Time-sensitive components (circuit breakers, the in-memory store, the retry
scheduler) take injectable clocks and timer factories; the fixtures here
provide deterministic doubles so no test sleeps on the critical path.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, List
from unittest.mock import MagicMock

import pytest

from infrastructure.messaging import BrokerClient, BrokerTopology
from infrastructure.persistence import InMemoryKeyValueStore
from infrastructure.resilience import CircuitBreakerRegistry, RetryConfig
from modules.delivery.collaborators import (
    DeliveryTransport,
    RecipientResolver,
    Renderer,
)
from modules.delivery.models import Channel
from modules.delivery.processor import DeliveryProcessor
from modules.delivery.publisher import NotificationPublisher
from modules.delivery.retry import RetryScheduler
from modules.delivery.status import StatusTracker
from infrastructure.operations import OperationResult
from tests.factories.delivery import make_rendered_message


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeWallClock:
    """Wall clock returning a fixed, advanceable UTC datetime."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeTimer:
    """threading.Timer stand-in that fires only when the test says so."""

    def __init__(self, interval: float, function: Callable[[], None]):
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.cancelled:
            self.function()


class FakeTimerFactory:
    """Records every timer created by a RetryScheduler."""

    def __init__(self):
        self.timers: List[FakeTimer] = []

    def __call__(self, interval: float, function: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_wall_clock():
    return FakeWallClock()


@pytest.fixture
def fake_timers():
    return FakeTimerFactory()


@pytest.fixture
def memory_store(fake_clock):
    """In-memory key-value store driven by the fake clock."""
    return InMemoryKeyValueStore(clock=fake_clock)


@pytest.fixture
def breakers(fake_clock):
    """Breaker registry with small thresholds and no call timeout thread."""
    registry = CircuitBreakerRegistry(
        failure_threshold=3,
        success_threshold=1,
        reset_timeout=30.0,
        call_timeout=None,
        half_open_max_calls=1,
        clock=fake_clock,
    )
    yield registry
    registry.shutdown()


@pytest.fixture
def tracker(memory_store):
    return StatusTracker(memory_store, status_ttl_seconds=3600, idempotency_ttl_seconds=3600)


@pytest.fixture
def mock_broker():
    """Broker client double; ``publish`` succeeds unless configured otherwise."""
    broker = MagicMock(spec=BrokerClient)
    broker.topology = BrokerTopology()
    broker.is_connected.return_value = True
    broker.queue_depths.return_value = {"email": 0, "push": 0, "failed": 0}
    return broker


@pytest.fixture
def mock_resolver():
    resolver = MagicMock(spec=RecipientResolver)
    resolver.resolve.return_value = OperationResult.success(
        data={"address": "ada@example.com"}
    )
    return resolver


@pytest.fixture
def mock_renderer():
    renderer = MagicMock(spec=Renderer)
    renderer.render.return_value = OperationResult.success(data=make_rendered_message())
    return renderer


def _mock_transport(channel: Channel, delivery_id: str) -> MagicMock:
    transport = MagicMock(spec=DeliveryTransport)
    transport.channel = channel
    transport.deliver.return_value = OperationResult.success(
        data={"delivery_id": delivery_id}
    )
    return transport


@pytest.fixture
def mock_transports():
    return {
        Channel.EMAIL: _mock_transport(Channel.EMAIL, "smtp-1"),
        Channel.PUSH: _mock_transport(Channel.PUSH, "push-1"),
    }


@pytest.fixture
def retry_config():
    return RetryConfig(max_retries=3, base_delay_ms=1000)


@pytest.fixture
def scheduler(mock_broker, tracker, breakers, retry_config, fake_timers, fake_wall_clock):
    sched = RetryScheduler(
        broker=mock_broker,
        tracker=tracker,
        breakers=breakers,
        config=retry_config,
        timer_factory=fake_timers,
        clock=fake_wall_clock,
    )
    yield sched
    sched.shutdown()


@pytest.fixture
def processor(tracker, mock_renderer, mock_transports, scheduler, breakers, fake_clock):
    return DeliveryProcessor(
        tracker=tracker,
        renderer=mock_renderer,
        transports=mock_transports,
        scheduler=scheduler,
        breakers=breakers,
        clock=fake_clock,
    )


@pytest.fixture
def publisher(mock_broker, tracker, mock_resolver, breakers):
    return NotificationPublisher(
        broker=mock_broker,
        tracker=tracker,
        resolver=mock_resolver,
        breakers=breakers,
    )
