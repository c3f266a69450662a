"""Fixtures for API route tests.

The app is built without running its lifespan; the components routes read
from ``app.state`` are wired from the shared unit-test doubles instead.
"""

import pytest
from fastapi.testclient import TestClient

from api.dependencies.rate_limits import get_limiter
from modules.delivery.metrics import PipelineMetrics
from server.server import create_app


@pytest.fixture(autouse=True)
def reset_rate_limits():
    get_limiter().reset()
    yield
    get_limiter().reset()


@pytest.fixture
def app(mock_broker, memory_store, breakers, tracker, publisher):
    application = create_app()
    application.state.broker = mock_broker
    application.state.store = memory_store
    application.state.breakers = breakers
    application.state.status_tracker = tracker
    application.state.publisher = publisher
    application.state.metrics = PipelineMetrics(mock_broker, breakers, memory_store)
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def bare_client():
    """Client for an app whose lifespan never ran."""
    return TestClient(create_app())
