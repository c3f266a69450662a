"""Fixtures for integration tests.

Broker tests run against kombu's in-process ``memory://`` transport. Its
state is shared by every connection in the process, so each test gets its
own exchange and queue names.
"""

import uuid

import pytest

from infrastructure.configuration.infrastructure.broker import BrokerSettings
from infrastructure.messaging import BrokerClient


@pytest.fixture
def broker_settings():
    suffix = uuid.uuid4().hex[:8]
    return BrokerSettings(
        BROKER_URL="memory://",
        BROKER_EXCHANGE=f"notifications.{suffix}",
        BROKER_EMAIL_QUEUE=f"email.{suffix}",
        BROKER_PUSH_QUEUE=f"push.{suffix}",
        BROKER_FAILED_QUEUE=f"failed.{suffix}",
        BROKER_CONNECT_MAX_RETRIES=1,
        BROKER_CONNECT_INTERVAL_START=0,
        BROKER_CONNECT_INTERVAL_STEP=0,
        BROKER_CONNECT_INTERVAL_MAX=0,
    )


@pytest.fixture
def memory_broker(broker_settings):
    """Connected broker client on the memory transport."""
    client = BrokerClient(broker_settings).connect()
    yield client
    client.close()
