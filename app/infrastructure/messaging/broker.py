"""Broker client: process-wide connection, publishing and introspection."""

import threading
from typing import Any, Dict, Optional, TYPE_CHECKING

from kombu import Connection, Producer
from kombu.exceptions import KombuError, OperationalError

from infrastructure.logging import get_module_logger
from infrastructure.messaging.topology import BrokerTopology

if TYPE_CHECKING:
    from infrastructure.configuration.infrastructure.broker import BrokerSettings

logger = get_module_logger()

PERSISTENT_DELIVERY_MODE = 2

PUBLISH_RETRY_POLICY = {
    "max_retries": 3,
    "interval_start": 0,
    "interval_step": 1,
    "interval_max": 5,
}


class BrokerConnectionError(Exception):
    """Raised when the broker cannot be reached within the startup budget."""


class BrokerClient:
    """Owns the shared broker connection and a single serialized producer.

    Kombu channels are not thread safe; publishes from the API, worker
    threads and retry timers are serialized on one lock.

    Args:
        settings: Broker settings (URL, topology names, reconnect budget)
        topology: Topology to declare; built from settings when omitted
    """

    def __init__(
        self,
        settings: "BrokerSettings",
        topology: Optional[BrokerTopology] = None,
    ):
        self._settings = settings
        self.topology = topology or BrokerTopology.from_settings(settings)
        self._connection: Optional[Connection] = None
        self._producer: Optional[Producer] = None
        self._lock = threading.RLock()

    @property
    def connection(self) -> Connection:
        if self._connection is None:
            raise BrokerConnectionError("Broker client is not connected")
        return self._connection

    def connect(self) -> "BrokerClient":
        """Connect with bounded retries and declare the topology.

        Raises:
            BrokerConnectionError: If the broker stays unreachable after
                ``BROKER_CONNECT_MAX_RETRIES`` attempts.
        """
        with self._lock:
            if self._connection is not None:
                return self

            connection = Connection(self._settings.url)
            try:
                connection.ensure_connection(
                    errback=self._on_connection_error,
                    max_retries=self._settings.connect_max_retries,
                    interval_start=self._settings.connect_interval_start,
                    interval_step=self._settings.connect_interval_step,
                    interval_max=self._settings.connect_interval_max,
                )
                self.topology.declare(connection)
            except (OperationalError, KombuError, OSError) as e:
                connection.release()
                logger.error(
                    "broker_connect_failed",
                    attempts=self._settings.connect_max_retries,
                    error=str(e),
                )
                raise BrokerConnectionError(
                    f"Could not connect to broker: {e}"
                ) from e

            self._connection = connection
            self._producer = Producer(connection, exchange=self.topology.exchange)
            logger.info("broker_connected", transport=connection.transport_cls)
            return self

    def _on_connection_error(self, exc: Exception, interval: float) -> None:
        logger.warning("broker_connection_retry", error=str(exc), retry_in=interval)

    def publish(
        self,
        payload: Dict[str, Any],
        routing_key: str,
        message_id: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Publish a persistent JSON message to the exchange.

        Transient connection loss is retried with kombu's reconnect policy. A
        client that is not connected yet (the broker was down at startup, or
        the client was closed) connects first, so the next call admitted by
        the broker circuit re-establishes the connection.

        Raises:
            BrokerConnectionError: If connecting fails within the reconnect budget.
            kombu.exceptions.OperationalError: If the broker stays unreachable.
        """
        with self._lock:
            if self._producer is None:
                self.connect()
            self._producer.publish(
                payload,
                exchange=self.topology.exchange,
                routing_key=routing_key,
                serializer="json",
                delivery_mode=PERSISTENT_DELIVERY_MODE,
                message_id=message_id,
                headers=headers or {},
                retry=True,
                retry_policy=PUBLISH_RETRY_POLICY,
            )
        logger.debug("message_published", routing_key=routing_key, message_id=message_id)

    def queue_depths(self) -> Dict[str, int]:
        """Ready message counts per channel queue and the failure queue."""
        depths: Dict[str, int] = {}
        with self._lock:
            channel = self.connection.channel()
            try:
                for name, queue in self.topology.all_queues().items():
                    declared = queue(channel).queue_declare(passive=True)
                    depths[name] = declared.message_count
            finally:
                channel.close()
        return depths

    def clone_connection(self) -> Connection:
        """New connection with the same parameters, for a consumer thread."""
        return self.connection.clone()

    def is_connected(self) -> bool:
        with self._lock:
            return self._connection is not None and self._connection.connected

    def close(self) -> None:
        with self._lock:
            if self._connection is not None:
                self._connection.release()
                logger.info("broker_connection_closed")
            self._connection = None
            self._producer = None
