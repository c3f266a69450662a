"""Pipeline introspection: queue depths, store and circuit breaker states."""

from typing import Any, Dict

from infrastructure.logging import get_module_logger
from infrastructure.messaging import BrokerClient
from infrastructure.persistence import KeyValueStore, StoreUnavailableError
from infrastructure.resilience import CircuitBreakerRegistry

logger = get_module_logger()


class PipelineMetrics:
    """Snapshot of queue depths (per channel and failure queue), the status
    store and the circuit breakers."""

    def __init__(
        self,
        broker: BrokerClient,
        breakers: CircuitBreakerRegistry,
        store: KeyValueStore,
    ):
        self._broker = broker
        self._breakers = breakers
        self._store = store

    def queue_depths(self) -> Dict[str, Any]:
        try:
            return {"available": True, "depths": self._broker.queue_depths()}
        except Exception as e:  # pylint: disable=broad-except
            logger.warning("queue_depths_unavailable", error=str(e))
            return {"available": False, "depths": {}, "error": str(e)}

    def store_stats(self) -> Dict[str, Any]:
        try:
            return {"available": True, **self._store.get_stats()}
        except StoreUnavailableError as e:
            logger.warning("store_stats_unavailable", error=str(e))
            return {"available": False, "error": str(e)}

    def snapshot(self) -> Dict[str, Any]:
        return {
            "queues": self.queue_depths(),
            "store": self.store_stats(),
            "circuit_breakers": self._breakers.get_all_stats(),
            "open_circuit_breakers": self._breakers.get_open(),
        }
