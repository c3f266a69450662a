"""Broker topology: exchange, per-channel queues and the failure queue.

All entities are durable. Each channel queue is bound to the exchange with
a routing key equal to the channel name and dead-letters rejected messages
to the failure queue through the same exchange.
"""

from dataclasses import dataclass, field
from typing import Dict, List, TYPE_CHECKING

from kombu import Connection, Exchange, Queue

from infrastructure.logging import get_module_logger

if TYPE_CHECKING:
    from infrastructure.configuration.infrastructure.broker import BrokerSettings

logger = get_module_logger()


@dataclass(frozen=True)
class BrokerTopology:
    """Declarative description of the pipeline's broker entities.

    Attributes:
        exchange_name: Durable direct exchange name
        channel_queues: Mapping of channel name (routing key) to queue name
        failed_queue: Name of the failure queue
        failed_routing_key: Routing key the failure queue is bound to
    """

    exchange_name: str = "notifications.direct"
    channel_queues: Dict[str, str] = field(
        default_factory=lambda: {"email": "email.queue", "push": "push.queue"}
    )
    failed_queue: str = "failed.queue"
    failed_routing_key: str = "failed"

    @classmethod
    def from_settings(cls, settings: "BrokerSettings") -> "BrokerTopology":
        return cls(
            exchange_name=settings.exchange,
            channel_queues={
                "email": settings.email_queue,
                "push": settings.push_queue,
            },
            failed_queue=settings.failed_queue,
            failed_routing_key=settings.failed_routing_key,
        )

    @property
    def exchange(self) -> Exchange:
        return Exchange(self.exchange_name, type="direct", durable=True)

    @property
    def channels(self) -> List[str]:
        return list(self.channel_queues.keys())

    def queue_for(self, channel: str) -> Queue:
        """Durable work queue for a channel.

        Raises:
            KeyError: If the channel has no queue.
        """
        return Queue(
            self.channel_queues[channel],
            exchange=self.exchange,
            routing_key=channel,
            durable=True,
            queue_arguments={
                "x-dead-letter-exchange": self.exchange_name,
                "x-dead-letter-routing-key": self.failed_routing_key,
            },
        )

    @property
    def failure_queue(self) -> Queue:
        return Queue(
            self.failed_queue,
            exchange=self.exchange,
            routing_key=self.failed_routing_key,
            durable=True,
        )

    def all_queues(self) -> Dict[str, Queue]:
        """Queues keyed by the name reported in metrics (channel or 'failed')."""
        queues = {channel: self.queue_for(channel) for channel in self.channels}
        queues["failed"] = self.failure_queue
        return queues

    def declare(self, connection: Connection) -> None:
        """Declare exchange, queues and bindings. Safe to call repeatedly."""
        channel = connection.default_channel
        self.exchange(channel).declare()
        for name, queue in self.all_queues().items():
            queue(channel).declare()
            logger.debug("queue_declared", queue=queue.name, key=name)
        logger.info(
            "broker_topology_declared",
            exchange=self.exchange_name,
            queues=[q.name for q in self.all_queues().values()],
        )
