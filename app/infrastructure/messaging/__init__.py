"""Message broker infrastructure (kombu).

Usage:
    from infrastructure.messaging import BrokerClient

    client = BrokerClient(settings.broker).connect()
    client.publish({"notification_id": "..."}, routing_key="email")
"""

from infrastructure.messaging.broker import BrokerClient, BrokerConnectionError
from infrastructure.messaging.topology import BrokerTopology

__all__ = ["BrokerClient", "BrokerConnectionError", "BrokerTopology"]
