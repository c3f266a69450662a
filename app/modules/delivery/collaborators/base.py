"""Contracts for the collaborators the pipeline calls out to.

Implementations return OperationResult instead of raising: the pipeline
only needs to know whether a failure is retryable, not which library
produced it.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from infrastructure.operations import OperationResult
from modules.delivery.models import Channel, RenderedMessage


class RecipientResolver(ABC):
    """Resolves the delivery address of a user for a channel."""

    @abstractmethod
    def resolve(self, user_id: str, channel: Channel) -> OperationResult:
        """Resolve an address.

        Returns:
            SUCCESS with ``data={"address": str}``, NOT_FOUND when the user
            or the channel address does not exist, or a transient error.
        """


class Renderer(ABC):
    """Renders a template with variables."""

    @abstractmethod
    def render(self, template_code: str, variables: Dict[str, Any]) -> OperationResult:
        """Render a template.

        Returns:
            SUCCESS with ``data=RenderedMessage``, NOT_FOUND for an unknown
            template, PERMANENT_ERROR for a render error, or a transient error.
        """


class DeliveryTransport(ABC):
    """Hands a rendered message to the provider of one channel."""

    @property
    @abstractmethod
    def channel(self) -> Channel:
        """Channel served by this transport."""

    @abstractmethod
    def deliver(self, address: str, rendered: RenderedMessage) -> OperationResult:
        """Deliver a message.

        Returns:
            SUCCESS with ``data={"delivery_id": str}``, or an error result.
        """

    def health_check(self) -> OperationResult:
        return OperationResult.success(message=f"{self.channel.value} transport configured")
