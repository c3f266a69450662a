"""Delivery worker feature settings."""

from typing import List

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class WorkerSettings(FeatureSettings):
    """Delivery worker configuration.

    Environment Variables:
        WORKER_CHANNELS: Comma separated channels to consume (default: email,push)
        WORKER_CONCURRENCY: Consumer threads per channel (default: 1)
        WORKER_SHUTDOWN_TIMEOUT_SECONDS: Join timeout per worker on shutdown
    """

    CHANNELS: str = Field(default="email,push", alias="WORKER_CHANNELS")
    CONCURRENCY: int = Field(default=1, gt=0, alias="WORKER_CONCURRENCY")
    SHUTDOWN_TIMEOUT_SECONDS: float = Field(
        default=30.0, gt=0, alias="WORKER_SHUTDOWN_TIMEOUT_SECONDS"
    )

    @property
    def channels(self) -> List[str]:
        """Configured channel names."""
        return [c.strip() for c in self.CHANNELS.split(",") if c.strip()]
