"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.worker import WorkerSettings

__all__ = ["WorkerSettings"]
