"""Infrastructure modules for the notification pipeline.

Centralized infrastructure components:
- configuration: Settings management (Settings, RetrySettings)
- logging: Structured logging (get_module_logger, bind_request_context)
- operations: Operation results and error classification
- resilience: Circuit breakers, breaker registry and retry policy
- persistence: Key-value store (Redis, in-memory)
- messaging: Broker topology and client (kombu)
- idempotency: Idempotency key builder
- services: Dependency injection services (SettingsDep, get_settings)
"""

# Observability
from infrastructure.logging import get_module_logger

# Operations
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

# Dependency Injection Services
from infrastructure.services import SettingsDep, get_settings

__all__ = [
    "get_module_logger",
    "OperationResult",
    "OperationStatus",
    "SettingsDep",
    "get_settings",
]
