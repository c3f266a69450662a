"""Structured logging for the notification pipeline (structlog).

Setup:
    configure_logging(role=...), get_logger(), get_module_logger()

Context (contextvars, merged into every entry of the current thread):
    bind_request_context(), get_correlation_id(), set_correlation_id(),
    clear_request_context()

Processors:
    add_service_info(), redact_recipients(), mask_sensitive_data(),
    truncate_large_values()
"""

from infrastructure.logging.context import (
    bind_request_context,
    clear_request_context,
    get_correlation_id,
    set_correlation_id,
)
from infrastructure.logging.formatters import (
    RECIPIENT_KEYS,
    SENSITIVE_PATTERNS,
    add_service_info,
    mask_sensitive_data,
    redact_recipients,
    truncate_large_values,
)
from infrastructure.logging.setup import (
    configure_logging,
    get_logger,
    get_module_logger,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "get_module_logger",
    "bind_request_context",
    "clear_request_context",
    "get_correlation_id",
    "set_correlation_id",
    "add_service_info",
    "redact_recipients",
    "mask_sensitive_data",
    "truncate_large_values",
    "RECIPIENT_KEYS",
    "SENSITIVE_PATTERNS",
]
