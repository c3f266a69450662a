"""Per-delivery logging context.

Worker threads bind the identifiers of the message they are processing so
that every entry logged while handling it, including entries from the
collaborators, carries the same correlation id. structlog contextvars are
thread-local in the worker pool.

Usage:
    from infrastructure.logging import bind_request_context

    with bind_request_context(correlation_id="req-123", notification_id="n-1"):
        logger.info("delivery_started")
"""

import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None, **extra_context: Any
) -> Iterator[str]:
    """Bind a correlation id and extra fields for the duration of the block.

    Args:
        correlation_id: The notification's request id; generated when omitted.
        **extra_context: Further fields (notification_id, channel,
            retry_count...). ``None`` values are skipped.

    Yields:
        The correlation id in effect.

    Example:
        with bind_request_context(
            correlation_id=message.request_id,
            notification_id=message.notification_id,
            channel=message.channel.value,
        ):
            processor.process(body)
    """
    context = {k: v for k, v in extra_context.items() if v is not None}
    context["correlation_id"] = correlation_id or str(uuid.uuid4())

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["correlation_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*context)


def get_correlation_id() -> Optional[str]:
    return structlog.contextvars.get_contextvars().get("correlation_id")


def set_correlation_id(correlation_id: str) -> None:
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_request_context() -> None:
    """Drop everything bound in this thread; called between messages."""
    structlog.contextvars.clear_contextvars()
