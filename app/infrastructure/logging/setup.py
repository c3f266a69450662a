"""Structlog configuration for the API and worker processes.

Both process roles log through the same processor chain; the role is
stamped on every entry so a shared log stream can be split again.

Usage:
    from infrastructure.logging import configure_logging, get_module_logger

    configure_logging(role="worker")

    logger = get_module_logger()
    logger.info("event_name", key="value")
"""

import inspect
import logging
import sys
from typing import Optional

import structlog
from structlog.stdlib import BoundLogger

from infrastructure.configuration.settings import settings
from infrastructure.logging.formatters import (
    add_service_info,
    mask_sensitive_data,
    redact_recipients,
    truncate_large_values,
)

APP_NAME = "notification-pipeline"


def _is_test_environment() -> bool:
    return "pytest" in sys.modules


def _silence() -> BoundLogger:
    logging.basicConfig(format="%(message)s", level=logging.CRITICAL + 1, force=True)
    logging.root.setLevel(logging.CRITICAL + 1)
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    return structlog.stdlib.get_logger()


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
    role: str = "api",
) -> BoundLogger:
    """Configure structlog for this process.

    Entries carry the contextvars bound by ``bind_request_context``
    (correlation id, notification id, channel, retry count), the service
    name, version and role. Recipient addresses are partially masked and
    credentials fully masked. Production renders JSON, otherwise the console
    renderer is used. Under pytest nothing is emitted.

    Args:
        log_level: Overrides ``settings.LOG_LEVEL``
        is_production: Overrides ``settings.is_production``
        role: Process role, ``api`` or ``worker``

    Returns:
        Configured logger instance
    """
    if _is_test_environment():
        return _silence()

    production = settings.is_production if is_production is None else is_production
    level_name = (log_level or settings.LOG_LEVEL).upper()

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.THREAD_NAME,
            ]
        ),
        add_service_info(APP_NAME, settings.GIT_SHA, role),
        redact_recipients(),
        mask_sensitive_data(),
        truncate_large_values(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer()
        if production
        else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level_name, logging.INFO),
        force=True,
    )
    # Third-party DEBUG output
    for noisy in ("kombu", "amqp", "urllib3"):
        logging.getLogger(noisy).setLevel(max(logging.INFO, logging.root.level))

    return structlog.stdlib.get_logger()


logger: BoundLogger = configure_logging()


def _caller_module(frame) -> Optional[str]:
    caller = frame.f_back if frame is not None else None
    if caller is None:
        return None
    module = inspect.getmodule(caller)
    return module.__name__ if module else None


def get_logger(name: Optional[str] = None) -> BoundLogger:
    """Logger bound to ``name``, or to the calling module's name."""
    module_name = name or _caller_module(inspect.currentframe())
    return logger.bind(logger_name=module_name or "unknown")


def get_module_logger() -> BoundLogger:
    """Logger bound to the calling module.

    Binds ``component`` (last dotted part) and ``module_path``:

        # In modules/delivery/publisher.py
        logger = get_module_logger()
        # {"component": "publisher", "module_path": "modules.delivery.publisher"}
    """
    module_name = _caller_module(inspect.currentframe())
    if module_name is None:
        return logger.bind(component="unknown")
    return logger.bind(component=module_name.rsplit(".", 1)[-1], module_path=module_name)
