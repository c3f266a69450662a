"""Unit tests for logging setup."""

import logging

import pytest

from infrastructure.logging import configure_logging, get_logger, get_module_logger


@pytest.mark.unit
class TestConfigureLogging:
    def test_silenced_under_pytest(self):
        configure_logging(log_level="DEBUG", is_production=False)
        assert logging.root.level > logging.CRITICAL

    def test_returns_usable_logger(self):
        logger = configure_logging()
        logger.info("test_event", key="value")


@pytest.mark.unit
class TestGetModuleLogger:
    def test_logger_accepts_keyword_context(self):
        logger = get_module_logger()
        logger.bind(notification_id="n-1").warning("delivery_failed", error="boom")

    def test_get_logger_binds_name(self):
        logger = get_logger("delivery")
        logger.info("named_logger_event")
