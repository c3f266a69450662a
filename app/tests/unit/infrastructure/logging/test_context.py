"""Unit tests for logging context binding."""

import pytest
import structlog

from infrastructure.logging import (
    bind_request_context,
    clear_request_context,
    get_correlation_id,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def clean_context():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.mark.unit
class TestBindRequestContext:
    """Tests for bind_request_context."""

    def test_binds_and_unbinds(self):
        with bind_request_context(correlation_id="req-1", notification_id="n-1"):
            ctx = structlog.contextvars.get_contextvars()
            assert ctx["correlation_id"] == "req-1"
            assert ctx["notification_id"] == "n-1"

        assert structlog.contextvars.get_contextvars() == {}

    def test_generates_correlation_id(self):
        with bind_request_context() as correlation_id:
            assert correlation_id
            assert get_correlation_id() == correlation_id

    def test_skips_none_values(self):
        with bind_request_context(correlation_id="c", notification_id=None, channel=None):
            ctx = structlog.contextvars.get_contextvars()
            assert "notification_id" not in ctx
            assert "channel" not in ctx

    def test_unbinds_on_exception(self):
        with pytest.raises(RuntimeError):
            with bind_request_context(correlation_id="c"):
                raise RuntimeError("boom")
        assert get_correlation_id() is None


@pytest.mark.unit
class TestCorrelationId:
    def test_set_and_clear(self):
        set_correlation_id("abc")
        assert get_correlation_id() == "abc"
        clear_request_context()
        assert get_correlation_id() is None
