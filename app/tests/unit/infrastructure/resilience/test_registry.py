"""Unit tests for the circuit breaker registry."""

from types import SimpleNamespace

import pytest

from infrastructure.resilience import CircuitBreakerRegistry, CircuitState


def _fail():
    raise ConnectionError("down")


@pytest.mark.unit
class TestCircuitBreakerRegistry:
    """Tests for CircuitBreakerRegistry."""

    def test_get_or_create_returns_shared_instance(self, breakers):
        first = breakers.get_or_create("broker")
        second = breakers.get_or_create("broker")
        assert first is second

    def test_new_breakers_use_registry_defaults(self, breakers):
        cb = breakers.get_or_create("renderer")
        assert cb.failure_threshold == 3
        assert cb.success_threshold == 1
        assert cb.call_timeout is None

    def test_overrides_apply_on_creation_only(self, breakers):
        cb = breakers.get_or_create("transport:push", failure_threshold=10)
        assert cb.failure_threshold == 10
        assert breakers.get_or_create("transport:push", failure_threshold=1) is cb
        assert cb.failure_threshold == 10

    def test_get_unknown_returns_none(self, breakers):
        assert breakers.get("missing") is None

    def test_get_open_and_stats(self, breakers):
        broker = breakers.get_or_create("broker")
        breakers.get_or_create("renderer")
        for _ in range(3):
            with pytest.raises(ConnectionError):
                broker.call(_fail)

        assert breakers.get_open() == ["broker"]
        stats = breakers.get_all_stats()
        assert stats["broker"]["state"] == "open"
        assert stats["renderer"]["state"] == "closed"

    def test_reset_by_name(self, breakers):
        broker = breakers.get_or_create("broker")
        for _ in range(3):
            with pytest.raises(ConnectionError):
                broker.call(_fail)

        breakers.reset("broker")

        assert broker.state == CircuitState.CLOSED

    def test_reset_unknown_raises_key_error(self, breakers):
        with pytest.raises(KeyError):
            breakers.reset("missing")

    def test_reset_all(self, breakers):
        for name in ("a", "b"):
            cb = breakers.get_or_create(name)
            for _ in range(3):
                with pytest.raises(ConnectionError):
                    cb.call(_fail)

        breakers.reset_all()

        assert breakers.get_open() == []

    def test_from_settings(self, fake_clock):
        settings = SimpleNamespace(
            failure_threshold=7,
            success_threshold=3,
            reset_timeout_seconds=12.0,
            call_timeout_seconds=4.0,
            half_open_max_calls=2,
        )
        registry = CircuitBreakerRegistry.from_settings(settings, clock=fake_clock)

        cb = registry.get_or_create("x")

        assert cb.failure_threshold == 7
        assert cb.success_threshold == 3
        assert cb.reset_timeout == 12.0
        assert cb.call_timeout == 4.0
        assert cb.half_open_max_calls == 2
