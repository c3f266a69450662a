"""Tests for the metrics and circuit breaker admin routes."""

import pytest

from infrastructure.resilience import CircuitState


def _boom():
    raise ConnectionError("down")


def test_metrics_snapshot(client, breakers):
    breakers.get_or_create("broker")

    response = client.get("/api/v1/metrics")

    assert response.status_code == 200
    body = response.json()
    assert body["queues"] == {
        "available": True,
        "depths": {"email": 0, "push": 0, "failed": 0},
    }
    assert body["circuit_breakers"]["broker"]["state"] == "closed"
    assert body["open_circuit_breakers"] == []
    assert body["store"]["available"] is True
    assert body["store"]["backend"] == "memory"


def test_metrics_when_broker_unreachable(client, mock_broker):
    mock_broker.queue_depths.side_effect = ConnectionError("down")

    body = client.get("/api/v1/metrics").json()

    assert body["queues"]["available"] is False
    assert body["queues"]["depths"] == {}


def test_reset_circuit_breaker(client, breakers):
    breaker = breakers.get_or_create("user_service")
    for _ in range(3):
        with pytest.raises(ConnectionError):
            breaker.call(_boom)
    assert breakers.get_open() == ["user_service"]

    response = client.post("/api/v1/metrics/circuit-breakers/user_service/reset")

    assert response.status_code == 200
    assert response.json() == {"name": "user_service", "state": "closed"}
    assert breaker.state == CircuitState.CLOSED


def test_reset_unknown_circuit_breaker(client):
    response = client.post("/api/v1/metrics/circuit-breakers/nope/reset")
    assert response.status_code == 404


def test_reset_all_circuit_breakers(client, breakers):
    for name in ("broker", "renderer"):
        breaker = breakers.get_or_create(name)
        for _ in range(3):
            with pytest.raises(ConnectionError):
                breaker.call(_boom)

    response = client.post("/api/v1/metrics/circuit-breakers/reset")

    assert response.status_code == 200
    assert sorted(response.json(), key=lambda item: item["name"]) == [
        {"name": "broker", "state": "closed"},
        {"name": "renderer", "state": "closed"},
    ]
    assert breakers.get_open() == []
