"""Unit tests for guarded_result_call."""

import pytest

from infrastructure.operations import OperationResult, OperationStatus
from infrastructure.resilience import CircuitState, guarded_result_call


@pytest.mark.unit
class TestGuardedResultCall:
    """Tests for running result-returning collaborators through a breaker."""

    def test_success_passes_through(self, breakers):
        cb = breakers.get_or_create("dep")
        result = guarded_result_call(
            cb, lambda x: OperationResult.success(data={"x": x}), 1
        )
        assert result.is_success
        assert result.data == {"x": 1}

    def test_transient_result_returned_and_counted(self, breakers):
        cb = breakers.get_or_create("dep")
        transient = OperationResult.transient_error("503", error_code="SERVER_ERROR")

        result = guarded_result_call(cb, lambda: transient)

        assert result is transient
        assert cb.get_stats()["failure_count"] == 1

    def test_retryable_results_open_the_circuit(self, breakers):
        cb = breakers.get_or_create("dep")
        for _ in range(3):
            guarded_result_call(cb, lambda: OperationResult.transient_error("down"))

        assert cb.state == CircuitState.OPEN

    def test_permanent_and_not_found_do_not_count(self, breakers):
        cb = breakers.get_or_create("dep")
        for _ in range(5):
            guarded_result_call(cb, lambda: OperationResult.permanent_error("bad"))
            guarded_result_call(cb, lambda: OperationResult.not_found("gone"))

        assert cb.state == CircuitState.CLOSED
        assert cb.get_stats()["failure_count"] == 0

    def test_open_circuit_yields_unavailable_without_calling(self, breakers):
        cb = breakers.get_or_create("dep")
        for _ in range(3):
            guarded_result_call(cb, lambda: OperationResult.transient_error("down"))
        calls = []

        result = guarded_result_call(
            cb, lambda: calls.append(1) or OperationResult.success()
        )

        assert calls == []
        assert result.status == OperationStatus.UNAVAILABLE
        assert result.error_code == "CIRCUIT_OPEN"
        assert result.retry_after == 30
        assert result.is_retryable

    def test_unexpected_exception_becomes_transient(self, breakers):
        cb = breakers.get_or_create("dep")

        def boom():
            raise RuntimeError("kaboom")

        result = guarded_result_call(cb, boom)

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "UNEXPECTED_ERROR"
        assert "kaboom" in result.message
        assert cb.get_stats()["failure_count"] == 1
