"""OperationResult: the value every collaborator call returns.

Collaborators never raise for expected failures; they return a result
whose status says whether the failure is worth retrying.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from infrastructure.operations.status import OperationStatus


@dataclass
class OperationResult:
    """Outcome of an operation.

    Attributes:
        status: High-level outcome
        message: Human-readable message for logs and API error bodies
        data: Payload on success (address, rendered message, delivery id...)
        error_code: Machine-readable code, e.g. ``RECIPIENT_NOT_FOUND``
        retry_after: Seconds the caller should wait before trying again
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None
    retry_after: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @property
    def is_retryable(self) -> bool:
        """True for failures that may succeed when attempted again."""
        return self.status.is_retryable

    def error_detail(self) -> Dict[str, Optional[str]]:
        """``{message, error_code}`` body used by API error responses."""
        return {"message": self.message, "error_code": self.error_code}

    @classmethod
    def success(cls, data: Optional[Any] = None, message: str = "ok") -> "OperationResult":
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        """Create a failed result with an explicit status."""
        return cls(
            status=status,
            message=message,
            data=data,
            error_code=error_code,
            retry_after=retry_after,
        )

    @classmethod
    def transient_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> "OperationResult":
        """Timeouts, connection failures, 5xx and 429 responses."""
        return cls.error(OperationStatus.TRANSIENT_ERROR, message, error_code, retry_after)

    @classmethod
    def permanent_error(cls, message: str, error_code: Optional[str] = None) -> "OperationResult":
        """Refused recipients, rejected credentials, broken templates."""
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code)

    @classmethod
    def invalid_argument(
        cls, message: str, error_code: Optional[str] = "INVALID_ARGUMENT"
    ) -> "OperationResult":
        return cls.error(OperationStatus.INVALID_ARGUMENT, message, error_code)

    @classmethod
    def not_found(cls, message: str, error_code: Optional[str] = "NOT_FOUND") -> "OperationResult":
        return cls.error(OperationStatus.NOT_FOUND, message, error_code)

    @classmethod
    def unavailable(
        cls,
        message: str,
        error_code: Optional[str] = "DEPENDENCY_UNAVAILABLE",
        retry_after: Optional[int] = None,
    ) -> "OperationResult":
        """A dependency is down or its circuit breaker is open."""
        return cls.error(OperationStatus.UNAVAILABLE, message, error_code, retry_after)
