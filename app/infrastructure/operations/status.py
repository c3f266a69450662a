"""Closed set of outcomes for pipeline operations.

Collaborators, the publisher and the processor all report through these
statuses; the API maps them to HTTP codes and the processor decides on
retries from them.
"""

from enum import Enum


class OperationStatus(Enum):
    """Outcome of an operation.

    Attributes:
        SUCCESS: Operation completed
        TRANSIENT_ERROR: May succeed later (timeout, 5xx, rate limit)
        PERMANENT_ERROR: Rejected by a provider, retrying will not help
        INVALID_ARGUMENT: Caller supplied an invalid request
        NOT_FOUND: Unknown recipient, template or status record
        UNAVAILABLE: A dependency is down or its circuit is open
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"

    @property
    def is_retryable(self) -> bool:
        return self in (OperationStatus.TRANSIENT_ERROR, OperationStatus.UNAVAILABLE)

    @property
    def http_status(self) -> int:
        """HTTP status code the API answers with for this outcome."""
        return _HTTP_STATUS.get(self, 500)


_HTTP_STATUS = {
    OperationStatus.SUCCESS: 200,
    OperationStatus.INVALID_ARGUMENT: 400,
    OperationStatus.NOT_FOUND: 404,
    OperationStatus.UNAVAILABLE: 503,
}
