"""Delivery pipeline models.

Uses Pydantic BaseModel for:
- Runtime validation of submitted requests
- JSON payload encoding/decoding of broker messages
- Consistency with the API layer (request/response schemas)
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Channel(str, Enum):
    """Delivery channel; also the broker routing key."""

    EMAIL = "email"
    PUSH = "push"


class NotificationStatus(str, Enum):
    """Lifecycle status of a notification.

    QUEUED -> SENT, or QUEUED -> RETRYING (xN) -> SENT | FAILED.
    """

    QUEUED = "queued"
    SENT = "sent"
    RETRYING = "retrying"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (NotificationStatus.SENT, NotificationStatus.FAILED)


class NotificationRequest(BaseModel):
    """Submission accepted by the publisher.

    ``channel`` stays a plain string here so that an unsupported channel is
    reported by the publisher as an invalid argument rather than as a
    schema error.

    Attributes:
        channel: Requested channel name ("email" or "push")
        user_id: Owner of the recipient address, resolved before publishing
        template_code: Template identifier, opaque to the pipeline
        variables: Template variables, opaque to the pipeline
        request_id: Client correlation id; generated when omitted
        priority: Hint only, no priority queues are used
        metadata: Free-form context carried with the message

    Example:
        request = NotificationRequest(
            channel="email",
            user_id="user-123",
            template_code="welcome",
            variables={"name": "Ada"},
            request_id="r1",
        )
    """

    channel: str
    user_id: str = Field(..., min_length=1)
    template_code: str = Field(..., min_length=1)
    variables: Dict[str, Any] = Field(default_factory=dict)
    request_id: Optional[str] = None
    priority: int = Field(default=2, ge=1, le=10)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("channel")
    @classmethod
    def normalize_channel(cls, v: str) -> str:
        return v.strip().lower()


class NotificationMessage(BaseModel):
    """Unit of work flowing through the broker.

    Immutable; retries produce a copy with ``retry_count`` incremented and
    ``scheduled_for`` set (see ``with_retry``).
    """

    model_config = ConfigDict(frozen=True)

    notification_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    request_id: str
    user_id: str
    channel: Channel
    recipient: str
    template_code: str
    variables: Dict[str, Any] = Field(default_factory=dict)
    priority: int = 2
    metadata: Dict[str, Any] = Field(default_factory=dict)
    retry_count: int = Field(default=0, ge=0)
    scheduled_for: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)

    def with_retry(self, scheduled_for: datetime) -> "NotificationMessage":
        """Copy for the next attempt, one retry further along."""
        return self.model_copy(
            update={
                "retry_count": self.retry_count + 1,
                "scheduled_for": scheduled_for,
            }
        )

    def to_payload(self) -> Dict[str, Any]:
        """JSON-safe dict for publishing."""
        return self.model_dump(mode="json")

    @classmethod
    def from_payload(cls, payload: Any) -> "NotificationMessage":
        """Parse a broker payload.

        Raises:
            pydantic.ValidationError: If the payload is malformed.
        """
        if isinstance(payload, (str, bytes, bytearray)):
            return cls.model_validate_json(payload)
        return cls.model_validate(payload)


class StatusRecord(BaseModel):
    """Last known state of a notification, as stored by the status tracker."""

    notification_id: str
    request_id: str
    channel: Optional[Channel] = None
    status: NotificationStatus
    updated_at: datetime = Field(default_factory=utc_now)
    error: Optional[str] = None
    retry_count: Optional[int] = None
    delivery_id: Optional[str] = None
    processing_time_ms: Optional[int] = None


class RenderedMessage(BaseModel):
    """Output of the renderer, input of a delivery transport."""

    subject: Optional[str] = None
    body: str
