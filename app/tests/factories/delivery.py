"""Test factories for the delivery pipeline.

All factories return Pydantic models for type safety and validation.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from modules.delivery.models import (
    Channel,
    NotificationMessage,
    NotificationRequest,
    NotificationStatus,
    RenderedMessage,
    StatusRecord,
)

PUSH_TOKEN = "fcm-token-0123456789abcdef"


def make_notification_request(
    channel: str = "email",
    user_id: str = "user-123",
    template_code: str = "welcome",
    variables: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = "req-1",
    priority: int = 2,
    metadata: Optional[Dict[str, Any]] = None,
) -> NotificationRequest:
    """Create a test NotificationRequest.

    Example:
        >>> request = make_notification_request(channel="push", request_id="r9")
    """
    return NotificationRequest(
        channel=channel,
        user_id=user_id,
        template_code=template_code,
        variables=variables if variables is not None else {"name": "Ada"},
        request_id=request_id,
        priority=priority,
        metadata=metadata or {},
    )


def make_notification_message(
    notification_id: str = "notif-1",
    request_id: str = "req-1",
    user_id: str = "user-123",
    channel: Channel = Channel.EMAIL,
    recipient: Optional[str] = None,
    template_code: str = "welcome",
    variables: Optional[Dict[str, Any]] = None,
    retry_count: int = 0,
    scheduled_for: Optional[datetime] = None,
) -> NotificationMessage:
    """Create a test NotificationMessage.

    The recipient defaults to an address valid for the channel.
    """
    if recipient is None:
        recipient = "ada@example.com" if channel == Channel.EMAIL else PUSH_TOKEN
    return NotificationMessage(
        notification_id=notification_id,
        request_id=request_id,
        user_id=user_id,
        channel=channel,
        recipient=recipient,
        template_code=template_code,
        variables=variables if variables is not None else {"name": "Ada"},
        retry_count=retry_count,
        scheduled_for=scheduled_for,
    )


def make_status_record(
    notification_id: str = "notif-1",
    request_id: str = "req-1",
    status: NotificationStatus = NotificationStatus.QUEUED,
    channel: Channel = Channel.EMAIL,
    error: Optional[str] = None,
    retry_count: int = 0,
    delivery_id: Optional[str] = None,
) -> StatusRecord:
    return StatusRecord(
        notification_id=notification_id,
        request_id=request_id,
        channel=channel,
        status=status,
        updated_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        error=error,
        retry_count=retry_count,
        delivery_id=delivery_id,
    )


def make_rendered_message(
    subject: Optional[str] = "Welcome Ada", body: str = "Hello Ada"
) -> RenderedMessage:
    return RenderedMessage(subject=subject, body=body)


def make_user_payload(
    user_id: str = "user-123",
    email: Optional[str] = "ada@example.com",
    push_token: Optional[str] = PUSH_TOKEN,
) -> Dict[str, Any]:
    """User service response body for ``GET /api/v1/users/{id}``."""
    return {
        "success": True,
        "data": {"id": user_id, "email": email, "push_token": push_token},
    }


def make_template_payload(
    name: str = "welcome",
    subject: str = "Welcome {{ name }}",
    body: str = "Hello {{ name }}",
) -> Dict[str, Any]:
    """Template service response body for ``GET /api/v1/templates/by-name/{code}``."""
    return {"success": True, "data": {"name": name, "subject": subject, "body": body}}
