"""Request and response schemas for the notifications API."""

from typing import List, Optional

from pydantic import BaseModel, Field

from modules.delivery.models import NotificationRequest, NotificationStatus

MAX_BULK_ITEMS = 100


class NotificationResponse(BaseModel):
    """Accepted submission."""

    notification_id: str
    request_id: str
    status: NotificationStatus
    duplicate: bool = False


class BulkNotificationRequest(BaseModel):
    """Several submissions in one call, each handled independently."""

    notifications: List[NotificationRequest] = Field(
        ..., min_length=1, max_length=MAX_BULK_ITEMS
    )


class BulkItemResult(BaseModel):
    """Outcome of one item of a bulk submission."""

    index: int
    success: bool
    notification: Optional[NotificationResponse] = None
    error: Optional[str] = None
    error_code: Optional[str] = None


class BreakerResetResponse(BaseModel):
    name: str
    state: str
