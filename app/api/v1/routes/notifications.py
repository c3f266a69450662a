"""FastAPI routes for submitting notifications and querying their status."""

from typing import Callable, List, Optional

import structlog
from fastapi import APIRouter, HTTPException, Request

from api.dependencies.delivery import PublisherDep, StatusTrackerDep
from api.dependencies.rate_limits import API_RATE_LIMIT, get_limiter
from infrastructure.operations import OperationResult
from infrastructure.persistence import StoreUnavailableError
from modules.delivery.models import NotificationRequest, StatusRecord
from modules.delivery.schemas import (
    BulkItemResult,
    BulkNotificationRequest,
    NotificationResponse,
)

logger = structlog.get_logger()
router = APIRouter(prefix="/notifications", tags=["Notifications"])
limiter = get_limiter()


def _raise_for_result(result: OperationResult) -> None:
    status_code = result.status.http_status
    headers = None
    if status_code == 503 and result.retry_after is not None:
        headers = {"Retry-After": str(result.retry_after)}
    raise HTTPException(
        status_code=status_code,
        detail=result.error_detail(),
        headers=headers,
    )


def _find_status(lookup: Callable[[str], Optional[StatusRecord]], key: str) -> StatusRecord:
    try:
        record = lookup(key)
    except StoreUnavailableError as e:
        logger.error("status_store_unavailable", key=key, error=str(e))
        _raise_for_result(
            OperationResult.unavailable(
                f"Status store unavailable: {e}", error_code="STORE_UNAVAILABLE"
            )
        )
    if record is None:
        raise HTTPException(status_code=404, detail="Status not found")
    return record


@router.post(
    "",
    status_code=202,
    response_model=NotificationResponse,
    summary="Submit Notification",
)
@limiter.limit(API_RATE_LIMIT)
def submit_notification(
    request: Request,  # pylint: disable=unused-argument
    notification: NotificationRequest,
    publisher: PublisherDep,
) -> NotificationResponse:
    """Accept a notification for asynchronous delivery.

    Submitting the same ``(user_id, channel, template_code, request_id)``
    again returns the existing notification instead of enqueueing a second
    one.

    Raises:
        HTTPException: 400 for an unsupported channel, 404 if the user has
            no address for the channel, 503 when a dependency is down
    """
    log = logger.bind(
        endpoint="/api/v1/notifications",
        channel=notification.channel,
        request_id=notification.request_id,
    )
    result = publisher.send(notification)
    if not result.is_success:
        log.warning(
            "notification_rejected",
            status=result.status.value,
            error_code=result.error_code,
            error=result.message,
        )
        _raise_for_result(result)
    return NotificationResponse(**result.data)


@router.post(
    "/bulk",
    status_code=202,
    response_model=List[BulkItemResult],
    summary="Submit Notifications In Bulk",
)
@limiter.limit(API_RATE_LIMIT)
def submit_notifications_bulk(
    request: Request,  # pylint: disable=unused-argument
    bulk: BulkNotificationRequest,
    publisher: PublisherDep,
) -> List[BulkItemResult]:
    """Accept up to 100 notifications; one failing item does not affect the others."""
    results = publisher.send_bulk(bulk.notifications)
    items = []
    for index, result in enumerate(results):
        if result.is_success:
            items.append(
                BulkItemResult(
                    index=index,
                    success=True,
                    notification=NotificationResponse(**result.data),
                )
            )
        else:
            items.append(
                BulkItemResult(
                    index=index,
                    success=False,
                    error=result.message,
                    error_code=result.error_code,
                )
            )
    logger.info(
        "bulk_notifications_submitted",
        total=len(items),
        accepted=sum(1 for item in items if item.success),
    )
    return items


@router.get(
    "/requests/{request_id}/status",
    response_model=StatusRecord,
    summary="Get Status By Request Id",
)
@limiter.limit(API_RATE_LIMIT)
def get_request_status(
    request: Request,  # pylint: disable=unused-argument
    request_id: str,
    tracker: StatusTrackerDep,
) -> StatusRecord:
    return _find_status(tracker.get_by_request_id, request_id)


@router.get(
    "/{notification_id}/status",
    response_model=StatusRecord,
    summary="Get Notification Status",
)
@limiter.limit(API_RATE_LIMIT)
def get_notification_status(
    request: Request,  # pylint: disable=unused-argument
    notification_id: str,
    tracker: StatusTrackerDep,
) -> StatusRecord:
    """Last known status of a notification.

    Status records expire; a 404 does not mean the notification was never
    delivered.
    """
    return _find_status(tracker.get_by_notification_id, notification_id)
