"""Push transport over the provider's HTTP API."""

import uuid
from typing import Optional, TYPE_CHECKING

import requests
import structlog

from infrastructure.operations import OperationResult, classify_http_error
from modules.delivery.collaborators.base import DeliveryTransport
from modules.delivery.models import Channel, RenderedMessage

if TYPE_CHECKING:
    from infrastructure.configuration.integrations.push import PushSettings

logger = structlog.get_logger()

MIN_TOKEN_LENGTH = 20


class HttpPushTransport(DeliveryTransport):
    """POSTs ``{token, notification: {title, body}}`` to ``PUSH_API_URL``."""

    def __init__(
        self,
        settings: "PushSettings",
        session: Optional[requests.Session] = None,
    ):
        self._settings = settings
        self._session = session or requests.Session()

    @property
    def channel(self) -> Channel:
        return Channel.PUSH

    def deliver(self, address: str, rendered: RenderedMessage) -> OperationResult:
        if not self._settings.PUSH_API_URL:
            return OperationResult.transient_error(
                "Push provider not configured", error_code="NOT_CONFIGURED"
            )

        if len(address) < MIN_TOKEN_LENGTH:
            return OperationResult.permanent_error(
                "Push token is malformed", error_code="INVALID_PUSH_TOKEN"
            )

        headers = {"Content-Type": "application/json"}
        if self._settings.PUSH_API_KEY:
            headers["Authorization"] = f"Bearer {self._settings.PUSH_API_KEY}"

        payload = {
            "token": address,
            "notification": {"title": rendered.subject or "", "body": rendered.body},
        }

        try:
            response = self._session.post(
                self._settings.PUSH_API_URL,
                json=payload,
                headers=headers,
                timeout=self._settings.PUSH_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            result = classify_http_error(e)
            logger.warning("push_delivery_failed", error=result.message)
            return result

        delivery_id = None
        try:
            delivery_id = response.json().get("message_id")
        except (ValueError, AttributeError):
            pass
        delivery_id = delivery_id or str(uuid.uuid4())

        logger.info("push_delivered", delivery_id=delivery_id)
        return OperationResult.success(data={"delivery_id": delivery_id})

    def health_check(self) -> OperationResult:
        if not self._settings.PUSH_API_URL:
            return OperationResult.unavailable(
                "Push provider URL not configured", error_code="NOT_CONFIGURED"
            )
        return OperationResult.success(message="Push provider configured")
