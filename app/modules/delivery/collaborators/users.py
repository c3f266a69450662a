"""Recipient resolution against the user service."""

from typing import Optional

import requests
import structlog

from infrastructure.operations import (
    OperationResult,
    OperationStatus,
    classify_http_error,
)
from modules.delivery.collaborators.base import RecipientResolver
from modules.delivery.models import Channel

logger = structlog.get_logger()

ADDRESS_FIELDS = {
    Channel.EMAIL: "email",
    Channel.PUSH: "push_token",
}


class HttpRecipientResolver(RecipientResolver):
    """Looks users up at ``GET {base_url}/api/v1/users/{user_id}``.

    The user service wraps records as ``{"data": {...}}``; the address is
    the ``email`` or ``push_token`` field depending on the channel.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def resolve(self, user_id: str, channel: Channel) -> OperationResult:
        url = f"{self._base_url}/api/v1/users/{user_id}"
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            result = classify_http_error(e)
            if result.status == OperationStatus.NOT_FOUND:
                return OperationResult.not_found(
                    f"User {user_id} not found", error_code="RECIPIENT_NOT_FOUND"
                )
            logger.warning("user_lookup_failed", user_id=user_id, error=result.message)
            return result
        except ValueError as e:
            return OperationResult.transient_error(
                f"User service returned invalid JSON: {e}",
                error_code="INVALID_RESPONSE",
            )

        user = body.get("data") if isinstance(body, dict) else None
        address = (user or {}).get(ADDRESS_FIELDS[channel])
        if not address:
            return OperationResult.not_found(
                f"User {user_id} has no {channel.value} address",
                error_code="RECIPIENT_NOT_FOUND",
            )

        return OperationResult.success(data={"address": address})
