"""Unit tests for delivery models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from modules.delivery.models import (
    Channel,
    NotificationMessage,
    NotificationStatus,
)
from tests.factories.delivery import make_notification_message, make_notification_request


@pytest.mark.unit
class TestNotificationRequest:
    def test_channel_normalized(self):
        assert make_notification_request(channel=" EMAIL ").channel == "email"

    def test_defaults(self):
        request = make_notification_request(request_id=None)
        assert request.request_id is None
        assert request.priority == 2

    @pytest.mark.parametrize("priority", [0, 11])
    def test_priority_bounds(self, priority):
        with pytest.raises(ValidationError):
            make_notification_request(priority=priority)

    def test_user_id_required(self):
        with pytest.raises(ValidationError):
            make_notification_request(user_id="")


@pytest.mark.unit
class TestNotificationMessage:
    def test_generates_notification_id(self):
        message = NotificationMessage(
            request_id="r1",
            user_id="u",
            channel=Channel.EMAIL,
            recipient="a@example.com",
            template_code="welcome",
        )
        assert message.notification_id
        assert message.retry_count == 0
        assert message.scheduled_for is None

    def test_is_immutable(self):
        message = make_notification_message()
        with pytest.raises(ValidationError):
            message.retry_count = 2

    def test_with_retry(self):
        message = make_notification_message(retry_count=1)
        when = datetime(2026, 1, 1, 0, 0, 4, tzinfo=timezone.utc)

        retry = message.with_retry(when)

        assert retry.retry_count == 2
        assert retry.scheduled_for == when
        assert retry.notification_id == message.notification_id
        assert message.retry_count == 1

    def test_payload_is_json_safe(self):
        payload = make_notification_message().to_payload()
        assert payload["channel"] == "email"
        assert isinstance(payload["created_at"], str)

    def test_from_payload_accepts_dict_and_text(self):
        message = make_notification_message(variables={"n": 1})
        assert NotificationMessage.from_payload(message.to_payload()) == message
        assert NotificationMessage.from_payload(message.model_dump_json()) == message

    def test_from_payload_rejects_unknown_channel(self):
        payload = make_notification_message().to_payload()
        payload["channel"] = "sms"
        with pytest.raises(ValidationError):
            NotificationMessage.from_payload(payload)

    def test_from_payload_rejects_negative_retry_count(self):
        payload = make_notification_message().to_payload()
        payload["retry_count"] = -1
        with pytest.raises(ValidationError):
            NotificationMessage.from_payload(payload)


@pytest.mark.unit
class TestNotificationStatus:
    def test_terminal_statuses(self):
        assert NotificationStatus.SENT.is_terminal
        assert NotificationStatus.FAILED.is_terminal
        assert not NotificationStatus.QUEUED.is_terminal
        assert not NotificationStatus.RETRYING.is_terminal
