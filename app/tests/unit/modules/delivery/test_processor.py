"""Unit tests for DeliveryProcessor."""

import pytest

from infrastructure.operations import OperationResult
from modules.delivery.models import Channel, NotificationStatus
from modules.delivery.processor import DeliveryOutcome, DeliveryProcessor
from tests.factories.delivery import make_notification_message, make_status_record


@pytest.mark.unit
class TestDeliveryOutcome:
    def test_ack_mapping(self):
        assert DeliveryOutcome.SENT.should_ack
        assert DeliveryOutcome.DUPLICATE.should_ack
        assert DeliveryOutcome.RETRY_SCHEDULED.should_ack
        assert not DeliveryOutcome.FAILED.should_ack
        assert not DeliveryOutcome.MALFORMED.should_ack


@pytest.mark.unit
class TestProcessSuccess:
    """Tests for successful deliveries."""

    def test_sends_and_records(self, processor, tracker, mock_renderer, mock_transports):
        message = make_notification_message(request_id="r-1")

        outcome = processor.process(message.to_payload())

        assert outcome == DeliveryOutcome.SENT
        mock_renderer.render.assert_called_once_with("welcome", {"name": "Ada"})
        mock_transports[Channel.EMAIL].deliver.assert_called_once()
        address, rendered = mock_transports[Channel.EMAIL].deliver.call_args.args
        assert address == "ada@example.com"
        assert rendered.body == "Hello Ada"

        record = tracker.get_by_request_id("r-1")
        assert record.status == NotificationStatus.SENT
        assert record.delivery_id == "smtp-1"
        assert record.processing_time_ms == 0

    def test_dispatches_by_channel(self, processor, mock_transports):
        message = make_notification_message(channel=Channel.PUSH)

        processor.process(message.to_payload())

        mock_transports[Channel.PUSH].deliver.assert_called_once()
        mock_transports[Channel.EMAIL].deliver.assert_not_called()

    def test_accepts_raw_json(self, processor):
        message = make_notification_message()
        assert processor.process(message.model_dump_json()) == DeliveryOutcome.SENT


@pytest.mark.unit
class TestProcessDuplicates:
    def test_already_sent_is_discarded(self, processor, tracker, mock_transports):
        tracker.save(make_status_record(request_id="r-1", status=NotificationStatus.SENT))

        outcome = processor.process(make_notification_message(request_id="r-1").to_payload())

        assert outcome == DeliveryOutcome.DUPLICATE
        mock_transports[Channel.EMAIL].deliver.assert_not_called()

    @pytest.mark.parametrize(
        "status", [NotificationStatus.QUEUED, NotificationStatus.RETRYING]
    )
    def test_non_sent_status_is_processed(self, processor, tracker, status):
        tracker.save(make_status_record(request_id="r-1", status=status))
        outcome = processor.process(make_notification_message(request_id="r-1").to_payload())
        assert outcome == DeliveryOutcome.SENT


@pytest.mark.unit
class TestProcessFailures:
    """Tests for failed deliveries and retry decisions."""

    def test_transport_failure_schedules_retry(
        self, processor, tracker, mock_transports, fake_timers
    ):
        mock_transports[Channel.EMAIL].deliver.return_value = (
            OperationResult.transient_error("smtp 451")
        )

        outcome = processor.process(make_notification_message(request_id="r-1").to_payload())

        assert outcome == DeliveryOutcome.RETRY_SCHEDULED
        assert fake_timers.last.interval == 2.0
        record = tracker.get_by_request_id("r-1")
        assert record.status == NotificationStatus.RETRYING
        assert record.retry_count == 1
        assert record.error == "smtp 451"

    def test_permanent_failure_still_retried(self, processor, mock_transports):
        mock_transports[Channel.EMAIL].deliver.return_value = (
            OperationResult.permanent_error("mailbox unavailable")
        )
        outcome = processor.process(make_notification_message().to_payload())
        assert outcome == DeliveryOutcome.RETRY_SCHEDULED

    def test_render_failure_skips_transport(self, processor, mock_renderer, mock_transports):
        mock_renderer.render.return_value = OperationResult.not_found("no template")

        outcome = processor.process(make_notification_message().to_payload())

        assert outcome == DeliveryOutcome.RETRY_SCHEDULED
        mock_transports[Channel.EMAIL].deliver.assert_not_called()

    def test_exhausted_retries_fail(self, processor, tracker, mock_transports, fake_timers):
        mock_transports[Channel.EMAIL].deliver.return_value = (
            OperationResult.transient_error("down")
        )

        outcome = processor.process(
            make_notification_message(request_id="r-1", retry_count=3).to_payload()
        )

        assert outcome == DeliveryOutcome.FAILED
        assert fake_timers.timers == []
        record = tracker.get_by_request_id("r-1")
        assert record.status == NotificationStatus.FAILED
        assert record.retry_count == 3

    def test_open_transport_circuit_counts_as_failure(
        self, processor, breakers, mock_transports
    ):
        transport_breaker = breakers.get_or_create("transport:email")
        for _ in range(3):
            with pytest.raises(ConnectionError):
                transport_breaker.call(_raise)
        mock_transports[Channel.EMAIL].deliver.reset_mock()

        outcome = processor.process(make_notification_message().to_payload())

        assert outcome == DeliveryOutcome.RETRY_SCHEDULED
        mock_transports[Channel.EMAIL].deliver.assert_not_called()

    def test_missing_transport_retries(self, tracker, mock_renderer, scheduler, breakers):
        processor = DeliveryProcessor(tracker, mock_renderer, {}, scheduler, breakers)

        outcome = processor.process(make_notification_message().to_payload())

        assert outcome == DeliveryOutcome.RETRY_SCHEDULED


def _raise():
    raise ConnectionError("down")


@pytest.mark.unit
class TestProcessMalformed:
    @pytest.mark.parametrize(
        "body",
        [
            {"foo": "bar"},
            "not json",
            None,
            {"notification_id": "n", "request_id": "r", "user_id": "u",
             "channel": "sms", "recipient": "x", "template_code": "t"},
        ],
    )
    def test_malformed_bodies(self, processor, tracker, body):
        assert processor.process(body) == DeliveryOutcome.MALFORMED
