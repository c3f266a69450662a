"""Unit tests for infrastructure.logging.formatters module.

Tests cover:
- add_service_info processor
- redact_recipients processor
- mask_sensitive_data processor
- truncate_large_values processor
"""

import pytest

from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    add_service_info,
    mask_sensitive_data,
    redact_recipients,
    truncate_large_values,
)


@pytest.mark.unit
class TestAddServiceInfo:
    """Test suite for add_service_info processor factory."""

    def test_adds_service_version_and_role(self):
        processor = add_service_info("notification-pipeline", "abc123", role="worker")
        result = processor(None, "info", {"event": "test_event"})
        assert result["service"] == "notification-pipeline"
        assert result["version"] == "abc123"
        assert result["role"] == "worker"
        assert result["event"] == "test_event"

    def test_defaults(self):
        result = add_service_info("app")(None, "info", {"event": "e"})
        assert result["version"] == "unknown"
        assert result["role"] == "api"

    def test_does_not_override_bound_values(self):
        result = add_service_info("app")(None, "info", {"event": "e", "role": "worker"})
        assert result["role"] == "worker"


@pytest.mark.unit
class TestRedactRecipients:
    """Test suite for redact_recipients processor factory."""

    def test_masks_email_local_part(self):
        result = redact_recipients()(None, "info", {"recipient": "ada@example.com"})
        assert result["recipient"] == "a***@example.com"

    def test_masks_push_token_middle(self):
        result = redact_recipients()(
            None, "info", {"push_token": "fcm-token-0123456789abcdef"}
        )
        assert result["push_token"] == "fcm-...cdef"

    def test_short_values_fully_masked(self):
        result = redact_recipients()(None, "info", {"address": "abc"})
        assert result["address"] == "***"

    def test_other_keys_untouched(self):
        result = redact_recipients()(None, "info", {"user_id": "user-123", "to": None})
        assert result == {"user_id": "user-123", "to": None}


@pytest.mark.unit
class TestMaskSensitiveData:
    """Test suite for mask_sensitive_data processor factory."""

    def test_masks_sensitive_keys(self):
        result = mask_sensitive_data()(
            None, "info", {"event": "e", "smtp_password": "hunter2", "user_id": "u1"}
        )
        assert result["smtp_password"] == "***REDACTED***"
        assert result["user_id"] == "u1"

    def test_matching_is_case_insensitive(self):
        result = mask_sensitive_data()(None, "info", {"PUSH_API_KEY": "k"})
        assert result["PUSH_API_KEY"] == "***REDACTED***"

    def test_masks_nested_dicts(self):
        result = mask_sensitive_data()(
            None, "info", {"metadata": {"authorization": "Bearer x", "source": "signup"}}
        )
        assert result["metadata"] == {"authorization": "***REDACTED***", "source": "signup"}

    def test_none_values_left_alone(self):
        result = mask_sensitive_data()(None, "info", {"secret": None})
        assert result["secret"] is None

    def test_additional_patterns(self):
        processor = mask_sensitive_data(additional_patterns=frozenset({"signature"}))
        result = processor(None, "info", {"webhook_signature": "abc"})
        assert result["webhook_signature"] == "***REDACTED***"

    def test_custom_mask_value(self):
        result = mask_sensitive_data(mask_value="[hidden]")(None, "info", {"secret": "s"})
        assert result["secret"] == "[hidden]"

    def test_patterns_cover_credentials(self):
        assert {"password", "secret", "api_key", "authorization"} <= SENSITIVE_PATTERNS


@pytest.mark.unit
class TestTruncateLargeValues:
    """Test suite for truncate_large_values processor factory."""

    def test_truncates_long_strings(self):
        result = truncate_large_values(max_length=10)(None, "info", {"body": "x" * 25})
        assert result["body"] == "x" * 10 + "...[25 chars]"

    def test_short_strings_untouched(self):
        result = truncate_large_values(max_length=10)(None, "info", {"body": "short"})
        assert result["body"] == "short"

    def test_non_strings_untouched(self):
        result = truncate_large_values(max_length=1)(None, "info", {"count": 12345})
        assert result["count"] == 12345
