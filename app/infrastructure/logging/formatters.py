"""Structlog processors used by ``configure_logging``.

Every processor here is built by a factory so it can be parameterized and
tested in isolation:

- add_service_info(): service name, version and process role (api/worker)
- redact_recipients(): partial masking of email addresses and push tokens
- mask_sensitive_data(): full masking of credential-like keys, recursively
- truncate_large_values(): bound rendered bodies and provider payloads

Usage:
    from infrastructure.logging.formatters import redact_recipients

    processor = redact_recipients()
    processor(None, "info", {"recipient": "ada@example.com"})
    # {"recipient": "a***@example.com"}
"""

from typing import Any, Callable

EventDict = dict[str, Any]
Processor = Callable[[Any, str, EventDict], EventDict]

# Keys whose values are credentials and are replaced entirely
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "api_key",
        "apikey",
        "authorization",
        "credential",
        "private_key",
        "cookie",
        "bearer",
    }
)

# Keys whose values identify a recipient and are partially masked
RECIPIENT_KEYS = frozenset({"recipient", "address", "email", "to", "push_token", "token"})


def add_service_info(service: str, version: str = "unknown", role: str = "api") -> Processor:
    """Create a processor tagging entries with service, version and role.

    ``role`` distinguishes the API process from worker processes that share
    the same log stream.
    """

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service)
        event_dict.setdefault("version", version)
        event_dict.setdefault("role", role)
        return event_dict

    return processor


def _mask_recipient(value: str) -> str:
    if "@" in value:
        local, _, domain = value.partition("@")
        return f"{local[:1]}***@{domain}"
    if len(value) <= 8:
        return "***"
    return f"{value[:4]}...{value[-4:]}"


def redact_recipients(keys: frozenset[str] = RECIPIENT_KEYS) -> Processor:
    """Create a processor that partially masks recipient addresses.

    Email addresses keep their first character and domain; push tokens keep
    their first and last four characters, enough to correlate with provider
    logs.
    """

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in event_dict.items():
            if key.lower() in keys and isinstance(value, str) and value:
                event_dict[key] = _mask_recipient(value)
        return event_dict

    return processor


def mask_sensitive_data(
    mask_value: str = "***REDACTED***",
    additional_patterns: frozenset[str] | None = None,
) -> Processor:
    """Create a processor that masks credential-like values.

    A key is sensitive when it contains one of the patterns
    (case-insensitive). Nested dicts, such as notification ``metadata``,
    are masked too.

    Example:
        processor = mask_sensitive_data(additional_patterns=frozenset({"signature"}))
    """
    patterns = SENSITIVE_PATTERNS | (additional_patterns or frozenset())

    def mask(data: dict[str, Any]) -> dict[str, Any]:
        masked: dict[str, Any] = {}
        for key, value in data.items():
            if value is not None and any(p in str(key).lower() for p in patterns):
                masked[key] = mask_value
            elif isinstance(value, dict):
                masked[key] = mask(value)
            else:
                masked[key] = value
        return masked

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        return mask(event_dict)

    return processor


def truncate_large_values(max_length: int = 500) -> Processor:
    """Create a processor that cuts string values longer than ``max_length``."""

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in event_dict.items():
            if isinstance(value, str) and len(value) > max_length:
                event_dict[key] = f"{value[:max_length]}...[{len(value)} chars]"
        return event_dict

    return processor
