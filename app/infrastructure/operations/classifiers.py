"""Error classifiers for collaborator exceptions.

Converts third-party exceptions (requests, smtplib, jinja2) raised by the
delivery collaborators into standardized OperationResult objects, so the
pipeline only ever reasons about a closed set of statuses.

Key Functions:
- classify_http_error(): requests exceptions -> OperationResult
- classify_smtp_error(): smtplib exceptions -> OperationResult
- classify_template_error(): jinja2 exceptions -> OperationResult

Usage:
    from infrastructure.operations.classifiers import classify_http_error

    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        return classify_http_error(exc)
"""

import smtplib
from typing import Optional

import requests
from jinja2 import TemplateError, TemplateSyntaxError, UndefinedError

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus


def _retry_after(response: Optional[requests.Response], default: int = 60) -> int:
    if response is None:
        return default
    header_value = response.headers.get("Retry-After")
    if not header_value:
        return default
    try:
        return int(header_value)
    except (ValueError, TypeError):
        return default


def classify_http_error(exc: Exception) -> OperationResult:
    """Classify HTTP client errors into OperationResult.

    Status Code Mapping:
    - 429: Rate limiting -> TRANSIENT_ERROR with retry_after
    - 401/403: Credentials rejected -> PERMANENT_ERROR
    - 404: Not found -> NOT_FOUND
    - 5xx: Server error -> TRANSIENT_ERROR
    - Other 4xx: Rejected request -> PERMANENT_ERROR
    - Timeouts and connection errors -> TRANSIENT_ERROR

    Args:
        exc: Exception raised by ``requests`` (or any other exception).

    Returns:
        OperationResult with appropriate status, message, error_code, and
        retry_after (if applicable)
    """
    if isinstance(exc, requests.Timeout):
        return OperationResult.transient_error(
            f"HTTP request timed out: {exc}",
            error_code="TIMEOUT",
        )

    if not isinstance(exc, requests.HTTPError):
        # Connection refused, DNS failure, etc.
        return OperationResult.transient_error(
            f"Connection error: {type(exc).__name__}: {str(exc)}",
            error_code="CONNECTION_ERROR",
        )

    response = exc.response
    status_code: Optional[int] = response.status_code if response is not None else None

    if status_code == 429:
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            "HTTP API rate limited",
            error_code="RATE_LIMITED",
            retry_after=_retry_after(response),
        )

    if status_code in (401, 403):
        return OperationResult.permanent_error(
            f"HTTP API rejected credentials ({status_code})",
            error_code="UNAUTHORIZED",
        )

    if status_code == 404:
        return OperationResult.not_found("HTTP resource not found")

    if status_code and 500 <= status_code < 600:
        return OperationResult.transient_error(
            f"HTTP API server error ({status_code})",
            error_code="SERVER_ERROR",
        )

    return OperationResult.permanent_error(
        f"HTTP API client error ({status_code}): {str(exc)}",
        error_code="HTTP_ERROR",
    )


def classify_smtp_error(exc: Exception) -> OperationResult:
    """Classify SMTP errors into OperationResult.

    - Recipient or sender refused, 5xx response codes -> PERMANENT_ERROR
    - Authentication failure -> PERMANENT_ERROR
    - Disconnects, 4xx response codes, socket errors -> TRANSIENT_ERROR
    """
    if isinstance(exc, (smtplib.SMTPRecipientsRefused, smtplib.SMTPSenderRefused)):
        return OperationResult.permanent_error(
            f"SMTP server refused the message: {exc}",
            error_code="SMTP_REFUSED",
        )

    if isinstance(exc, smtplib.SMTPAuthenticationError):
        return OperationResult.permanent_error(
            "SMTP authentication failed",
            error_code="UNAUTHORIZED",
        )

    if isinstance(exc, smtplib.SMTPResponseException) and exc.smtp_code >= 500:
        return OperationResult.permanent_error(
            f"SMTP error ({exc.smtp_code}): {exc.smtp_error!r}",
            error_code="SMTP_ERROR",
        )

    return OperationResult.transient_error(
        f"SMTP delivery error: {type(exc).__name__}: {str(exc)}",
        error_code="SMTP_UNAVAILABLE",
    )


def classify_template_error(exc: Exception) -> OperationResult:
    """Classify template rendering errors into OperationResult.

    Syntax errors and undefined variables are permanent for a given
    template/variables pair; anything else is a generic render error.
    """
    if isinstance(exc, TemplateSyntaxError):
        return OperationResult.permanent_error(
            f"Template syntax error at line {exc.lineno}: {exc.message}",
            error_code="TEMPLATE_SYNTAX_ERROR",
        )

    if isinstance(exc, UndefinedError):
        return OperationResult.permanent_error(
            f"Template variable missing: {exc.message}",
            error_code="TEMPLATE_VARIABLE_MISSING",
        )

    if isinstance(exc, TemplateError):
        return OperationResult.permanent_error(
            f"Template render error: {exc}",
            error_code="RENDER_ERROR",
        )

    return OperationResult.permanent_error(
        f"Template render error: {type(exc).__name__}: {str(exc)}",
        error_code="RENDER_ERROR",
    )
