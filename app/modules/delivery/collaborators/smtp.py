"""Email transport over SMTP."""

import smtplib
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Callable, Optional, TYPE_CHECKING

import structlog

from infrastructure.operations import OperationResult, classify_smtp_error
from modules.delivery.collaborators.base import DeliveryTransport
from modules.delivery.models import Channel, RenderedMessage

if TYPE_CHECKING:
    from infrastructure.configuration.integrations.smtp import SmtpSettings

logger = structlog.get_logger()


class SmtpEmailTransport(DeliveryTransport):
    """Sends one message per SMTP session.

    Args:
        settings: SMTP relay settings.
        smtp_factory: Callable returning an ``smtplib.SMTP``-like client,
            injectable for tests.
    """

    def __init__(
        self,
        settings: "SmtpSettings",
        smtp_factory: Optional[Callable[..., smtplib.SMTP]] = None,
    ):
        self._settings = settings
        self._smtp_factory = smtp_factory or smtplib.SMTP

    @property
    def channel(self) -> Channel:
        return Channel.EMAIL

    def deliver(self, address: str, rendered: RenderedMessage) -> OperationResult:
        message = EmailMessage()
        message["From"] = self._settings.SMTP_FROM_ADDRESS
        message["To"] = address
        message["Subject"] = rendered.subject or ""
        message_id = make_msgid()
        message["Message-ID"] = message_id
        message.set_content(rendered.body)

        try:
            with self._smtp_factory(
                self._settings.SMTP_HOST,
                self._settings.SMTP_PORT,
                timeout=self._settings.SMTP_TIMEOUT_SECONDS,
            ) as client:
                if self._settings.SMTP_USE_TLS:
                    client.starttls()
                if self._settings.SMTP_USERNAME:
                    client.login(
                        self._settings.SMTP_USERNAME, self._settings.SMTP_PASSWORD or ""
                    )
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            result = classify_smtp_error(e)
            logger.warning("email_delivery_failed", error=result.message)
            return result

        logger.info("email_delivered", message_id=message_id)
        return OperationResult.success(data={"delivery_id": message_id})

    def health_check(self) -> OperationResult:
        if not self._settings.SMTP_HOST:
            return OperationResult.unavailable(
                "SMTP host not configured", error_code="NOT_CONFIGURED"
            )
        return OperationResult.success(
            message="SMTP relay configured", data={"host": self._settings.SMTP_HOST}
        )
