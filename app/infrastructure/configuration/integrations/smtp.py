"""SMTP integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class SmtpSettings(IntegrationSettings):
    """SMTP relay configuration for the email transport.

    Environment Variables:
        SMTP_HOST: SMTP server hostname
        SMTP_PORT: SMTP server port (default: 587)
        SMTP_USERNAME: Login username (optional)
        SMTP_PASSWORD: Login password (optional)
        SMTP_USE_TLS: Issue STARTTLS after connecting (default: True)
        SMTP_FROM_ADDRESS: Envelope and header sender address
        SMTP_TIMEOUT_SECONDS: Socket timeout (default: 30s)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        host = settings.smtp.SMTP_HOST
        ```
    """

    SMTP_HOST: str = Field(default="localhost", alias="SMTP_HOST")
    SMTP_PORT: int = Field(default=587, alias="SMTP_PORT")
    SMTP_USERNAME: str | None = Field(default=None, alias="SMTP_USERNAME")
    SMTP_PASSWORD: str | None = Field(default=None, alias="SMTP_PASSWORD")
    SMTP_USE_TLS: bool = Field(default=True, alias="SMTP_USE_TLS")
    SMTP_FROM_ADDRESS: str = Field(
        default="noreply@example.com", alias="SMTP_FROM_ADDRESS"
    )
    SMTP_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0, alias="SMTP_TIMEOUT_SECONDS")
