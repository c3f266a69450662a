"""User service integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class UserServiceSettings(IntegrationSettings):
    """User service API configuration, used to resolve recipients.

    Environment Variables:
        USER_SERVICE_URL: Base URL of the user service
        USER_SERVICE_TIMEOUT_SECONDS: HTTP timeout for lookups (default: 10s)
    """

    USER_SERVICE_URL: str = Field(
        default="http://localhost:8001", alias="USER_SERVICE_URL"
    )
    USER_SERVICE_TIMEOUT_SECONDS: float = Field(
        default=10.0, gt=0, alias="USER_SERVICE_TIMEOUT_SECONDS"
    )
