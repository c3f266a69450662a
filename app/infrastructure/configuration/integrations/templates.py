"""Template service integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class TemplateServiceSettings(IntegrationSettings):
    """Template service API configuration, used to fetch templates for rendering.

    Environment Variables:
        TEMPLATE_SERVICE_URL: Base URL of the template service
        TEMPLATE_SERVICE_TIMEOUT_SECONDS: HTTP timeout for template fetches (default: 10s)
    """

    TEMPLATE_SERVICE_URL: str = Field(
        default="http://localhost:8002", alias="TEMPLATE_SERVICE_URL"
    )
    TEMPLATE_SERVICE_TIMEOUT_SECONDS: float = Field(
        default=10.0, gt=0, alias="TEMPLATE_SERVICE_TIMEOUT_SECONDS"
    )
