"""Base classes for the settings groups.

Every group reads the process environment and ``.env`` with exact-case
variable names and ignores variables owned by other groups. Fields declare
their environment variable as an alias, so overrides passed as keyword
arguments use the same names:

    BrokerSettings(BROKER_URL="memory://")
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=True,
    extra="ignore",
)


class IntegrationSettings(BaseSettings):
    """Settings for an external service: user service, template service,
    SMTP relay, push provider."""

    model_config = _ENV_CONFIG


class FeatureSettings(BaseSettings):
    """Settings for a pipeline process role (the delivery worker)."""

    model_config = _ENV_CONFIG


class InfrastructureSettings(BaseSettings):
    """Settings for shared infrastructure: broker, key-value store, retry
    policy, circuit breakers, HTTP server."""

    model_config = _ENV_CONFIG
