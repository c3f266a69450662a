"""Notification pipeline configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Integration settings
from infrastructure.configuration.integrations import (
    PushSettings,
    SmtpSettings,
    TemplateServiceSettings,
    UserServiceSettings,
)

# Feature settings
from infrastructure.configuration.features import WorkerSettings

# Infrastructure settings
from infrastructure.configuration.infrastructure import (
    BrokerSettings,
    CircuitBreakerSettings,
    RetrySettings,
    ServerSettings,
    StoreSettings,
)


SECTIONS = {
    "users": UserServiceSettings,
    "templates": TemplateServiceSettings,
    "smtp": SmtpSettings,
    "push": PushSettings,
    "worker": WorkerSettings,
    "broker": BrokerSettings,
    "store": StoreSettings,
    "retry": RetrySettings,
    "circuit_breaker": CircuitBreakerSettings,
    "server": ServerSettings,
}


class Settings(BaseSettings):
    """Notification pipeline configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object.
    Settings are organized by concern:

    - **Integrations**: External collaborators (user service, template service,
      SMTP relay, push provider)
    - **Features**: Delivery worker configuration
    - **Infrastructure**: Broker, key-value store, retry, circuit breaker, server

    Environment Variables:
        PREFIX: Environment prefix for multi-tenant deployments
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        GIT_SHA: Git commit SHA for deployment tracking

    Example:
        ```python
        from infrastructure.configuration.settings import settings

        broker_url = settings.broker.url
        max_retries = settings.retry.max_retries

        if settings.is_production:
            # Production-specific logic...
        ```
    """

    # Application-level settings
    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    # Integration settings
    users: UserServiceSettings
    templates: TemplateServiceSettings
    smtp: SmtpSettings
    push: PushSettings

    # Feature settings
    worker: WorkerSettings

    # Infrastructure settings
    broker: BrokerSettings
    store: StoreSettings
    retry: RetrySettings
    circuit_breaker: CircuitBreakerSettings
    server: ServerSettings

    @property
    def is_production(self) -> bool:
        """True when running in production.

        An empty PREFIX means production; any prefix marks a
        development or test deployment.
        """
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        """Build every section from the environment unless passed explicitly.

        Example:
            Settings(broker=BrokerSettings(BROKER_URL="memory://"))
        """
        for name, section in SECTIONS.items():
            if name not in kwargs:
                kwargs[name] = section()
        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
