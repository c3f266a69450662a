"""Integration settings __init__ - exports all integration settings."""

from infrastructure.configuration.integrations.push import PushSettings
from infrastructure.configuration.integrations.smtp import SmtpSettings
from infrastructure.configuration.integrations.templates import (
    TemplateServiceSettings,
)
from infrastructure.configuration.integrations.users import UserServiceSettings

__all__ = [
    "PushSettings",
    "SmtpSettings",
    "TemplateServiceSettings",
    "UserServiceSettings",
]
