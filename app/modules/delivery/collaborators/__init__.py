"""Collaborators called by the delivery pipeline and their default adapters."""

from modules.delivery.collaborators.base import (
    DeliveryTransport,
    RecipientResolver,
    Renderer,
)
from modules.delivery.collaborators.smtp import SmtpEmailTransport
from modules.delivery.collaborators.push import HttpPushTransport
from modules.delivery.collaborators.templates import (
    HttpTemplateRenderer,
    TemplateRenderer,
)
from modules.delivery.collaborators.users import HttpRecipientResolver

__all__ = [
    "DeliveryTransport",
    "RecipientResolver",
    "Renderer",
    "HttpRecipientResolver",
    "TemplateRenderer",
    "HttpTemplateRenderer",
    "SmtpEmailTransport",
    "HttpPushTransport",
]
