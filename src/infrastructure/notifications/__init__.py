"""Delivery provider adapters.

- SendGridEmailProvider: email over the SendGrid v3 API
- TwilioSmsProvider: SMS and phone verification over Twilio
- StubEmailProvider/StubSmsProvider: log-only providers for development
"""

from src.infrastructure.notifications.base_http_provider import BaseHTTPProvider
from src.infrastructure.notifications.sendgrid_provider import SendGridEmailProvider
from src.infrastructure.notifications.stub_providers import (
    StubEmailProvider,
    StubSmsProvider,
)
from src.infrastructure.notifications.twilio_provider import TwilioSmsProvider

__all__ = [
    "BaseHTTPProvider",
    "SendGridEmailProvider",
    "StubEmailProvider",
    "StubSmsProvider",
    "TwilioSmsProvider",
]
