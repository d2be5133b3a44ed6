"""Domain protocols (ports).

Structural interfaces the domain depends on; infrastructure provides the
adapters and the container wires them.
"""

from src.domain.protocols.cache_protocol import CacheProtocol
from src.domain.protocols.event_bus_protocol import EventBusProtocol, EventHandler
from src.domain.protocols.listener_protocol import EventListenerProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.notification_provider_protocol import (
    NotificationProviderProtocol,
    VerificationProviderProtocol,
)
from src.domain.protocols.stream_broker_protocol import (
    StreamBrokerProtocol,
    StreamHandler,
)

__all__ = [
    "CacheProtocol",
    "EventBusProtocol",
    "EventHandler",
    "EventListenerProtocol",
    "LoggerProtocol",
    "NotificationProviderProtocol",
    "StreamBrokerProtocol",
    "StreamHandler",
    "VerificationProviderProtocol",
]
