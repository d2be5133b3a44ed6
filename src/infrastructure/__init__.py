"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- In-process event bus and lifecycle listeners
- Bounded in-memory cache
- Redis Streams broker
- Delivery providers (SendGrid, Twilio, logging stubs)

Structure:
- cache/: MemoryCache and notification cache helpers
- events/: Event bus, listener registry, retrying listeners
- logging/: structlog console adapter
- messaging/: Durable stream broker
- notifications/: Email and SMS providers

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
