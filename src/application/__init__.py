"""Application layer - Use cases and orchestration.

Structure:
- services/: notification dispatch, business event emission and processing
- consumers/: handlers attached to durable streams

Dependencies:
- Depends on the domain layer (events, protocols, value objects)
- Infrastructure adapters are injected by the container
"""
