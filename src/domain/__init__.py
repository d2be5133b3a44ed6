"""Domain layer - Pure business logic.

This layer contains the business and lifecycle events, value objects,
validators, the static trigger table and the protocols (ports). The domain
layer has NO dependencies on any framework or infrastructure.

Structure:
- enums/: Notification channels and categories
- events/: Business events, lifecycle events, trigger registry
- errors/: Provider error values
- protocols/: Ports implemented by infrastructure adapters
- validators/: Notification request validation
- value_objects/: Requests, triggers, stream messages
"""
