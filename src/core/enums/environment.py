"""Application environment types.

Defines the different runtime environments for the notification service.
Used by Settings to select logging renderers and delivery backends.

Environments:
- DEVELOPMENT: Local development, human-readable logs, stub providers
- TESTING: Automated test execution, JSON logs
- CI: Continuous integration environment
- PRODUCTION: Real delivery providers, JSON logs
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
