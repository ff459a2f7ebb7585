"""Application environment types.

Defines the different runtime environments for the facade.
Used by Settings to determine environment-specific behavior.

Environments:
- DEVELOPMENT: Local development, in-memory store, human-readable logs
- TESTING: Automated test execution
- CI: Continuous integration environment
- PRODUCTION: Deployed against the real store
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
