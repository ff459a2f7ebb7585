"""
Configuration management using Pydantic Settings.

Type-safe, validated configuration loaded from environment variables. Every
setting has a development default so the facade starts against the in-memory
store with no environment at all.

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic

Usage:
    from src.core.config import settings

    table = settings.table_name
    if settings.is_development:
        # Dev-specific behavior
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.enums import Environment


class Settings(BaseSettings):
    """
    Main application settings (flat structure).

    Configuration precedence:
        1. Environment variables
        2. Default values

    Returns:
        Settings: Application configuration loaded from environment.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )

    # Core application settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, detailed errors)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Application metadata
    app_name: str = Field(
        default="Scroll Facade",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    api_base_url: str = Field(
        default="http://localhost:8000",
        description="Public base URL, used for problem-details type URIs",
    )

    # CORS configuration
    cors_origins: str = Field(
        default="*",
        description="Allowed CORS origins (comma-separated, '*' for any)",
    )

    # Store configuration
    store_backend: str = Field(
        default="memory",
        description="Store backend: 'memory' (local) or 'dynamodb'",
    )
    table_name: str = Field(
        default="Texts",
        description="Backing table name",
    )
    partition_key_name: str = Field(
        default="collection",
        description="Partition key attribute of the backing table",
    )
    sort_key_name: str = Field(
        default="id",
        description="Sort key attribute of the backing table",
    )
    feed_index_name: str = Field(
        default="feed",
        description="Local secondary index used by the Feed route",
    )
    feed_index_sort_key_name: str = Field(
        default="feedKey",
        description="Sort attribute of the feed index",
    )
    aws_region: str = Field(
        default="us-east-1",
        description="AWS region of the DynamoDB table",
    )
    dynamodb_endpoint_url: str | None = Field(
        default=None,
        description="Override DynamoDB endpoint (e.g., http://localhost:8001 for DynamoDB Local)",
    )
    store_timeout_seconds: float = Field(
        default=3.0,
        description="Upper bound on a single store call; exceeding it returns 504",
    )
    seed_data_path: str | None = Field(
        default=None,
        description="JSON file of items loaded into the in-memory store at startup",
    )

    # Usage plan (throttle + quota) configuration
    usage_backend: str = Field(
        default="memory",
        description="Usage state backend: 'memory' (single process) or 'redis'",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (usage_backend=redis only)",
    )
    throttle_burst_limit: int = Field(
        default=20,
        description="Token bucket capacity per API key",
    )
    throttle_rate_limit: float = Field(
        default=10.0,
        description="Sustained requests per second per API key",
    )
    monthly_request_limit: int = Field(
        default=100_000,
        description="Requests allowed per API key per calendar month",
    )
    api_keys: str = Field(
        default="",
        description="Provisioned API keys as comma-separated 'id:key' pairs",
    )

    # Sharing (unfurl) configuration
    share_api_key: str | None = Field(
        default=None,
        description="API key the sharing facade presents to the core routes",
    )
    viewer_base_url: str = Field(
        default="https://scrollbible.app",
        description="Canonical viewer the unfurl page redirects to",
    )
    share_document: str = Field(
        default="bible",
        description="Document bound by the unfurl route",
    )
    share_language: str = Field(
        default="en",
        description="Language bound by the unfurl route",
    )
    share_translation: str = Field(
        default="webp",
        description="Translation bound by the unfurl route",
    )

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("api_base_url", "viewer_base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """
        Remove trailing slashes from URLs.

        Args:
            v: URL string.

        Returns:
            str: URL without trailing slash.
        """
        return v.rstrip("/")

    @field_validator("store_backend", "usage_backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Normalise backend names to lowercase."""
        return v.strip().lower()

    @field_validator("throttle_burst_limit", "monthly_request_limit")
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        """
        Validate plan limits are positive.

        Raises:
            ValueError: If the limit is zero or negative.
        """
        if v <= 0:
            raise ValueError("usage plan limits must be positive")
        return v

    @field_validator("throttle_rate_limit", "store_timeout_seconds")
    @classmethod
    def validate_positive_float(cls, v: float) -> float:
        """Validate rates and timeouts are positive."""
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @property
    def cors_origin_list(self) -> list[str]:
        """
        Parse comma-separated CORS origins.

        Returns:
            list[str]: Origin URLs (may contain '*').
        """
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def api_key_pairs(self) -> list[tuple[str, str]]:
        """
        Parse provisioned API keys.

        Returns:
            list[tuple[str, str]]: (key_id, raw_key) pairs.

        Raises:
            ValueError: If an entry is not of the form 'id:key'.
        """
        pairs: list[tuple[str, str]] = []
        for entry in self.api_keys.split(","):
            entry = entry.strip()
            if not entry:
                continue
            key_id, sep, raw_key = entry.partition(":")
            if not sep or not key_id or not raw_key:
                raise ValueError(f"Malformed api_keys entry: {key_id or entry[:4]}...")
            pairs.append((key_id, raw_key))
        return pairs

    # Convenience properties for environment checks
    @property
    def is_development(self) -> bool:
        """True if environment is DEVELOPMENT."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """True if environment is TESTING."""
        return self.environment == Environment.TESTING

    @property
    def is_production(self) -> bool:
        """True if environment is PRODUCTION."""
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton.
    """
    return Settings()


# Module-level singleton
settings = get_settings()
