"""Infrastructure dependency factories.

Application-scoped singletons for adapters:
- Logging (console, JSON outside development)
- Store (in-memory or DynamoDB)
- Usage storage (in-memory or Redis)
- Credentials (from configuration)

Backend selection lives here (composition root); nothing else reads the
backend settings.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import settings
from src.core.enums import Environment

if TYPE_CHECKING:
    from src.domain.protocols import (
        CredentialRepository,
        LoggerProtocol,
        StoreProtocol,
        UsageStorageProtocol,
    )
    from src.domain.value_objects import TableSchema, UsagePlan

PUBLIC_ACCESS_KEY_ID = "PublicAccess"


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    - development: ConsoleAdapter (human-readable)
    - everything else: ConsoleAdapter (JSON lines)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    use_json = settings.environment != Environment.DEVELOPMENT
    return ConsoleAdapter(use_json=use_json, log_level=settings.log_level)


@lru_cache()
def get_table_schema() -> "TableSchema":
    """Key layout of the backing table, from settings."""
    from src.domain.value_objects import TableSchema

    return TableSchema(
        table_name=settings.table_name,
        partition_key=settings.partition_key_name,
        sort_key=settings.sort_key_name,
        indexes={settings.feed_index_name: settings.feed_index_sort_key_name},
    )


@lru_cache()
def get_store() -> "StoreProtocol":
    """Get store singleton (app-scoped).

    Returns correct adapter based on STORE_BACKEND:
        - 'memory': InMemoryStore, seeded from SEED_DATA_PATH when set
        - 'dynamodb': DynamoDbStore (boto3)

    Raises:
        ValueError: If STORE_BACKEND is unsupported.
    """
    backend = settings.store_backend
    if backend == "dynamodb":
        from src.infrastructure.store.dynamodb_store import DynamoDbStore

        return DynamoDbStore(
            schema=get_table_schema(),
            region=settings.aws_region,
            endpoint_url=settings.dynamodb_endpoint_url,
            timeout_seconds=settings.store_timeout_seconds,
        )
    if backend == "memory":
        from src.infrastructure.store.in_memory_store import InMemoryStore

        store = InMemoryStore(get_table_schema())
        if settings.seed_data_path:
            count = store.load_seed_file(settings.seed_data_path)
            get_logger().info("store_seeded", path=settings.seed_data_path, items=count)
        return store
    raise ValueError(f"Unsupported STORE_BACKEND: {backend!r}")


@lru_cache()
def get_usage_storage() -> "UsageStorageProtocol":
    """Get usage storage singleton (app-scoped).

    Returns correct adapter based on USAGE_BACKEND:
        - 'memory': InMemoryUsageStorage (single process)
        - 'redis': RedisUsageStorage (atomic Lua, shared across workers)

    Raises:
        ValueError: If USAGE_BACKEND is unsupported.
    """
    backend = settings.usage_backend
    if backend == "redis":
        from redis.asyncio import ConnectionPool, Redis

        from src.infrastructure.usage.redis_usage_storage import RedisUsageStorage

        pool = ConnectionPool.from_url(
            settings.redis_url,
            max_connections=20,
            decode_responses=False,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        return RedisUsageStorage(redis_client=Redis(connection_pool=pool))
    if backend == "memory":
        from src.infrastructure.usage.in_memory_usage_storage import InMemoryUsageStorage

        return InMemoryUsageStorage()
    raise ValueError(f"Unsupported USAGE_BACKEND: {backend!r}")


@lru_cache()
def get_usage_plan() -> "UsagePlan":
    """Usage plan shared by every provisioned key."""
    from src.domain.enums import QuotaPeriod
    from src.domain.value_objects import QuotaSettings, ThrottleSettings, UsagePlan

    return UsagePlan(
        name="default",
        throttle=ThrottleSettings(
            burst_capacity=settings.throttle_burst_limit,
            rate_per_second=settings.throttle_rate_limit,
        ),
        quota=QuotaSettings(limit=settings.monthly_request_limit, period=QuotaPeriod.MONTH),
    )


@lru_cache()
def get_credential_repository() -> "CredentialRepository":
    """Get credential repository singleton.

    Provisioned keys come from API_KEYS. The sharing facade's key
    (SHARE_API_KEY) is added as ``PublicAccess`` unless that key is already
    listed. An API_KEYS entry that already uses the ``PublicAccess`` id wins.
    """
    from src.infrastructure.credentials.settings_credential_repository import (
        SettingsCredentialRepository,
    )

    pairs = settings.api_key_pairs
    share_key = settings.share_api_key
    if share_key and share_key not in {raw for _, raw in pairs}:
        if PUBLIC_ACCESS_KEY_ID in {key_id for key_id, _ in pairs}:
            get_logger().warning("share_api_key_ignored", credential_id=PUBLIC_ACCESS_KEY_ID)
        else:
            pairs.append((PUBLIC_ACCESS_KEY_ID, share_key))
    return SettingsCredentialRepository(pairs, get_usage_plan())
