"""Shared pytest fixtures.

Provides:
1. The default table schema and a small seeded in-memory store
2. A usage plan with tiny limits so throttling is easy to trigger
3. A controllable clock and a mock logger
4. The facade and sharing route registries
5. A factory assembling a FacadeGateway from real collaborators
"""

from unittest.mock import MagicMock

import pytest

from src.application.planning import StoreOperationPlanner
from src.application.routes import RouteRegistry, build_catalog, build_share_route
from src.application.services import AccessGovernor, FacadeGateway, load_share_template
from src.domain.enums import QuotaPeriod
from src.domain.value_objects import QuotaSettings, TableSchema, ThrottleSettings, UsagePlan
from src.infrastructure.credentials.settings_credential_repository import (
    SettingsCredentialRepository,
)
from src.infrastructure.store.in_memory_store import InMemoryStore
from src.infrastructure.usage.in_memory_usage_storage import InMemoryUsageStorage

PARTITION = "bible|en|webp"
TEST_API_KEY = "test-key-0123456789"
COLLECTION_QUERY = {"document": "bible", "language": "en", "translation": "webp"}

SEED_ITEMS = [
    {
        "collection": PARTITION,
        "id": "001-001-001",
        "reference": "Genesis 1:1",
        "feedKey": "2024-01-01",
        "data": '[{"t": "In the beginning"}, {"t": "God created"}]',
    },
    {
        "collection": PARTITION,
        "id": "001-001-002",
        "reference": "Genesis 1:2",
        "feedKey": "2024-01-03",
        "data": '[{"t": "The earth was formless"}]',
    },
    {
        "collection": PARTITION,
        "id": "001-001-003",
        "reference": "Genesis 1:3",
        "feedKey": "2024-01-02",
        "data": '[{"t": "Let there be light"}]',
    },
    {
        "collection": PARTITION,
        "id": "001-002-001",
        "reference": "Genesis 2:1",
        "data": '[{"t": "Thus the heavens"}]',
    },
    {
        "collection": "bible|es|rvr",
        "id": "001-001-001",
        "reference": "Génesis 1:1",
        "data": '[{"t": "En el principio"}]',
    },
]


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, now: float = 1_717_200_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def table_schema() -> TableSchema:
    return TableSchema(
        table_name="Texts",
        partition_key="collection",
        sort_key="id",
        indexes={"feed": "feedKey"},
    )


@pytest.fixture
def usage_plan() -> UsagePlan:
    """Burst 2, one token per second, 5 requests per month."""
    return UsagePlan(
        name="test",
        throttle=ThrottleSettings(burst_capacity=2, rate_per_second=1.0),
        quota=QuotaSettings(limit=5, period=QuotaPeriod.MONTH),
    )


@pytest.fixture
def store(table_schema: TableSchema) -> InMemoryStore:
    store = InMemoryStore(table_schema)
    store.put_items(SEED_ITEMS)
    return store


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def registry(table_schema: TableSchema) -> RouteRegistry:
    registry = RouteRegistry()
    for route in build_catalog(table_schema):
        registry.register(route)
    registry.freeze()
    return registry


@pytest.fixture
def share_registry(table_schema: TableSchema) -> RouteRegistry:
    """Registry with the Share route redirecting to a test viewer."""
    registry = RouteRegistry()
    registry.register(
        build_share_route(
            table_schema,
            page_template=load_share_template(),
            viewer_base_url="https://viewer.example/",
        )
    )
    registry.freeze()
    return registry


@pytest.fixture
def credentials(usage_plan: UsagePlan) -> SettingsCredentialRepository:
    return SettingsCredentialRepository(
        [("tester", TEST_API_KEY), ("retired", "retired-key")],
        usage_plan,
        disabled_ids=["retired"],
    )


@pytest.fixture
def usage_storage() -> InMemoryUsageStorage:
    return InMemoryUsageStorage()


@pytest.fixture
def make_gateway(
    registry, table_schema, store, credentials, usage_storage, clock, mock_logger
):
    """Build a FacadeGateway; keyword overrides replace single collaborators."""

    def _make(**overrides) -> FacadeGateway:
        governor = overrides.pop(
            "governor",
            AccessGovernor(
                credentials=credentials,
                storage=usage_storage,
                logger=mock_logger,
                clock=clock,
            ),
        )
        options = {
            "registry": registry,
            "governor": governor,
            "planner": StoreOperationPlanner(table_schema),
            "store": store,
            "logger": mock_logger,
            "timeout_seconds": 1.0,
            "cors_origins": ["*"],
        }
        options.update(overrides)
        return FacadeGateway(**options)

    return _make
