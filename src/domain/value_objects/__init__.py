"""Domain value objects.

Immutable value objects that enforce their own invariants.
"""

from src.domain.value_objects.access_decision import AccessDecision
from src.domain.value_objects.store_operation import (
    ExactKey,
    GreaterThanCondition,
    KeyPredicate,
    KeySet,
    PrefixCondition,
    StoreKey,
    StoreOperationDescriptor,
)
from src.domain.value_objects.table_schema import TableSchema
from src.domain.value_objects.usage_plan import (
    QuotaSettings,
    ThrottleSettings,
    UsagePlan,
)
from src.domain.value_objects.usage_state import (
    UsageState,
    current_period_start,
    next_period_start,
)

__all__ = [
    "AccessDecision",
    "ExactKey",
    "GreaterThanCondition",
    "KeyPredicate",
    "KeySet",
    "PrefixCondition",
    "QuotaSettings",
    "StoreKey",
    "StoreOperationDescriptor",
    "TableSchema",
    "ThrottleSettings",
    "UsagePlan",
    "UsageState",
    "current_period_start",
    "next_period_start",
]
