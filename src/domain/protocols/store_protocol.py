"""Store protocol (port) for executing store operations.

The backing key-value store is an external collaborator. Adapters translate a
StoreOperationDescriptor into a native request, run it and hand back the
store's native, attribute-typed result unchanged:

    POINT_GET   -> {"Item": {...}} or {} when no item matches
    RANGE_QUERY -> {"Items": [...], "Count": n, "ScannedCount": n,
                    "LastEvaluatedKey": {...}?}
    BATCH_GET   -> {"Responses": {table: [...]}, "UnprocessedKeys": {...}}

Attribute values keep their type tags ({"S": "..."}, {"N": "1"}, ...).

Implementations:
    - InMemoryStore: Dict-backed store for local development and tests
    - DynamoDbStore: boto3 DynamoDB client
"""

from typing import Any, Protocol

from src.core.result import Result
from src.domain.errors import StoreError
from src.domain.value_objects.store_operation import StoreOperationDescriptor


class StoreProtocol(Protocol):
    """Executes one store operation."""

    async def execute(
        self, descriptor: StoreOperationDescriptor
    ) -> Result[dict[str, Any], StoreError]:
        """Run the operation and return the native result.

        Args:
            descriptor: Validated operation.

        Returns:
            Result[dict[str, Any], StoreError]:
                - Success(native result); a point lookup without a match is a
                  Success with no "Item" key, exactly as the store reports it
                - Failure(StoreTransientError) on timeout/throttling/transport
                - Failure(StoreRequestError) when the store rejects the request

        Note:
            Implementations must not retry internally.
        """
        ...
