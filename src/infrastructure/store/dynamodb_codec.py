"""Descriptor <-> DynamoDB wire translation.

Builds the boto3 client call for a StoreOperationDescriptor, trims boto3
responses down to the native result shape, and maps botocore errors onto the
store error taxonomy.
"""

from typing import Any

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    ReadTimeoutError,
)

from src.core.enums import ErrorCode
from src.domain.enums import OperationKind, ScanDirection
from src.domain.errors import StoreError, StoreRequestError, StoreTransientError
from src.domain.value_objects import (
    ExactKey,
    GreaterThanCondition,
    KeySet,
    PrefixCondition,
    StoreKey,
    StoreOperationDescriptor,
    TableSchema,
)

# DynamoDB error codes that mean "try again later".
THROTTLING_CODES = frozenset(
    {
        "ProvisionedThroughputExceededException",
        "ThrottlingException",
        "RequestLimitExceeded",
    }
)
REJECTED_CODES = frozenset(
    {"ValidationException", "ResourceNotFoundException", "SerializationException"}
)


def _string(value: str) -> dict[str, str]:
    return {"S": value}


def primary_key(schema: TableSchema, key: StoreKey | ExactKey) -> dict[str, dict[str, str]]:
    """Native primary key of one item."""
    return {
        schema.partition_key: _string(key.partition),
        schema.sort_key: _string(key.sort),
    }


def build_request(
    descriptor: StoreOperationDescriptor, schema: TableSchema
) -> tuple[str, dict[str, Any]]:
    """Translate a descriptor into a boto3 DynamoDB client call.

    Returns:
        tuple[str, dict]: Client method name and its keyword arguments.
    """
    predicate = descriptor.key_predicate
    match descriptor.kind, predicate:
        case OperationKind.POINT_GET, ExactKey():
            return "get_item", {
                "TableName": descriptor.table,
                "Key": primary_key(schema, predicate),
            }
        case OperationKind.BATCH_GET, KeySet():
            keys = [primary_key(schema, key) for key in predicate.keys]
            return "batch_get_item", {"RequestItems": {descriptor.table: {"Keys": keys}}}
        case OperationKind.RANGE_QUERY, PrefixCondition():
            condition = "#pk = :pk AND begins_with(#sk, :prefix)"
            names = {"#pk": schema.partition_key, "#sk": schema.sort_key}
            values = {":pk": _string(predicate.partition), ":prefix": _string(predicate.prefix)}
        case OperationKind.RANGE_QUERY, GreaterThanCondition():
            condition = "#pk = :pk AND #sk > :threshold"
            names = {"#pk": schema.partition_key, "#sk": predicate.attribute}
            values = {":pk": _string(predicate.partition), ":threshold": _string(predicate.threshold)}
        case _:
            raise ValueError(f"Unsupported descriptor: {descriptor!r}")

    params: dict[str, Any] = {
        "TableName": descriptor.table,
        "KeyConditionExpression": condition,
        "ExpressionAttributeNames": names,
        "ExpressionAttributeValues": values,
        "ScanIndexForward": descriptor.scan_direction == ScanDirection.FORWARD,
    }
    if descriptor.index is not None:
        params["IndexName"] = descriptor.index
    if descriptor.continuation_key is not None:
        params["ExclusiveStartKey"] = primary_key(schema, descriptor.continuation_key)
    if descriptor.limit is not None:
        params["Limit"] = descriptor.limit
    return "query", params


def native_result(response: dict[str, Any]) -> dict[str, Any]:
    """Drop boto3 transport metadata, keeping the store's own result fields."""
    return {k: v for k, v in response.items() if k not in ("ResponseMetadata", "ConsumedCapacity")}


def map_client_error(exc: ClientError) -> StoreError:
    """Classify a DynamoDB error response."""
    code = exc.response.get("Error", {}).get("Code", "Unknown")
    message = exc.response.get("Error", {}).get("Message", str(exc))
    details = {"aws_error_code": code}
    if code in THROTTLING_CODES:
        return StoreTransientError(
            code=ErrorCode.STORE_THROTTLED,
            message=f"Store throttled the request: {message}",
            details=details,
        )
    if code in REJECTED_CODES:
        return StoreRequestError(
            code=ErrorCode.STORE_REQUEST_REJECTED,
            message=f"Store rejected the request: {message}",
            details=details,
        )
    return StoreTransientError(
        code=ErrorCode.STORE_UNAVAILABLE,
        message=f"Store unavailable: {message}",
        details=details,
    )


def map_transport_error(exc: BotoCoreError) -> StoreError:
    """Classify a botocore transport failure (no response from the store)."""
    is_timeout = isinstance(exc, ConnectTimeoutError | ReadTimeoutError)
    return StoreTransientError(
        code=ErrorCode.STORE_TIMEOUT if is_timeout else ErrorCode.STORE_UNAVAILABLE,
        message=f"Store transport failure: {exc}",
        is_timeout=is_timeout,
        details={"error_type": type(exc).__name__},
    )
