"""Store operation planner.

Validates a rendered request (native DynamoDB JSON request shape) and turns
it into a StoreOperationDescriptor. Only the fixed shapes below are accepted;
anything else is a PlanningError, never a best-effort guess.

Recognised encodings:
    Point lookup:  {"TableName", "Key": {pk: {"S"}, sk: {"S"}}}
    Range query:   {"TableName", "IndexName"?, "KeyConditionExpression",
                    "ExpressionAttributeValues", "ExpressionAttributeNames"?,
                    "ScanIndexForward"?, "ExclusiveStartKey"?, "Limit"?}
    Batch lookup:  {"RequestItems": {table: {"Keys": [{pk, sk}, ...]}}}

Key conditions (exactly one of):
    pk = :v AND begins_with(sk, :p)     prefix range, base table only
    pk = :v AND idx_sk > :t             secondary-index range

Usage:
    planner = StoreOperationPlanner(schema)
    match planner.plan(rendered):
        case Success(value=descriptor): ...
        case Failure(error=error): ...
"""

import json
import re
from typing import Any

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.enums import OperationKind, ScanDirection
from src.domain.errors import PlanningError
from src.domain.value_objects import (
    ExactKey,
    GreaterThanCondition,
    KeySet,
    PrefixCondition,
    StoreKey,
    StoreOperationDescriptor,
    TableSchema,
)

MAX_BATCH_KEYS = 100

_KEY_CONDITION = re.compile(
    r"""^\s*(?P<pk>\#?\w+)\s*=\s*(?P<pk_value>:\w+)\s+AND\s+
    (?:
        begins_with\s*\(\s*(?P<sk>\#?\w+)\s*,\s*(?P<prefix>:\w+)\s*\)
      | (?P<gt_attr>\#?\w+)\s*>\s*(?P<threshold>:\w+)
    )\s*$""",
    re.VERBOSE | re.IGNORECASE,
)
_RANGE_ONLY_FIELDS = ("IndexName", "ScanIndexForward", "ExclusiveStartKey", "Limit")


class _Rejected(Exception):
    """Internal signal; converted to Failure(PlanningError) by ``plan``."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


def _string_attribute(value: Any, label: str) -> str:
    """Unwrap ``{"S": "..."}``; empty or non-string values are rejected."""
    if not isinstance(value, dict) or set(value) != {"S"}:
        raise _Rejected(ErrorCode.PLAN_KEY_MISSING, f"{label} must be a string attribute {{\"S\": ...}}")
    text = value["S"]
    if not isinstance(text, str) or not text:
        raise _Rejected(ErrorCode.PLAN_KEY_MISSING, f"{label} is missing or empty")
    return text


class StoreOperationPlanner:
    """Turns rendered request text into a validated descriptor.

    Stateless apart from the table schema; safe to share across requests.
    """

    def __init__(self, schema: TableSchema) -> None:
        self._schema = schema

    @property
    def schema(self) -> TableSchema:
        return self._schema

    def plan(self, rendered: str) -> Result[StoreOperationDescriptor, PlanningError]:
        """Parse and validate one rendered request.

        Args:
            rendered: Output of a route's request template.

        Returns:
            Success(StoreOperationDescriptor): Validated operation.
            Failure(PlanningError): Not JSON, unrecognised shape, schema
                mismatch, missing/empty key, bad cursor or batch.
        """
        try:
            request = json.loads(rendered)
        except json.JSONDecodeError as e:
            return Failure(
                error=PlanningError(
                    code=ErrorCode.PLAN_ENCODING_INVALID,
                    message=f"Rendered request is not JSON: {e.msg} at position {e.pos}",
                )
            )
        try:
            return Success(value=self._plan(request))
        except _Rejected as e:
            return Failure(error=PlanningError(code=e.code, message=e.message))
        except ValueError as e:
            # Descriptor invariant violated by an otherwise well-formed request.
            return Failure(error=PlanningError(code=ErrorCode.PLAN_KEY_MISMATCH, message=str(e)))

    def _plan(self, request: Any) -> StoreOperationDescriptor:
        if not isinstance(request, dict):
            raise _Rejected(ErrorCode.PLAN_ENCODING_INVALID, "Rendered request must be a JSON object")
        shapes = [name for name in ("Key", "KeyConditionExpression", "RequestItems") if name in request]
        if len(shapes) != 1:
            raise _Rejected(
                ErrorCode.PLAN_SHAPE_UNRECOGNIZED,
                "Request must contain exactly one of Key, KeyConditionExpression, RequestItems",
            )
        match shapes[0]:
            case "Key":
                return self._point(request)
            case "KeyConditionExpression":
                return self._range(request)
            case _:
                return self._batch(request)

    def _check_table(self, table: Any) -> str:
        if table != self._schema.table_name:
            raise _Rejected(
                ErrorCode.PLAN_KEY_MISMATCH,
                f"Unknown table {table!r} (expected {self._schema.table_name!r})",
            )
        return table

    def _primary_key(self, key: Any, label: str) -> StoreKey:
        """Validate ``{pk: {"S"}, sk: {"S"}}`` against the schema."""
        expected = {self._schema.partition_key, self._schema.sort_key}
        if not isinstance(key, dict):
            raise _Rejected(ErrorCode.PLAN_KEY_MISSING, f"{label} must be an object")
        if set(key) != expected:
            missing = expected - set(key)
            if missing and not (set(key) - expected):
                raise _Rejected(ErrorCode.PLAN_KEY_MISSING, f"{label} is missing {sorted(missing)}")
            raise _Rejected(
                ErrorCode.PLAN_KEY_MISMATCH,
                f"{label} attributes {sorted(key)} do not match key schema {sorted(expected)}",
            )
        return StoreKey(
            partition=_string_attribute(key[self._schema.partition_key], f"{label}.{self._schema.partition_key}"),
            sort=_string_attribute(key[self._schema.sort_key], f"{label}.{self._schema.sort_key}"),
        )

    def _point(self, request: dict[str, Any]) -> StoreOperationDescriptor:
        table = self._check_table(request.get("TableName"))
        stray = [name for name in _RANGE_ONLY_FIELDS if name in request]
        if stray:
            raise _Rejected(ErrorCode.PLAN_SHAPE_UNRECOGNIZED, f"Point lookup does not take {stray}")
        key = self._primary_key(request["Key"], "Key")
        return StoreOperationDescriptor(
            kind=OperationKind.POINT_GET,
            table=table,
            key_predicate=ExactKey(partition=key.partition, sort=key.sort),
        )

    def _range(self, request: dict[str, Any]) -> StoreOperationDescriptor:
        table = self._check_table(request.get("TableName"))
        expression = request["KeyConditionExpression"]
        match = _KEY_CONDITION.match(expression) if isinstance(expression, str) else None
        if match is None:
            raise _Rejected(
                ErrorCode.PLAN_SHAPE_UNRECOGNIZED,
                f"Unsupported KeyConditionExpression: {expression!r}",
            )
        names = request.get("ExpressionAttributeNames") or {}
        values = request.get("ExpressionAttributeValues") or {}
        if not isinstance(names, dict) or not isinstance(values, dict):
            raise _Rejected(ErrorCode.PLAN_ENCODING_INVALID, "Expression attribute maps must be objects")

        def name(token: str) -> str:
            if not token.startswith("#"):
                return token
            if token not in names:
                raise _Rejected(ErrorCode.PLAN_KEY_MISMATCH, f"Undefined attribute name {token}")
            return names[token]

        def value(token: str) -> str:
            if token not in values:
                raise _Rejected(ErrorCode.PLAN_KEY_MISSING, f"Undefined attribute value {token}")
            return _string_attribute(values[token], token)

        if name(match["pk"]) != self._schema.partition_key:
            raise _Rejected(
                ErrorCode.PLAN_KEY_MISMATCH,
                f"Key condition must test partition key {self._schema.partition_key!r}",
            )
        partition = value(match["pk_value"])

        index = request.get("IndexName")
        if index is not None and (not isinstance(index, str) or self._schema.sort_attribute(index) is None):
            raise _Rejected(ErrorCode.PLAN_KEY_MISMATCH, f"Unknown index {index!r}")

        direction = request.get("ScanIndexForward", True)
        if not isinstance(direction, bool):
            raise _Rejected(ErrorCode.PLAN_ENCODING_INVALID, "ScanIndexForward must be a boolean")
        scan_direction = ScanDirection.FORWARD if direction else ScanDirection.REVERSE

        limit = request.get("Limit")
        if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0):
            raise _Rejected(ErrorCode.PLAN_ENCODING_INVALID, f"Limit must be a positive integer, got {limit!r}")

        continuation = None
        if request.get("ExclusiveStartKey") is not None:
            if index is not None:
                raise _Rejected(
                    ErrorCode.PLAN_SHAPE_UNRECOGNIZED,
                    "Index queries page by threshold; ExclusiveStartKey is not accepted",
                )
            continuation = self._primary_key(request["ExclusiveStartKey"], "ExclusiveStartKey")
            if continuation.partition != partition:
                raise _Rejected(
                    ErrorCode.PLAN_KEY_MISMATCH,
                    "ExclusiveStartKey partition does not match the key condition",
                )

        if match["prefix"] is not None:
            if index is not None:
                raise _Rejected(ErrorCode.PLAN_SHAPE_UNRECOGNIZED, "Prefix queries run on the base table only")
            if name(match["sk"]) != self._schema.sort_key:
                raise _Rejected(
                    ErrorCode.PLAN_KEY_MISMATCH,
                    f"begins_with must test sort key {self._schema.sort_key!r}",
                )
            predicate: PrefixCondition | GreaterThanCondition = PrefixCondition(
                partition=partition, prefix=value(match["prefix"])
            )
            if continuation is not None and not continuation.sort.startswith(predicate.prefix):
                raise _Rejected(
                    ErrorCode.PLAN_START_KEY_OUT_OF_RANGE,
                    f"ExclusiveStartKey {continuation.sort!r} is outside prefix {predicate.prefix!r}",
                )
        else:
            if index is None:
                raise _Rejected(ErrorCode.PLAN_SHAPE_UNRECOGNIZED, "Threshold queries require IndexName")
            attribute = name(match["gt_attr"])
            if attribute != self._schema.sort_attribute(index):
                raise _Rejected(
                    ErrorCode.PLAN_KEY_MISMATCH,
                    f"Index {index!r} is sorted by {self._schema.sort_attribute(index)!r}, not {attribute!r}",
                )
            if scan_direction is ScanDirection.REVERSE:
                raise _Rejected(ErrorCode.PLAN_SHAPE_UNRECOGNIZED, "Index queries are forward only")
            predicate = GreaterThanCondition(
                partition=partition, attribute=attribute, threshold=value(match["threshold"])
            )

        return StoreOperationDescriptor(
            kind=OperationKind.RANGE_QUERY,
            table=table,
            key_predicate=predicate,
            index=index,
            scan_direction=scan_direction,
            continuation_key=continuation,
            limit=limit,
        )

    def _batch(self, request: dict[str, Any]) -> StoreOperationDescriptor:
        items = request["RequestItems"]
        if not isinstance(items, dict) or len(items) != 1:
            raise _Rejected(ErrorCode.PLAN_BATCH_INVALID, "RequestItems must name exactly one table")
        (table, entry), = items.items()
        self._check_table(table)
        keys = entry.get("Keys") if isinstance(entry, dict) else None
        if not isinstance(keys, list) or not keys:
            raise _Rejected(ErrorCode.PLAN_BATCH_INVALID, "Batch lookup needs at least one key")
        if len(keys) > MAX_BATCH_KEYS:
            raise _Rejected(
                ErrorCode.PLAN_BATCH_INVALID,
                f"Batch lookup takes at most {MAX_BATCH_KEYS} keys, got {len(keys)}",
            )
        parsed = [self._primary_key(key, f"Keys[{i}]") for i, key in enumerate(keys)]
        partitions = {key.partition for key in parsed}
        if len(partitions) != 1:
            raise _Rejected(ErrorCode.PLAN_BATCH_INVALID, "Batch keys must share one partition")
        sorts = tuple(key.sort for key in parsed)
        if len(set(sorts)) != len(sorts):
            raise _Rejected(ErrorCode.PLAN_BATCH_INVALID, "Batch lookup contains duplicate keys")
        return StoreOperationDescriptor(
            kind=OperationKind.BATCH_GET,
            table=table,
            key_predicate=KeySet(partition=partitions.pop(), sorts=sorts),
        )
