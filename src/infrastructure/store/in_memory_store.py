"""In-memory store with DynamoDB query semantics.

Used for local development (optionally seeded from a JSON file) and tests.
Items are held in native attribute-typed form; plain Python values passed to
``put_item`` are converted with boto3's TypeSerializer.

Reproduced semantics:
    - Sort keys compare as strings (byte order for ASCII keys).
    - ``Limit`` stops the page; ``LastEvaluatedKey`` is present whenever the
      page was cut at the limit, even if nothing follows.
    - Secondary index queries skip items without the index sort attribute
      (sparse index) and order by (index attribute, sort key).
    - A point lookup with no match returns ``{}``.
    - Batch results come back in request order, missing keys omitted.
    - A start key outside the queried prefix is rejected, as DynamoDB does.
"""

import copy
import json
from collections.abc import Iterable, Mapping
from decimal import Decimal
from pathlib import Path
from typing import Any

from boto3.dynamodb.types import TypeSerializer

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.enums import OperationKind, ScanDirection
from src.domain.errors import StoreError, StoreRequestError
from src.domain.value_objects import (
    ExactKey,
    GreaterThanCondition,
    KeySet,
    PrefixCondition,
    StoreOperationDescriptor,
    TableSchema,
)

type NativeItem = dict[str, dict[str, Any]]

_serializer = TypeSerializer()


def _string_value(item: NativeItem, attribute: str) -> str | None:
    value = item.get(attribute)
    if isinstance(value, dict) and isinstance(value.get("S"), str):
        return value["S"]
    return None


class InMemoryStore:
    """Dict-backed store for one table.

    Args:
        schema: Key layout of the table.
    """

    def __init__(self, schema: TableSchema) -> None:
        self._schema = schema
        # partition -> sort key -> item
        self._partitions: dict[str, dict[str, NativeItem]] = {}

    def put_item(self, item: Mapping[str, Any]) -> None:
        """Insert or replace one item (plain or attribute-typed values).

        Raises:
            ValueError: If the item lacks a string partition or sort key.
        """
        native = {
            name: value if _is_typed(value) else _serializer.serialize(value)
            for name, value in item.items()
        }
        partition = _string_value(native, self._schema.partition_key)
        sort = _string_value(native, self._schema.sort_key)
        if not partition or not sort:
            raise ValueError(
                f"Item needs string {self._schema.partition_key!r} and {self._schema.sort_key!r}"
            )
        self._partitions.setdefault(partition, {})[sort] = native

    def put_items(self, items: Iterable[Mapping[str, Any]]) -> int:
        count = 0
        for item in items:
            self.put_item(item)
            count += 1
        return count

    def load_seed_file(self, path: str | Path) -> int:
        """Load items from a JSON file.

        The file holds either a list of items or ``{table_name: [items]}``.
        Numbers are read as Decimal, as boto3 expects.

        Returns:
            int: Number of items loaded.
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f, parse_float=Decimal, parse_int=Decimal)
        if isinstance(data, dict):
            data = data.get(self._schema.table_name, [])
        return self.put_items(data)

    async def execute(
        self, descriptor: StoreOperationDescriptor
    ) -> Result[dict[str, Any], StoreError]:
        if descriptor.table != self._schema.table_name:
            return Failure(
                error=StoreRequestError(
                    code=ErrorCode.STORE_REQUEST_REJECTED,
                    message=f"Requested resource not found: table {descriptor.table!r}",
                )
            )
        if descriptor.index is not None and descriptor.index not in self._schema.indexes:
            return Failure(
                error=StoreRequestError(
                    code=ErrorCode.STORE_REQUEST_REJECTED,
                    message=f"The table does not have the specified index: {descriptor.index}",
                )
            )

        cursor = descriptor.continuation_key
        predicate = descriptor.key_predicate
        if (
            cursor is not None
            and isinstance(predicate, PrefixCondition)
            and not cursor.sort.startswith(predicate.prefix)
        ):
            return Failure(
                error=StoreRequestError(
                    code=ErrorCode.STORE_REQUEST_REJECTED,
                    message="The provided starting key is outside query boundaries based on provided conditions",
                )
            )
        match descriptor.kind:
            case OperationKind.POINT_GET:
                return Success(value=self._get(descriptor))
            case OperationKind.BATCH_GET:
                return Success(value=self._batch(descriptor))
            case _:
                return Success(value=self._query(descriptor))

    def _get(self, descriptor: StoreOperationDescriptor) -> dict[str, Any]:
        key = descriptor.key_predicate
        assert isinstance(key, ExactKey)
        item = self._partitions.get(key.partition, {}).get(key.sort)
        return {} if item is None else {"Item": copy.deepcopy(item)}

    def _batch(self, descriptor: StoreOperationDescriptor) -> dict[str, Any]:
        key_set = descriptor.key_predicate
        assert isinstance(key_set, KeySet)
        partition = self._partitions.get(key_set.partition, {})
        found = [copy.deepcopy(partition[s]) for s in key_set.sorts if s in partition]
        return {"Responses": {descriptor.table: found}, "UnprocessedKeys": {}}

    def _query(self, descriptor: StoreOperationDescriptor) -> dict[str, Any]:
        predicate = descriptor.key_predicate
        items = self._partitions.get(predicate.partition, {})
        sort_key = self._schema.sort_key

        match predicate:
            case PrefixCondition(prefix=prefix):
                ordered = [
                    ((sort,), item)
                    for sort, item in sorted(items.items())
                    if sort.startswith(prefix)
                ]
            case GreaterThanCondition(attribute=attribute, threshold=threshold):
                ordered = sorted(
                    (
                        ((value, sort), item)
                        for sort, item in items.items()
                        if (value := _string_value(item, attribute)) is not None and value > threshold
                    ),
                    key=lambda pair: pair[0],
                )
            case _:
                raise ValueError(f"Unsupported key predicate: {predicate!r}")

        if descriptor.scan_direction == ScanDirection.REVERSE:
            ordered.reverse()

        cursor = descriptor.continuation_key
        if cursor is not None:
            forward = descriptor.scan_direction == ScanDirection.FORWARD
            ordered = [
                (position, item)
                for position, item in ordered
                if (position[-1] > cursor.sort if forward else position[-1] < cursor.sort)
            ]

        page = ordered
        last_key: NativeItem | None = None
        if descriptor.limit is not None and len(ordered) >= descriptor.limit:
            page = ordered[: descriptor.limit]
            last_item = page[-1][1]
            last_key = {
                self._schema.partition_key: copy.deepcopy(last_item[self._schema.partition_key]),
                sort_key: copy.deepcopy(last_item[sort_key]),
            }
            if descriptor.index is not None:
                index_attr = self._schema.indexes[descriptor.index]
                last_key[index_attr] = copy.deepcopy(last_item[index_attr])

        result: dict[str, Any] = {
            "Items": [copy.deepcopy(item) for _, item in page],
            "Count": len(page),
            "ScannedCount": len(page),
        }
        if last_key is not None:
            result["LastEvaluatedKey"] = last_key
        return result


def _is_typed(value: Any) -> bool:
    """True for an attribute-typed value such as ``{"S": "x"}``."""
    return (
        isinstance(value, dict)
        and len(value) == 1
        and next(iter(value)) in ("S", "N", "B", "BOOL", "NULL", "M", "L", "SS", "NS", "BS")
    )
