"""Unit tests for StoreOperationPlanner.

Tests cover:
- Point, range (prefix / index threshold) and batch encodings
- Encoding and shape rejections
- Key schema validation (table, attributes, empty values)
- Range options (index, direction, limit, continuation)
- Batch limits (count, partition, duplicates)
"""

import json

import pytest

from src.application.planning import MAX_BATCH_KEYS, StoreOperationPlanner
from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.enums import OperationKind, ScanDirection
from src.domain.value_objects import (
    ExactKey,
    GreaterThanCondition,
    KeySet,
    PrefixCondition,
    StoreKey,
)

PARTITION = "bible|en|webp"


def key(sort: str, partition: str = PARTITION) -> dict:
    return {"collection": {"S": partition}, "id": {"S": sort}}


def prefix_query(**extra) -> dict:
    request = {
        "TableName": "Texts",
        "KeyConditionExpression": "#pk = :pk AND begins_with(#sk, :prefix)",
        "ExpressionAttributeNames": {"#pk": "collection", "#sk": "id"},
        "ExpressionAttributeValues": {":pk": {"S": PARTITION}, ":prefix": {"S": "001-001-"}},
    }
    request.update(extra)
    return request


def feed_query(**extra) -> dict:
    request = {
        "TableName": "Texts",
        "IndexName": "feed",
        "KeyConditionExpression": "#pk = :pk AND #fk > :after",
        "ExpressionAttributeNames": {"#pk": "collection", "#fk": "feedKey"},
        "ExpressionAttributeValues": {":pk": {"S": PARTITION}, ":after": {"S": "2024-01-01"}},
    }
    request.update(extra)
    return request


def batch(keys: list[dict], table: str = "Texts") -> dict:
    return {"RequestItems": {table: {"Keys": keys}}}


@pytest.fixture
def planner(table_schema) -> StoreOperationPlanner:
    return StoreOperationPlanner(table_schema)


def plan_ok(planner, request):
    result = planner.plan(json.dumps(request))
    assert isinstance(result, Success), result
    return result.value


def plan_code(planner, request) -> ErrorCode:
    rendered = request if isinstance(request, str) else json.dumps(request)
    result = planner.plan(rendered)
    assert isinstance(result, Failure)
    return result.error.code


@pytest.mark.unit
class TestPointLookup:
    """Test Key encodings."""

    def test_point_lookup(self, planner):
        """Test a well-formed Key becomes POINT_GET with an ExactKey."""
        descriptor = plan_ok(planner, {"TableName": "Texts", "Key": key("001-001-001")})

        assert descriptor.kind == OperationKind.POINT_GET
        assert descriptor.table == "Texts"
        assert descriptor.key_predicate == ExactKey(partition=PARTITION, sort="001-001-001")
        assert descriptor.limit is None

    def test_empty_sort_key_is_missing(self, planner):
        """Test an empty id value is rejected."""
        assert plan_code(planner, {"TableName": "Texts", "Key": key("")}) == ErrorCode.PLAN_KEY_MISSING

    def test_missing_key_attribute(self, planner):
        """Test a Key without the sort attribute."""
        request = {"TableName": "Texts", "Key": {"collection": {"S": PARTITION}}}

        assert plan_code(planner, request) == ErrorCode.PLAN_KEY_MISSING

    def test_wrong_key_attribute(self, planner):
        """Test attributes that are not the key schema."""
        request = {"TableName": "Texts", "Key": {"collection": {"S": PARTITION}, "verse": {"S": "1"}}}

        assert plan_code(planner, request) == ErrorCode.PLAN_KEY_MISMATCH

    def test_non_string_key_value(self, planner):
        """Test numeric key attributes are rejected."""
        request = {"TableName": "Texts", "Key": {"collection": {"S": PARTITION}, "id": {"N": "1"}}}

        assert plan_code(planner, request) == ErrorCode.PLAN_KEY_MISSING

    def test_unknown_table(self, planner):
        """Test a table other than the schema's."""
        request = {"TableName": "Other", "Key": key("001-001-001")}

        assert plan_code(planner, request) == ErrorCode.PLAN_KEY_MISMATCH

    def test_point_lookup_rejects_range_options(self, planner):
        """Test Limit is not accepted on a point lookup."""
        request = {"TableName": "Texts", "Key": key("001-001-001"), "Limit": 5}

        assert plan_code(planner, request) == ErrorCode.PLAN_SHAPE_UNRECOGNIZED


@pytest.mark.unit
class TestEncoding:
    """Test rejections before shape detection."""

    def test_not_json(self, planner):
        """Test rendered text that is not JSON."""
        assert plan_code(planner, '{"TableName": ') == ErrorCode.PLAN_ENCODING_INVALID

    def test_not_an_object(self, planner):
        """Test a JSON array."""
        assert plan_code(planner, "[]") == ErrorCode.PLAN_ENCODING_INVALID

    def test_no_recognised_shape(self, planner):
        """Test an object with none of the shape fields."""
        assert plan_code(planner, {"TableName": "Texts"}) == ErrorCode.PLAN_SHAPE_UNRECOGNIZED

    def test_two_shapes(self, planner):
        """Test Key and RequestItems together."""
        request = {"TableName": "Texts", "Key": key("1"), **batch([key("1")])}

        assert plan_code(planner, request) == ErrorCode.PLAN_SHAPE_UNRECOGNIZED


@pytest.mark.unit
class TestRangeQuery:
    """Test KeyConditionExpression encodings."""

    def test_prefix_query(self, planner):
        """Test begins_with on the sort key."""
        descriptor = plan_ok(planner, prefix_query())

        assert descriptor.kind == OperationKind.RANGE_QUERY
        assert descriptor.key_predicate == PrefixCondition(partition=PARTITION, prefix="001-001-")
        assert descriptor.scan_direction == ScanDirection.FORWARD
        assert descriptor.index is None

    def test_prefix_query_with_options(self, planner):
        """Test direction, limit and continuation are carried over."""
        descriptor = plan_ok(
            planner,
            prefix_query(ScanIndexForward=False, Limit=10, ExclusiveStartKey=key("001-001-009")),
        )

        assert descriptor.scan_direction == ScanDirection.REVERSE
        assert descriptor.limit == 10
        assert descriptor.continuation_key == StoreKey(partition=PARTITION, sort="001-001-009")

    def test_attribute_names_without_placeholders(self, planner):
        """Test literal attribute names in the expression."""
        request = prefix_query(KeyConditionExpression="collection = :pk AND begins_with(id, :prefix)")
        request.pop("ExpressionAttributeNames")

        assert plan_ok(planner, request).key_predicate.prefix == "001-001-"

    def test_feed_query(self, planner):
        """Test a threshold query on the feed index."""
        descriptor = plan_ok(planner, feed_query(Limit=2))

        assert descriptor.index == "feed"
        assert descriptor.key_predicate == GreaterThanCondition(
            partition=PARTITION, attribute="feedKey", threshold="2024-01-01"
        )
        assert descriptor.limit == 2

    @pytest.mark.parametrize(
        ("request_body", "code"),
        [
            (feed_query(IndexName="nope"), ErrorCode.PLAN_KEY_MISMATCH),
            (prefix_query(IndexName="feed"), ErrorCode.PLAN_SHAPE_UNRECOGNIZED),
            (
                {k: v for k, v in feed_query().items() if k != "IndexName"},
                ErrorCode.PLAN_SHAPE_UNRECOGNIZED,
            ),
            (feed_query(ExclusiveStartKey=key("001-001-001")), ErrorCode.PLAN_SHAPE_UNRECOGNIZED),
            (feed_query(ScanIndexForward=False), ErrorCode.PLAN_SHAPE_UNRECOGNIZED),
            (
                feed_query(ExpressionAttributeNames={"#pk": "collection", "#fk": "id"}),
                ErrorCode.PLAN_KEY_MISMATCH,
            ),
            (prefix_query(Limit=0), ErrorCode.PLAN_ENCODING_INVALID),
            (prefix_query(Limit=True), ErrorCode.PLAN_ENCODING_INVALID),
            (prefix_query(ScanIndexForward="no"), ErrorCode.PLAN_ENCODING_INVALID),
            (
                prefix_query(ExclusiveStartKey=key("001-001-009", partition="bible|es|rvr")),
                ErrorCode.PLAN_KEY_MISMATCH,
            ),
            (
                prefix_query(ExclusiveStartKey=key("001-002-001")),
                ErrorCode.PLAN_START_KEY_OUT_OF_RANGE,
            ),
            (prefix_query(KeyConditionExpression="#pk = :pk"), ErrorCode.PLAN_SHAPE_UNRECOGNIZED),
            (
                prefix_query(ExpressionAttributeNames={"#pk": "id", "#sk": "id"}),
                ErrorCode.PLAN_KEY_MISMATCH,
            ),
            (
                prefix_query(ExpressionAttributeValues={":pk": {"S": PARTITION}}),
                ErrorCode.PLAN_KEY_MISSING,
            ),
        ],
        ids=[
            "unknown-index",
            "prefix-on-index",
            "threshold-without-index",
            "index-with-start-key",
            "reverse-index",
            "wrong-index-attribute",
            "zero-limit",
            "boolean-limit",
            "non-boolean-direction",
            "start-key-other-partition",
            "start-key-outside-prefix",
            "unsupported-condition",
            "partition-not-tested",
            "undefined-value",
        ],
    )
    def test_rejected_range_queries(self, planner, request_body, code):
        """Test every unsupported range variant has a specific code."""
        assert plan_code(planner, request_body) == code


@pytest.mark.unit
class TestBatchLookup:
    """Test RequestItems encodings."""

    def test_batch_preserves_key_order(self, planner):
        """Test keys come back in request order."""
        descriptor = plan_ok(planner, batch([key("003"), key("001"), key("002")]))

        assert descriptor.kind == OperationKind.BATCH_GET
        assert descriptor.key_predicate == KeySet(partition=PARTITION, sorts=("003", "001", "002"))

    def test_batch_at_limit(self, planner):
        """Test exactly MAX_BATCH_KEYS keys is accepted."""
        keys = [key(f"{i:03d}") for i in range(MAX_BATCH_KEYS)]

        assert len(plan_ok(planner, batch(keys)).key_predicate.sorts) == MAX_BATCH_KEYS

    @pytest.mark.parametrize(
        "request_body",
        [
            batch([]),
            batch([key(f"{i:03d}") for i in range(MAX_BATCH_KEYS + 1)]),
            batch([key("001"), key("002", partition="bible|es|rvr")]),
            batch([key("001"), key("001")]),
            {"RequestItems": {"Texts": {"Keys": [key("001")]}, "Other": {"Keys": [key("001")]}}},
        ],
        ids=["empty", "too-many", "mixed-partitions", "duplicates", "two-tables"],
    )
    def test_invalid_batches(self, planner, request_body):
        """Test batch constraints are enforced."""
        assert plan_code(planner, request_body) == ErrorCode.PLAN_BATCH_INVALID

    def test_batch_with_empty_id(self, planner):
        """Test an empty id inside a batch is a missing key."""
        assert plan_code(planner, batch([key("001"), key("")])) == ErrorCode.PLAN_KEY_MISSING
