"""Built-in routes over the ``Texts`` table.

Every item lives under a flat delimited partition key
``document|language|translation`` (e.g. ``bible|en|webp``) with sort key
``book-chapter-verse`` (e.g. ``001-001-001``). The ``feed`` local secondary
index orders the same partition by ``feedKey``.

Request templates emit the native DynamoDB request; the JSON response
template passes the native result straight through.

Table and attribute names come from the TableSchema, substituted into the
template sources before they are registered.

The sharing app registers one more route, ``Share``, in a registry of its
own: a point lookup at ``/{id}`` rendered as an HTML unfurl page.
"""

from src.domain.enums import ParameterSource
from src.domain.value_objects import TableSchema
from src.application.routes.definition import (
    HTML_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    RouteDefinition,
    RouteParameter,
)

# Partition key composed from three parameters, JSON-escaped in place.
_PARTITION = "${document|escape_json}|${language|escape_json}|${translation|escape_json}"

SHARE_ROUTE_NAME = "Share"

_LIMIT_PATTERN = r"[1-9][0-9]{0,3}"

_COLLECTION_PARAMETERS = (
    RouteParameter(name="document", description="Document collection, e.g. bible"),
    RouteParameter(name="language", description="Language code, e.g. en"),
    RouteParameter(name="translation", description="Translation code, e.g. webp"),
)

_ITEM_REQUEST = """{
  "TableName": "@TABLE@",
  "Key": {
    "@PK@": {"S": "@PARTITION@"},
    "@SK@": {"S": ${id|json}}
  }
}"""

_ITEMS_REQUEST = """{
  "RequestItems": {
    "@TABLE@": {
      "Keys": [
#foreach($key in $ids|split)
        {"@PK@": {"S": "@PARTITION@"}, "@SK@": {"S": ${key|json}}}#if($foreach.hasNext),#end
#end
      ]
    }
  }
}"""

_RANGE_REQUEST = """{
  "TableName": "@TABLE@",
  "KeyConditionExpression": "\\#pk = :pk AND begins_with(\\#sk, :prefix)",
  "ExpressionAttributeNames": {"\\#pk": "@PK@", "\\#sk": "@SK@"},
  "ExpressionAttributeValues": {
    ":pk": {"S": "@PARTITION@"},
    ":prefix": {"S": ${prefix|json}}
  },
#if($start)
  "ExclusiveStartKey": {"@PK@": {"S": "@PARTITION@"}, "@SK@": {"S": ${start|json}}},
#end
#if($limit)
  "Limit": $limit,
#end
  "ScanIndexForward": @FORWARD@
}"""

_FEED_REQUEST = """{
  "TableName": "@TABLE@",
  "IndexName": "@INDEX@",
  "KeyConditionExpression": "\\#pk = :pk AND \\#fk > :after",
  "ExpressionAttributeNames": {"\\#pk": "@PK@", "\\#fk": "@INDEX_SK@"},
  "ExpressionAttributeValues": {
    ":pk": {"S": "@PARTITION@"},
    ":after": {"S": ${after|json}}
  },
#if($limit)
  "Limit": $limit,
#end
  "ScanIndexForward": true
}"""

_PASS_THROUGH = {JSON_CONTENT_TYPE: "${result|json}"}


def _bind_schema(source: str, schema: TableSchema, index: str | None = None) -> str:
    """Substitute table/attribute names into a request template source."""
    replacements = {
        "@PARTITION@": _PARTITION,
        "@TABLE@": schema.table_name,
        "@PK@": schema.partition_key,
        "@SK@": schema.sort_key,
    }
    if index is not None:
        replacements["@INDEX@"] = index
        replacements["@INDEX_SK@"] = schema.indexes[index]
    for marker, value in replacements.items():
        source = source.replace(marker, value)
    return source


def _range_route(name: str, schema: TableSchema, *, forward: bool) -> RouteDefinition:
    order = "ascending" if forward else "descending"
    return RouteDefinition(
        name=name,
        summary=f"Items whose id starts with a prefix, {order}",
        parameters=(
            *_COLLECTION_PARAMETERS,
            RouteParameter(name="prefix", description="Sort key prefix, e.g. 001-001-"),
            RouteParameter(name="start", optional=True, description="Exclusive start id (next page)"),
            RouteParameter(
                name="limit", optional=True, pattern=_LIMIT_PATTERN, description="Page size"
            ),
        ),
        request_template=_bind_schema(_RANGE_REQUEST, schema).replace(
            "@FORWARD@", "true" if forward else "false"
        ),
        response_templates=_PASS_THROUGH,
    )


def build_catalog(schema: TableSchema, feed_index: str = "feed") -> tuple[RouteDefinition, ...]:
    """Return the built-in routes for ``schema``.

    Args:
        schema: Backing table layout.
        feed_index: Index used by the Feed route; must exist in ``schema``.

    Returns:
        Item, Items, Range, ReverseRange and Feed definitions.
    """
    return (
        RouteDefinition(
            name="Item",
            summary="Single item by id",
            parameters=(
                *_COLLECTION_PARAMETERS,
                RouteParameter(name="id", description="Item id, e.g. 001-001-001"),
            ),
            request_template=_bind_schema(_ITEM_REQUEST, schema),
            response_templates=_PASS_THROUGH,
        ),
        RouteDefinition(
            name="Items",
            summary="Several items by comma-separated ids",
            parameters=(
                *_COLLECTION_PARAMETERS,
                RouteParameter(
                    name="ids", pattern=r"[^,]+(,[^,]+)*", description="Comma-separated item ids"
                ),
            ),
            request_template=_bind_schema(_ITEMS_REQUEST, schema),
            response_templates=_PASS_THROUGH,
        ),
        _range_route("Range", schema, forward=True),
        _range_route("ReverseRange", schema, forward=False),
        RouteDefinition(
            name="Feed",
            summary="Items after a feed key, in feed order",
            parameters=(
                *_COLLECTION_PARAMETERS,
                RouteParameter(name="after", description="Exclusive lower bound on feedKey"),
                RouteParameter(
                    name="limit", optional=True, pattern=_LIMIT_PATTERN, description="Page size"
                ),
            ),
            request_template=_bind_schema(_FEED_REQUEST, schema, index=feed_index),
            response_templates=_PASS_THROUGH,
        ),
    )


def build_share_route(
    schema: TableSchema,
    *,
    page_template: str,
    viewer_base_url: str,
    document: str = "bible",
    language: str = "en",
    translation: str = "webp",
) -> RouteDefinition:
    """Return the unfurl route served at ``/{id}`` by the sharing app.

    The collection is not part of the URL: it binds through optional
    parameters whose defaults are the configured collection. The viewer
    base URL is written into the page template as text.

    Args:
        schema: Backing table layout.
        page_template: HTML response template source.
        viewer_base_url: Redirect target root, e.g. ``https://scrollbible.app``.
        document: Default document collection.
        language: Default language code.
        translation: Default translation code.
    """
    viewer = viewer_base_url.rstrip("/").replace("$", "\\$").replace("#", "\\#")
    return RouteDefinition(
        name=SHARE_ROUTE_NAME,
        path="/{id}",
        summary="Unfurl page for a shared item",
        parameters=(
            RouteParameter(name="id", source=ParameterSource.PATH, description="Item id"),
            RouteParameter(name="document", optional=True, default=document),
            RouteParameter(name="language", optional=True, default=language),
            RouteParameter(name="translation", optional=True, default=translation),
        ),
        request_template=_bind_schema(_ITEM_REQUEST, schema),
        response_templates={HTML_CONTENT_TYPE: page_template.replace("@VIEWER_BASE_URL@", viewer)},
    )
