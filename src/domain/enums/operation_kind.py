"""Store operation kinds.

Every route is bound to exactly one native store operation. The planner
produces a descriptor tagged with one of these kinds.
"""

from enum import Enum


class OperationKind(str, Enum):
    """Native store operation shapes.

    Attributes:
        POINT_GET: Exact partition + sort key lookup of one item.
        RANGE_QUERY: Partition query with a prefix or greater-than condition.
        BATCH_GET: Several exact keys fetched in one call.
    """

    POINT_GET = "point_get"
    RANGE_QUERY = "range_query"
    BATCH_GET = "batch_get"
