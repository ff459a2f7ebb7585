"""Key schema of the backing table.

The planner validates rendered requests against this schema so a template
that names the wrong key attribute fails as a planning error instead of being
forwarded to the store.

Usage:
    schema = TableSchema(
        table_name="Texts",
        partition_key="collection",
        sort_key="id",
        indexes={"feed": "feedKey"},
    )
"""

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True, kw_only=True)
class TableSchema:
    """Partition/sort key layout of one table.

    Attributes:
        table_name: Native table name.
        partition_key: Partition key attribute name.
        sort_key: Sort key attribute name.
        indexes: Local secondary index name -> alternate sort attribute.
            Indexes share the table's partition key.
    """

    table_name: str
    partition_key: str
    sort_key: str
    indexes: Mapping[str, str] = field(default_factory=dict)

    def sort_attribute(self, index: str | None) -> str | None:
        """Return the sort attribute used by a query on ``index``.

        Args:
            index: Index name, or None for the base table.

        Returns:
            str | None: The sort attribute, or None for an unknown index.
        """
        if index is None:
            return self.sort_key
        return self.indexes.get(index)
