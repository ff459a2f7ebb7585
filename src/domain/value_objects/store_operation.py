"""Store operation descriptor (the planner's canonical output).

A descriptor is the validated, store-independent form of one native request.
Exactly one key predicate shape is populated per operation kind:

    POINT_GET    -> ExactKey
    RANGE_QUERY  -> PrefixCondition | GreaterThanCondition
    BATCH_GET    -> KeySet

Partition keys are flat delimited strings (``bible|en|webp``); nothing here
splits or rebuilds them.
"""

from dataclasses import dataclass

from src.domain.enums import OperationKind, ScanDirection


@dataclass(frozen=True, slots=True, kw_only=True)
class StoreKey:
    """Primary key of one item (also used as an exclusive-start cursor)."""

    partition: str
    sort: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ExactKey:
    """Exact partition and sort key."""

    partition: str
    sort: str


@dataclass(frozen=True, slots=True, kw_only=True)
class PrefixCondition:
    """Exact partition, sort key starting with ``prefix``."""

    partition: str
    prefix: str


@dataclass(frozen=True, slots=True, kw_only=True)
class GreaterThanCondition:
    """Exact partition, ``attribute`` strictly greater than ``threshold``.

    Used on secondary indexes; the threshold doubles as the page cursor.
    """

    partition: str
    attribute: str
    threshold: str


@dataclass(frozen=True, slots=True, kw_only=True)
class KeySet:
    """Several exact sort keys under one shared partition."""

    partition: str
    sorts: tuple[str, ...]

    @property
    def keys(self) -> tuple[StoreKey, ...]:
        """Expand into individual primary keys, in request order."""
        return tuple(StoreKey(partition=self.partition, sort=s) for s in self.sorts)


type KeyPredicate = ExactKey | PrefixCondition | GreaterThanCondition | KeySet

_PREDICATES_BY_KIND: dict[OperationKind, tuple[type, ...]] = {
    OperationKind.POINT_GET: (ExactKey,),
    OperationKind.RANGE_QUERY: (PrefixCondition, GreaterThanCondition),
    OperationKind.BATCH_GET: (KeySet,),
}


@dataclass(frozen=True, slots=True, kw_only=True)
class StoreOperationDescriptor:
    """One validated store operation.

    Attributes:
        kind: Operation shape.
        table: Native table name.
        key_predicate: Key condition; its type must match ``kind``.
        index: Secondary index name (range queries only).
        scan_direction: Sort order (range queries only).
        continuation_key: Exclusive start key from a previous page.
        limit: Maximum items per page (range queries only).

    Raises:
        ValueError: If the predicate does not match the kind, or the
            continuation key belongs to another partition.
    """

    kind: OperationKind
    table: str
    key_predicate: KeyPredicate
    index: str | None = None
    scan_direction: ScanDirection = ScanDirection.FORWARD
    continuation_key: StoreKey | None = None
    limit: int | None = None

    def __post_init__(self) -> None:
        """Enforce the one-predicate-per-kind and cursor invariants."""
        if not isinstance(self.key_predicate, _PREDICATES_BY_KIND[self.kind]):
            raise ValueError(
                f"{type(self.key_predicate).__name__} is not valid for {self.kind.value}"
            )
        if self.kind != OperationKind.RANGE_QUERY and (
            self.index is not None
            or self.continuation_key is not None
            or self.limit is not None
            or self.scan_direction != ScanDirection.FORWARD
        ):
            raise ValueError(f"{self.kind.value} takes no index, cursor, limit or direction")
        if (
            self.continuation_key is not None
            and self.continuation_key.partition != self.key_predicate.partition
        ):
            raise ValueError("continuation key partition does not match key predicate")
        if self.limit is not None and self.limit <= 0:
            raise ValueError(f"limit must be positive, got {self.limit}")

    @property
    def partition(self) -> str:
        """Partition key shared by every key this operation touches."""
        return self.key_predicate.partition
