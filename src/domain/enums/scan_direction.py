"""Scan direction for range queries."""

from enum import Enum


class ScanDirection(str, Enum):
    """Order in which a range query walks the sort key.

    Attributes:
        FORWARD: Ascending by sort key (store default).
        REVERSE: Descending by sort key.
    """

    FORWARD = "forward"
    REVERSE = "reverse"
