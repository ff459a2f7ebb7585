"""Quota accounting periods."""

from enum import Enum


class QuotaPeriod(str, Enum):
    """Window after which a credential's request counter resets.

    Periods are calendar aligned in UTC: MONTH resets at 00:00 on the first
    day of each month, DAY at 00:00 each day.
    """

    DAY = "day"
    MONTH = "month"
