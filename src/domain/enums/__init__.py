"""Domain enums.

All domain enums live in src/domain/enums/ for discoverability.

Available Enums:
    - OperationKind: Native store operation shapes
    - ScanDirection: Range query ordering
    - ParameterSource: Path or query-string parameters
    - DenialReason: Why the access governor refused a request
    - QuotaPeriod: Quota reset windows
"""

from src.domain.enums.denial_reason import DenialReason
from src.domain.enums.operation_kind import OperationKind
from src.domain.enums.parameter_source import ParameterSource
from src.domain.enums.quota_period import QuotaPeriod
from src.domain.enums.scan_direction import ScanDirection

__all__ = [
    "DenialReason",
    "OperationKind",
    "ParameterSource",
    "QuotaPeriod",
    "ScanDirection",
]
