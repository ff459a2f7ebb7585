"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.
Used with Result types for railway-oriented programming.

Categories:
- Request errors (ROUTE_*, METHOD_*, PARAMETER_*)
- Template errors (TEMPLATE_*)
- Planning errors (PLAN_*)
- Access errors (CREDENTIAL_*, QUOTA_*, RATE_LIMIT_*)
- Store errors (STORE_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable).

    Error codes follow ENTITY_ACTION_REASON naming convention.
    """

    # Request errors
    ROUTE_NOT_FOUND = "route_not_found"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    PARAMETER_MISSING = "parameter_missing"
    PARAMETER_INVALID = "parameter_invalid"

    # Template errors
    TEMPLATE_SYNTAX_INVALID = "template_syntax_invalid"
    TEMPLATE_REFERENCE_UNRESOLVED = "template_reference_unresolved"
    TEMPLATE_TYPE_MISMATCH = "template_type_mismatch"
    TEMPLATE_JSON_INVALID = "template_json_invalid"

    # Planning errors
    PLAN_ENCODING_INVALID = "plan_encoding_invalid"
    PLAN_SHAPE_UNRECOGNIZED = "plan_shape_unrecognized"
    PLAN_KEY_MISSING = "plan_key_missing"
    PLAN_KEY_MISMATCH = "plan_key_mismatch"
    PLAN_BATCH_INVALID = "plan_batch_invalid"
    PLAN_START_KEY_OUT_OF_RANGE = "plan_start_key_out_of_range"

    # Access errors
    CREDENTIAL_INVALID = "credential_invalid"
    QUOTA_EXCEEDED = "quota_exceeded"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    RATE_LIMIT_CHECK_FAILED = "rate_limit_check_failed"
    RATE_LIMIT_RESET_FAILED = "rate_limit_reset_failed"

    # Store errors
    STORE_ITEM_NOT_FOUND = "store_item_not_found"
    STORE_THROTTLED = "store_throttled"
    STORE_TIMEOUT = "store_timeout"
    STORE_UNAVAILABLE = "store_unavailable"
    STORE_REQUEST_REJECTED = "store_request_rejected"
    STORE_RESPONSE_MISMATCH = "store_response_mismatch"
