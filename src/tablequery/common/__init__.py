"""Common exceptions for tablequery.

Exception Design:
    The exception system uses error codes for categorization rather than
    numerous specific exception classes. All exceptions inherit from
    TableQueryError and include structured error information. The two
    render-time failures, MalformedQuery and RowShapeMismatch, are
    subclasses so callers can catch them directly.
"""

from tablequery.common.exceptions import (
    ErrorCode,
    MalformedQuery,
    RowShapeMismatch,
    TableQueryError,
    # Helper functions
    configuration_error,
    invalid_identifier_error,
    malformed_query_error,
    row_shape_mismatch_error,
    sql_parse_error,
    unknown_column_error,
    validation_error,
)

__all__ = [
    # Base Exception and Error Codes
    "TableQueryError",
    "ErrorCode",
    "MalformedQuery",
    "RowShapeMismatch",
    # Helper functions
    "configuration_error",
    "validation_error",
    "invalid_identifier_error",
    "unknown_column_error",
    "malformed_query_error",
    "row_shape_mismatch_error",
    "sql_parse_error",
]
