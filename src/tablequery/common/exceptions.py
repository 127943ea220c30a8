from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ErrorCode(Enum):
    """Standard error codes for tablequery operations.

    This enum provides categorized error codes that can be used
    to identify error types without creating numerous exception classes.
    Each category has a specific prefix for easy identification.

    Attributes:
        CONFIG_*: Configuration-related errors
        VALIDATION_*: Input validation errors (bad arguments, identifiers)
        QUERY_*: Statement assembly errors raised at render time
        PARSE_*: Errors raised while analyzing rendered SQL
    """
    # Configuration errors
    CONFIG_ERROR = "CONFIG_001"
    CONFIG_INVALID = "CONFIG_002"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_001"
    INVALID_ARGUMENT = "VALIDATION_002"
    INVALID_IDENTIFIER = "VALIDATION_003"
    UNKNOWN_COLUMN = "VALIDATION_004"

    # Query assembly errors
    MALFORMED_QUERY = "QUERY_001"
    ROW_SHAPE_MISMATCH = "QUERY_002"

    # Analysis errors
    SQL_PARSE_ERROR = "PARSE_001"


class TableQueryError(Exception):
    """Base exception for all tablequery errors.

    Errors are categorized by error code rather than by a deep class
    hierarchy. The two render-time conditions callers commonly catch,
    ``MalformedQuery`` and ``RowShapeMismatch``, get their own subclasses.

    Attributes:
        message: Error message
        error_code: Error code from ErrorCode enum
        details: Additional error details
        cause: Optional underlying exception
    """

    default_error_code: ErrorCode = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        """Initialize tablequery error.

        Args:
            message: Error message
            error_code: Error code from ErrorCode enum, defaults to the
                class's ``default_error_code``
            details: Additional error details
            cause: Optional underlying exception
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        self.cause = cause

        # Lazy import to avoid circular dependency
        from tablequery.logging import get_logger
        logger = get_logger(__name__)
        logger.error(
            message,
            extra={
                "error_code": self.error_code.value,
                "error_details": self.details,
            },
            exc_info=cause,
        )

    def __str__(self) -> str:
        """String representation of the error."""
        msg = f"[{self.error_code.value}] {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
        }

    @classmethod
    def from_error_code(
        cls,
        error_code: ErrorCode,
        message: str,
        **kwargs
    ) -> "TableQueryError":
        """Create exception from error code.

        Args:
            error_code: Error code
            message: Error message
            **kwargs: Additional arguments for TableQueryError

        Returns:
            TableQueryError instance
        """
        return cls(message=message, error_code=error_code, **kwargs)


class MalformedQuery(TableQueryError):
    """A statement cannot be assembled from the builder's staged state."""

    default_error_code = ErrorCode.MALFORMED_QUERY


class RowShapeMismatch(MalformedQuery):
    """Insert columns were staged with differing row counts."""

    default_error_code = ErrorCode.ROW_SHAPE_MISMATCH


# Helper functions for common error scenarios
def configuration_error(
    message: str,
    config_key: Optional[str] = None,
    error_code: ErrorCode = ErrorCode.CONFIG_ERROR,
    **kwargs
) -> TableQueryError:
    """Create a configuration error.

    Args:
        message: Error message
        config_key: Configuration key that caused the error
        error_code: CONFIG_ERROR for unusable values, CONFIG_INVALID when
            settings fail validation
        **kwargs: Additional error details

    Returns:
        TableQueryError with a CONFIG_* code
    """
    details = kwargs.pop("details", {})
    if config_key:
        details["config_key"] = config_key

    return TableQueryError.from_error_code(
        error_code,
        message,
        details=details,
        **kwargs
    )


def validation_error(
    message: str,
    field: Optional[str] = None,
    value: Any = None,
    error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    **kwargs
) -> TableQueryError:
    """Create a validation error.

    Args:
        message: Error message
        field: Field or argument that failed validation
        value: Invalid value
        error_code: Specific validation code, VALIDATION_ERROR by default
        **kwargs: Additional error details

    Returns:
        TableQueryError with a VALIDATION_* code
    """
    details = kwargs.pop("details", {})
    if field:
        details["field"] = field
    if value is not None:
        details["value"] = str(value)

    return TableQueryError(
        message=message,
        error_code=error_code,
        details=details,
        **kwargs
    )


def invalid_identifier_error(identifier: str, identifier_type: str = "identifier") -> TableQueryError:
    """Create an error for a table, alias or column name that is not a safe identifier."""
    return validation_error(
        f"Invalid {identifier_type} name: '{identifier}'. "
        "Must start with a letter or underscore, and contain only alphanumeric, "
        "underscore, $, # or @ characters (max 128).",
        field=identifier_type,
        value=identifier,
        error_code=ErrorCode.INVALID_IDENTIFIER,
    )


def unknown_column_error(table: str, column: str) -> TableQueryError:
    """Create an error for a column that the table schema does not declare.

    Args:
        table: Table the column was looked up on
        column: The unresolved column name

    Returns:
        TableQueryError with UNKNOWN_COLUMN code
    """
    return TableQueryError(
        message=f"Table '{table}' has no column '{column}'",
        error_code=ErrorCode.UNKNOWN_COLUMN,
        details={"table": table, "column": column},
    )


def malformed_query_error(
    message: str,
    table: Optional[str] = None,
    query_type: Optional[str] = None,
) -> MalformedQuery:
    """Create a MalformedQuery error.

    Args:
        message: Error message
        table: Table the statement targets
        query_type: Statement type being rendered

    Returns:
        MalformedQuery with MALFORMED_QUERY code
    """
    details: Dict[str, Any] = {}
    if table:
        details["table"] = table
    if query_type:
        details["query_type"] = query_type
    return MalformedQuery(message=message, details=details)


def row_shape_mismatch_error(table: str, row_counts: Mapping[str, int]) -> RowShapeMismatch:
    """Create a RowShapeMismatch error naming each column's staged row count.

    Args:
        table: Table the insert targets
        row_counts: Column name -> number of staged values

    Returns:
        RowShapeMismatch with ROW_SHAPE_MISMATCH code
    """
    counts = ", ".join(f"{column}={count}" for column, count in row_counts.items())
    return RowShapeMismatch(
        message=f"Insert into '{table}' has columns with differing row counts: {counts}",
        details={"table": table, "row_counts": dict(row_counts)},
    )


def sql_parse_error(message: str, sql: str, cause: Optional[Exception] = None) -> TableQueryError:
    """Create an error for SQL text that could not be parsed.

    Args:
        message: Error message
        sql: The offending statement
        cause: Underlying parser exception

    Returns:
        TableQueryError with SQL_PARSE_ERROR code
    """
    return TableQueryError(
        message=message,
        error_code=ErrorCode.SQL_PARSE_ERROR,
        details={"sql": sql},
        cause=cause,
    )
