from tablequery.__version__ import __version__

from tablequery.common.exceptions import (
    ErrorCode,
    MalformedQuery,
    RowShapeMismatch,
    TableQueryError,
)
from tablequery.constants import JoinKind, QueryType, SortOrder
from tablequery.query_builder import (
    DeleteBuilder,
    InsertBuilder,
    KeyedSelectBuilder,
    SelectBuilder,
    StatementAnalyzer,
    StatementDependencies,
    Table,
    UpdateBuilder,
    define_table,
)
from tablequery.schema import Column, TableSchema
from tablequery.settings import TableQuerySettings, get_settings

__all__ = [
    "__version__",

    "Column",
    "TableSchema",
    "Table",
    "define_table",

    "SelectBuilder",
    "KeyedSelectBuilder",
    "InsertBuilder",
    "UpdateBuilder",
    "DeleteBuilder",

    "StatementAnalyzer",
    "StatementDependencies",

    "QueryType",
    "JoinKind",
    "SortOrder",

    # Exceptions (public API)
    "TableQueryError",
    "ErrorCode",
    "MalformedQuery",
    "RowShapeMismatch",

    "TableQuerySettings",
    "get_settings",
]
