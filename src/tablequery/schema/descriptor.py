"""Schema descriptors.

A ``TableSchema`` is the only input the builders need: table name,
optional alias, primary key and the ordered column list. It is created
once per record type and shared by every builder made for that type.
"""

import re
from typing import Any, Optional, Sequence, Tuple

from pydantic import Field, field_validator, model_validator

from tablequery.common.exceptions import invalid_identifier_error, unknown_column_error
from tablequery.logging import get_logger
from tablequery.types.base import TQBaseModel

logger = get_logger(__name__)

_IDENTIFIER_RE = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_$#@]*$')


def is_valid_identifier(name: str) -> bool:
    """Return True if ``name`` is a plain SQL identifier of at most 128 characters."""
    return bool(name) and len(name) <= 128 and _IDENTIFIER_RE.match(name) is not None


class Column(TQBaseModel):
    """A declared column as a ``(qualified, bare)`` name pair.

    Attributes:
        qualified: Name prefixed with the table alias, e.g. ``orders.id``
        bare: Column name without any prefix, e.g. ``id``
    """
    qualified: str = Field(..., min_length=1)
    bare: str = Field(..., min_length=1)


class TableSchema(TQBaseModel):
    """Resolved description of one record type's table.

    Attributes:
        table: Bare table name used in FROM, INSERT INTO, UPDATE and DELETE
        alias: Name used to qualify columns; equals ``table`` when no alias
            is declared
        primary_key: Bare primary-key column, empty when none is declared
        columns: Declared columns in declaration order

    Example:
        >>> orders = TableSchema.from_columns(
        ...     "orders", ["id", "customer_id", "order_status"], primary_key="id"
        ... )
        >>> orders.qualified("customer_id")
        'orders.customer_id'
        >>> orders.qualified_column_list
        'orders.id, orders.customer_id, orders.order_status'
    """
    table: str = Field(..., min_length=1, max_length=128)
    alias: str = Field(..., min_length=1, max_length=128)
    primary_key: str = Field(default="", max_length=128)
    columns: Tuple[Column, ...] = Field(default=())

    @model_validator(mode="before")
    @classmethod
    def default_alias_to_table(cls, data: Any) -> Any:
        """Use the table name as alias when none is given."""
        if isinstance(data, dict) and not data.get("alias"):
            data = {**data, "alias": data.get("table")}
        return data

    @field_validator("table", "alias")
    @classmethod
    def validate_sql_identifier(cls, v: str, info) -> str:
        """Validate SQL identifiers to prevent injection."""
        if not is_valid_identifier(v):
            raise ValueError(
                f"Invalid {info.field_name}: '{v}'. "
                f"Must start with letter or underscore, and contain only alphanumeric, underscore, $, #, or @ characters."
            )
        return v

    @field_validator("primary_key")
    @classmethod
    def validate_primary_key(cls, v: str) -> str:
        if v and not is_valid_identifier(v):
            raise ValueError(f"Invalid primary_key: '{v}'")
        return v

    @model_validator(mode="after")
    def warn_on_undeclared_primary_key(self) -> "TableSchema":
        if self.primary_key and self.primary_key not in self.column_names:
            logger.warning(
                "Primary key '%s' is not a declared column of '%s'",
                self.primary_key,
                self.table,
            )
        return self

    @classmethod
    def from_columns(
        cls,
        table: str,
        columns: Sequence[str],
        primary_key: str = "",
        alias: Optional[str] = None,
    ) -> "TableSchema":
        """Build a schema from bare column names.

        Each column is qualified with the alias (or the table name when no
        alias is given).

        Args:
            table: Bare table name
            columns: Bare column names in declaration order
            primary_key: Primary-key column, empty for none
            alias: Optional table alias

        Returns:
            TableSchema instance

        Raises:
            TableQueryError: If a column name is not a valid identifier
        """
        prefix = alias or table
        declared = []
        for name in columns:
            if not is_valid_identifier(name):
                raise invalid_identifier_error(name, "column")
            declared.append(Column(qualified=f"{prefix}.{name}", bare=name))
        return cls(table=table, alias=alias or table, primary_key=primary_key, columns=tuple(declared))

    @property
    def has_primary_key(self) -> bool:
        return bool(self.primary_key)

    @property
    def is_aliased(self) -> bool:
        """True when the alias differs from the table name."""
        return self.alias != self.table

    @property
    def column_names(self) -> Tuple[str, ...]:
        """Bare column names in declaration order."""
        return tuple(column.bare for column in self.columns)

    @property
    def qualified_column_list(self) -> str:
        """Comma-separated qualified column names, ``*`` when there are none."""
        if not self.columns:
            return "*"
        return ", ".join(column.qualified for column in self.columns)

    def column(self, name: str) -> Column:
        """Look up a declared column by bare or qualified name.

        Raises:
            TableQueryError: If the table does not declare the column
        """
        for column in self.columns:
            if name == column.bare or name == column.qualified:
                return column
        raise unknown_column_error(self.table, name)

    def qualified(self, name: str) -> str:
        return self.column(name).qualified

    def bare(self, name: str) -> str:
        return self.column(name).bare
