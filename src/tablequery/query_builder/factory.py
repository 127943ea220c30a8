"""Record-level builder factory.

``Table`` is the entry point for one record type: it owns the record's
``TableSchema`` and hands out builders pre-populated with it. The schema
itself is produced elsewhere (typically once, at import time, from a
model's field list); this module only consumes it.
"""

from typing import Optional, Sequence, Type

from tablequery.query_builder.delete import DeleteBuilder
from tablequery.query_builder.insert import InsertBuilder
from tablequery.query_builder.select import KeyedSelectBuilder, SelectBuilder
from tablequery.query_builder.update import UpdateBuilder
from tablequery.schema import TableSchema
from tablequery.settings import TableQuerySettings, get_settings


class Table:
    """Factory for the builders of one table.

    Select factories return a ``KeyedSelectBuilder`` when the schema
    declares a primary key and a plain ``SelectBuilder`` otherwise, so the
    primary-key joins are only available where they can be rendered.

    ``str(table)`` is the table name, which lets a ``Table`` be passed
    directly as the target of a join.

    Example:
        >>> customers = define_table("customers", ["id", "mobile_number", "first_name"], primary_key="id")
        >>> orders = define_table("orders", ["id", "customer_id"], primary_key="id")
        >>> print(
        ...     orders.select()
        ...     .where_column_in(
        ...         "customer_id",
        ...         customers.select_column("id").where_column_condition("mobile_number", "!=", "NULL"),
        ...     )
        ...     .build()
        ... )
        SELECT orders.id, orders.customer_id
        FROM orders
        WHERE orders.customer_id IN (SELECT customers.id
        FROM customers
        WHERE customers.mobile_number != 'NULL')
    """

    def __init__(self, schema: TableSchema, settings: Optional[TableQuerySettings] = None):
        """Initialize the factory.

        Args:
            schema: Resolved schema of the record type
            settings: Rendering settings; defaults to ``get_settings()``
        """
        self.schema = schema
        self.settings = settings or get_settings()

    def __str__(self) -> str:
        return self.schema.table

    def __repr__(self) -> str:
        return f"Table({self.schema.table!r}, alias={self.schema.alias!r}, primary_key={self.schema.primary_key!r})"

    @property
    def name(self) -> str:
        return self.schema.table

    @property
    def alias(self) -> str:
        return self.schema.alias

    @property
    def primary_key(self) -> str:
        return self.schema.primary_key

    @property
    def select_builder_class(self) -> Type[SelectBuilder]:
        if self.schema.has_primary_key:
            return KeyedSelectBuilder
        return SelectBuilder

    def _select_builder(self, selected: str) -> SelectBuilder:
        return self.select_builder_class(
            table_schema=self.schema,
            settings=self.settings,
            selected=selected,
        )

    def select(self) -> SelectBuilder:
        """Start a SELECT of every declared column in declaration order."""
        return self._select_builder(self.schema.qualified_column_list)

    def select_column(self, column: str) -> SelectBuilder:
        """Start a SELECT of a single column."""
        return self._select_builder(self.schema.qualified(column))

    def select_aggregate_over(self, column: str, function: str) -> SelectBuilder:
        return self._select_builder(f"{function.upper()}({self.schema.qualified(column)})")

    def select_aggregate_over_as(self, column: str, function: str, alias: str) -> SelectBuilder:
        return self._select_builder(f"{function.upper()}({self.schema.qualified(column)}) AS {alias}")

    def select_aggregate(self, function: str, over: str) -> SelectBuilder:
        """Start a SELECT of ``FUNCTION(over)`` for a raw ``over`` expression."""
        return self._select_builder(f"{function.upper()}({over})")

    def select_aggregate_as(self, function: str, over: str, alias: str) -> SelectBuilder:
        return self._select_builder(f"{function.upper()}({over}) AS {alias}")

    def select_expression(self, raw: str) -> SelectBuilder:
        return self._select_builder(raw)

    def select_expression_as(self, raw: str, alias: str) -> SelectBuilder:
        return self._select_builder(f"({raw}) AS {alias}")

    def insert(self) -> InsertBuilder:
        return InsertBuilder(table_schema=self.schema, settings=self.settings)

    def update(self) -> UpdateBuilder:
        return UpdateBuilder(table_schema=self.schema, settings=self.settings)

    def delete(self) -> DeleteBuilder:
        return DeleteBuilder(table_schema=self.schema, settings=self.settings)


def define_table(
    table: str,
    columns: Sequence[str],
    primary_key: str = "",
    alias: Optional[str] = None,
    settings: Optional[TableQuerySettings] = None,
) -> Table:
    """Create a ``Table`` from bare column names.

    Args:
        table: Bare table name
        columns: Bare column names in declaration order
        primary_key: Primary-key column, empty for none
        alias: Optional alias used to qualify columns and in FROM
        settings: Rendering settings; defaults to ``get_settings()``

    Returns:
        Table factory for the schema
    """
    schema = TableSchema.from_columns(table, columns, primary_key=primary_key, alias=alias)
    return Table(schema, settings=settings)
