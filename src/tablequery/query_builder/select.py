"""SELECT statement builder.

The select builder accumulates fragments in separate clause lists and
renders them in a fixed order. Every fragment is stored fully rendered,
so accumulation never deduplicates or reorders.

Example:
    >>> orders = define_table(
    ...     "orders", ["id", "customer_id", "order_status", "created_at"], primary_key="id"
    ... )
    >>> sql = (
    ...     orders.select()
    ...     .left_join_by_column("customer_id", "customers", "id")
    ...     .where_column("order_status", "PENDING")
    ...     .order_by_column_desc("created_at")
    ...     .build()
    ... )
    >>> print(sql)
    SELECT orders.id, orders.customer_id, orders.order_status, orders.created_at
    FROM orders
    LEFT JOIN customers ON customers.id = orders.customer_id
    WHERE orders.order_status = 'PENDING'
    ORDER BY orders.created_at DESC
"""

from typing import Any, ClassVar, Iterable, Optional, Tuple, Union

from pydantic import Field, field_validator, model_validator

from tablequery.common.exceptions import ErrorCode, validation_error
from tablequery.constants.sql import JoinKind, QueryType, SortOrder
from tablequery.query_builder.base import BaseBuilder, render_span_attributes
from tablequery.utils.decorators import traced


def _require_expression(expression: str) -> str:
    """Reject a blank select expression."""
    if not expression or not expression.strip():
        raise validation_error(
            "Select expression must not be blank",
            field="selected",
            value=repr(expression),
            error_code=ErrorCode.INVALID_ARGUMENT,
        )
    return expression


class SelectBuilder(BaseBuilder):
    """Builder for SELECT statements.

    Attributes:
        selected: Comma-joined select expressions; never empty
        joins: Join fragments, each starting with a newline
        where_conditions: Predicates joined with AND
        group_by: GROUP BY keys
        having: HAVING predicates joined with AND
        order_by: ORDER BY keys including direction
        row_limit: Optional LIMIT
    """

    query_type: ClassVar[QueryType] = QueryType.SELECT

    selected: str = Field(..., min_length=1)
    joins: Tuple[str, ...] = ()
    where_conditions: Tuple[str, ...] = ()
    group_by: Tuple[str, ...] = ()
    having: Tuple[str, ...] = ()
    order_by: Tuple[str, ...] = ()
    row_limit: Optional[int] = Field(default=None, ge=0)

    @field_validator("selected")
    @classmethod
    def validate_selected(cls, v: str) -> str:
        return _require_expression(v)

    def _select(self, fragment: str) -> "SelectBuilder":
        _require_expression(fragment)
        return self.model_copy(update={"selected": f"{self.selected}, {fragment}"})

    def _append(self, clause: str, fragment: str) -> "SelectBuilder":
        return self.model_copy(update={clause: getattr(self, clause) + (fragment,)})

    def _join(self, kind: JoinKind, table: Any, key: str, anchor: str) -> "SelectBuilder":
        table = str(table)
        return self._append("joins", f"\n{kind.keyword} {table} ON {table}.{key} = {anchor}")

    # Selection

    def select_column(self, column: str) -> "SelectBuilder":
        return self._select(self.table_schema.qualified(column))

    def select_column_as(self, column: str, alias: str) -> "SelectBuilder":
        return self._select(f"({self.table_schema.qualified(column)}) AS {alias}")

    def select_expression(self, raw: str) -> "SelectBuilder":
        """Append a raw select expression such as ``COUNT(*)`` or ``address_1``."""
        return self._select(raw)

    def select_expression_as(self, raw: str, alias: str) -> "SelectBuilder":
        return self._select(f"({raw}) AS {alias}")

    def select_aggregate_over(self, column: str, function: str) -> "SelectBuilder":
        """Append ``FUNCTION(column)``; the function name is upper-cased."""
        return self._select(f"{function.upper()}({self.table_schema.qualified(column)})")

    def select_aggregate_over_as(self, column: str, function: str, alias: str) -> "SelectBuilder":
        return self._select(f"{function.upper()}({self.table_schema.qualified(column)}) AS {alias}")

    def select_aggregate_as(self, function: str, over: str, alias: str) -> "SelectBuilder":
        """Append ``FUNCTION(over) AS alias`` where ``over`` is a raw expression."""
        return self._select(f"{function.upper()}({over}) AS {alias}")

    # Column-anchored joins

    def join_by_column(self, column: str, table: Any, key: str) -> "SelectBuilder":
        """Append ``JOIN table ON table.key = <column>``.

        The right side of the equality is the qualified name of ``column``
        on this table, so a join can be anchored to any column rather than
        only the primary key. Joining a table against itself works the same
        way once the schema declares an alias.
        """
        return self._join(JoinKind.JOIN, table, key, self.table_schema.qualified(column))

    def inner_join_by_column(self, column: str, table: Any, key: str) -> "SelectBuilder":
        return self._join(JoinKind.INNER, table, key, self.table_schema.qualified(column))

    def left_join_by_column(self, column: str, table: Any, key: str) -> "SelectBuilder":
        return self._join(JoinKind.LEFT, table, key, self.table_schema.qualified(column))

    def right_join_by_column(self, column: str, table: Any, key: str) -> "SelectBuilder":
        return self._join(JoinKind.RIGHT, table, key, self.table_schema.qualified(column))

    def full_join_by_column(self, column: str, table: Any, key: str) -> "SelectBuilder":
        return self._join(JoinKind.FULL, table, key, self.table_schema.qualified(column))

    # Filters

    def where_column(self, column: str, value: Any) -> "SelectBuilder":
        return self._append(
            "where_conditions",
            f"{self.table_schema.qualified(column)} = {self.quote_literal(value)}",
        )

    def where_column_in(self, column: str, values: Any) -> "SelectBuilder":
        """Append ``<column> IN (<values>)``.

        ``values`` may be a raw string, another ``SelectBuilder`` (rendered
        as a subquery) or any other iterable of scalars (rendered as quoted
        literals). When the rendered list is blank the call is a no-op and
        the same builder is returned, so optional filters can be chained
        without a conditional at the call site.
        """
        rendered = self._render_in_list(values)
        if not rendered.strip():
            return self
        return self._append(
            "where_conditions",
            f"{self.table_schema.qualified(column)} IN ({rendered})",
        )

    def where_column_condition(self, column: str, operator: str, value: Any) -> "SelectBuilder":
        """Append ``<column> <operator> '<value>'``; the operator is inserted verbatim."""
        return self._append(
            "where_conditions",
            f"{self.table_schema.qualified(column)} {operator} {self.quote_literal(value)}",
        )

    def having_column(self, column: str, value: Any) -> "SelectBuilder":
        return self._append(
            "having",
            f"{self.table_schema.qualified(column)} = {self.quote_literal(value)}",
        )

    def group_by_column(self, column: str) -> "SelectBuilder":
        return self._append("group_by", self.table_schema.qualified(column))

    def order_by_column(self, column: str, direction: Union[str, SortOrder]) -> "SelectBuilder":
        if isinstance(direction, SortOrder):
            direction = direction.value
        return self._append("order_by", f"{self.table_schema.qualified(column)} {direction}")

    def order_by_column_asc(self, column: str) -> "SelectBuilder":
        return self.order_by_column(column, SortOrder.ASC)

    def order_by_column_desc(self, column: str) -> "SelectBuilder":
        return self.order_by_column(column, SortOrder.DESC)

    # Raw fragments. The caller is responsible for their correctness.

    def where_str(self, raw: str) -> "SelectBuilder":
        return self._append("where_conditions", raw)

    def having_str(self, raw: str) -> "SelectBuilder":
        return self._append("having", raw)

    def group_by_str(self, raw: str) -> "SelectBuilder":
        return self._append("group_by", raw)

    def order_by_str(self, raw: str) -> "SelectBuilder":
        return self._append("order_by", raw)

    def join_str(self, raw: str) -> "SelectBuilder":
        return self._append("joins", f"\n{raw}")

    def limit(self, limit: int) -> "SelectBuilder":
        """Set the row limit, replacing any earlier value."""
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise validation_error(
                f"Limit must be a non-negative integer, got {limit!r}",
                field="limit",
                value=limit,
                error_code=ErrorCode.INVALID_ARGUMENT,
            )
        return self.model_copy(update={"row_limit": limit})

    def _render_in_list(self, values: Any) -> str:
        if isinstance(values, SelectBuilder):
            return values.build()
        if isinstance(values, str):
            return values
        if isinstance(values, (set, frozenset)):
            values = sorted(values, key=str)
        if isinstance(values, Iterable):
            return ", ".join(self.quote_literal(value) for value in values)
        return str(values)

    @traced("tablequery.select.build", attribute_getter=render_span_attributes)
    def build(self) -> str:
        """Render the SELECT statement.

        Rendering is read-only; the builder may be rendered any number of
        times and keeps producing the same text.

        Clause order: SELECT, FROM (with the alias only when it differs
        from the table name), joins in call order, WHERE, GROUP BY,
        HAVING, ORDER BY, LIMIT. Empty clauses are omitted.
        """
        sql = f"SELECT {self.selected}\nFROM {self.table}"
        if self.table_schema.is_aliased:
            sql += f" {self.alias}"

        sql += "".join(self.joins)

        if self.where_conditions:
            sql += "\nWHERE " + " AND ".join(self.where_conditions)

        if self.group_by:
            sql += "\nGROUP BY " + ", ".join(self.group_by)

        if self.having:
            sql += "\nHAVING " + " AND ".join(self.having)

        if self.order_by:
            sql += "\nORDER BY " + ", ".join(self.order_by)

        if self.row_limit is not None:
            sql += f"\nLIMIT {self.row_limit}"

        self._log_render(sql)
        return sql

    def __str__(self) -> str:
        return self.build()


class KeyedSelectBuilder(SelectBuilder):
    """Select builder for tables that declare a primary key.

    Adds the primary-key joins, which render
    ``<KIND> JOIN table ON table.key = <alias>.<primary_key>``. Tables
    without a primary key get a plain ``SelectBuilder`` and these
    operations do not exist on it.
    """

    @model_validator(mode="after")
    def require_primary_key(self) -> "KeyedSelectBuilder":
        if not self.table_schema.has_primary_key:
            raise ValueError(
                f"Table '{self.table_schema.table}' declares no primary key; "
                "use SelectBuilder instead"
            )
        return self

    def _primary_key_join(self, kind: JoinKind, table: Any, key: str) -> "SelectBuilder":
        return self._join(kind, table, key, f"{self.alias}.{self.primary_key}")

    def join(self, table: Any, key: str) -> "SelectBuilder":
        return self._primary_key_join(JoinKind.JOIN, table, key)

    def inner_join(self, table: Any, key: str) -> "SelectBuilder":
        return self._primary_key_join(JoinKind.INNER, table, key)

    def left_join(self, table: Any, key: str) -> "SelectBuilder":
        return self._primary_key_join(JoinKind.LEFT, table, key)

    def right_join(self, table: Any, key: str) -> "SelectBuilder":
        return self._primary_key_join(JoinKind.RIGHT, table, key)

    def full_join(self, table: Any, key: str) -> "SelectBuilder":
        """Append a full join on the primary key.

        With ``settings.legacy_full_join`` the join renders as RIGHT JOIN,
        reproducing the output of earlier releases.
        """
        kind = JoinKind.RIGHT if self.settings.legacy_full_join else JoinKind.FULL
        return self._primary_key_join(kind, table, key)
