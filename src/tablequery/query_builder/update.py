from types import MappingProxyType
from typing import Any, ClassVar, Mapping, Tuple

from tablequery.common.exceptions import malformed_query_error
from tablequery.constants.sql import QueryType
from tablequery.query_builder.base import BaseBuilder, render_span_attributes
from tablequery.utils.decorators import traced


class UpdateBuilder(BaseBuilder):
    """Builder for UPDATE statements.

    Assignments are staged first-write-wins and rendered in staging order.
    There is no ``build()``: the predicate is supplied to the terminal
    call, which returns the finished statement.
    """

    query_type: ClassVar[QueryType] = QueryType.UPDATE

    staged: Tuple[Tuple[str, str], ...] = ()

    @property
    def assignments(self) -> Mapping[str, str]:
        """Read-only view of the staged ``column -> value`` pairs."""
        return MappingProxyType(dict(self.staged))

    def stage_value(self, column: str, value: Any) -> "UpdateBuilder":
        """Stage ``column = value`` unless ``column`` is already staged."""
        name = self.table_schema.bare(column)
        if name in self.assignments:
            return self
        return self.model_copy(update={"staged": self.staged + ((name, str(value)),)})

    def stage_values(self, values: Mapping[str, Any]) -> "UpdateBuilder":
        builder = self
        for column, value in values.items():
            builder = builder.stage_value(column, value)
        return builder

    @traced("tablequery.update.render", attribute_getter=render_span_attributes)
    def update_where_column_eq(self, column: str, value: Any) -> str:
        """Render ``UPDATE ... WHERE <column> = '<value>'``."""
        predicate = f"{self.table_schema.bare(column)} = {self.quote_literal(value)}"
        return self._render(predicate)

    @traced("tablequery.update.render", attribute_getter=render_span_attributes)
    def where_str(self, raw: str) -> str:
        """Render ``UPDATE ... WHERE <raw>`` with the raw predicate inserted verbatim."""
        if not raw or not raw.strip():
            raise malformed_query_error(
                f"Update of '{self.table}' requires a WHERE predicate",
                table=self.table,
                query_type=self.query_type.value,
            )
        return self._render(raw)

    def _render(self, predicate: str) -> str:
        if not self.staged:
            raise malformed_query_error(
                f"Update of '{self.table}' has no staged values",
                table=self.table,
                query_type=self.query_type.value,
            )
        set_clause = ", ".join(
            f"{column} = {self.quote_literal(value)}" for column, value in self.staged
        )
        sql = f"UPDATE {self.table} SET {set_clause} WHERE {predicate}"
        self._log_render(sql)
        return sql
