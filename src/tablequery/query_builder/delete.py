from typing import Any, ClassVar

from tablequery.common.exceptions import malformed_query_error
from tablequery.constants.sql import QueryType
from tablequery.query_builder.base import BaseBuilder, render_span_attributes
from tablequery.utils.decorators import traced


class DeleteBuilder(BaseBuilder):
    """Builder for DELETE statements. Holds no state beyond the schema."""

    query_type: ClassVar[QueryType] = QueryType.DELETE

    @traced("tablequery.delete.render", attribute_getter=render_span_attributes)
    def delete_where_column_eq(self, column: str, value: Any) -> str:
        return self._render(f"{self.table_schema.bare(column)} = {self.quote_literal(value)}")

    @traced("tablequery.delete.render", attribute_getter=render_span_attributes)
    def delete_where_str(self, raw: str) -> str:
        if not raw or not raw.strip():
            raise malformed_query_error(
                f"Delete from '{self.table}' requires a WHERE predicate",
                table=self.table,
                query_type=self.query_type.value,
            )
        return self._render(raw)

    def _render(self, predicate: str) -> str:
        sql = f"DELETE FROM {self.table} WHERE {predicate}"
        self._log_render(sql)
        return sql
