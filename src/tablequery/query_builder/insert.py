"""INSERT statement builder.

Values are staged per column. Each column holds one value per row, and
rendering transposes the columns into one value tuple per row.
"""

from types import MappingProxyType
from typing import Any, ClassVar, Iterable, Mapping, Optional, Tuple

from tablequery.common.exceptions import (
    ErrorCode,
    malformed_query_error,
    row_shape_mismatch_error,
    validation_error,
)
from tablequery.constants.sql import QueryType
from tablequery.query_builder.base import BaseBuilder, render_span_attributes
from tablequery.utils.decorators import traced


class InsertBuilder(BaseBuilder):
    """Builder for INSERT statements.

    Staging follows a first-write-wins policy: once a column has values,
    later staging calls for that column are ignored. Columns render in the
    order they were first staged.

    Example:
        >>> customers.insert().stage("first_name", "Prakash").stage("mobile_number", 9876543210).build()
        "INSERT INTO customers (first_name, mobile_number) VALUES ('Prakash', '9876543210')"
    """

    query_type: ClassVar[QueryType] = QueryType.INSERT

    staged: Tuple[Tuple[str, Tuple[str, ...]], ...] = ()
    row_limit: Optional[int] = None

    @property
    def values(self) -> Mapping[str, Tuple[str, ...]]:
        """Read-only view of the staged values, keyed by bare column name."""
        return MappingProxyType(dict(self.staged))

    def stage(self, column: str, value: Any) -> "InsertBuilder":
        """Stage a single-row value for ``column`` unless it is already staged."""
        return self.stage_many(column, (value,))

    def stage_many(self, column: str, values: Iterable[Any]) -> "InsertBuilder":
        """Stage one value per row for ``column`` unless it is already staged.

        Args:
            column: Declared column, bare or qualified
            values: Row values in row order

        Returns:
            Builder with the column staged, or this builder unchanged when
            the column already has values
        """
        if isinstance(values, (str, bytes)):
            raise validation_error(
                "stage_many() expects an iterable of row values, not a string",
                field="values",
                value=values,
                error_code=ErrorCode.INVALID_ARGUMENT,
            )
        name = self.table_schema.bare(column)
        if name in self.values:
            return self
        staged = tuple(str(value) for value in values)
        return self.model_copy(update={"staged": self.staged + ((name, staged),)})

    def stage_record(self, record: Mapping[str, Any]) -> "InsertBuilder":
        """Stage every ``column -> value`` pair of ``record`` in mapping order."""
        builder = self
        for column, value in record.items():
            builder = builder.stage(column, value)
        return builder

    def limit(self, limit: int) -> "InsertBuilder":
        """Accepted for symmetry with the select builder; not rendered."""
        return self.model_copy(update={"row_limit": limit})

    @property
    def row_count(self) -> int:
        """Number of rows staged.

        Raises:
            MalformedQuery: If nothing or no rows are staged
            RowShapeMismatch: If columns hold differing numbers of values
        """
        values = self.values
        if not values:
            raise malformed_query_error(
                f"Insert into '{self.table}' has no staged columns",
                table=self.table,
                query_type=self.query_type.value,
            )

        counts = {column: len(staged) for column, staged in values.items()}
        if len(set(counts.values())) > 1:
            raise row_shape_mismatch_error(self.table, counts)

        rows = next(iter(counts.values()))
        if rows == 0:
            raise malformed_query_error(
                f"Insert into '{self.table}' has no staged rows",
                table=self.table,
                query_type=self.query_type.value,
            )
        return rows

    @traced("tablequery.insert.build", attribute_getter=render_span_attributes)
    def build(self) -> str:
        """Render the INSERT statement with one value tuple per staged row."""
        rows = self.row_count
        values = self.values
        columns = list(values)

        tuples = []
        for index in range(rows):
            row = ", ".join(self.quote_literal(values[column][index]) for column in columns)
            tuples.append(f"({row})")

        sql = f"INSERT INTO {self.table} ({', '.join(columns)}) VALUES {', '.join(tuples)}"
        self._log_render(sql)
        return sql
