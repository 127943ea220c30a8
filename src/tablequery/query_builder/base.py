from typing import Any, ClassVar, Dict

from pydantic import Field

from tablequery.constants.sql import QueryType
from tablequery.logging import get_logger
from tablequery.schema import TableSchema
from tablequery.settings import TableQuerySettings, get_settings
from tablequery.types.base import TQBaseModel

logger = get_logger(__name__)


def render_span_attributes(builder: "BaseBuilder", *args: Any, **kwargs: Any) -> Dict[str, Any]:
    """Span attributes for a terminal render call."""
    return {
        "tablequery.table": builder.table,
        "tablequery.query_type": builder.query_type.value,
    }


class BaseBuilder(TQBaseModel):
    """Shared state and helpers for all statement builders.

    A builder holds a reference to the table's schema and the settings it
    renders with. Builders are frozen: every chaining operation returns a
    new builder via ``model_copy`` and leaves the receiver untouched, so a
    caller may branch several statements from one intermediate builder.

    Values are embedded as single-quoted literals. Unless
    ``settings.escape_literals`` is enabled they are interpolated verbatim,
    so callers must only pass trusted values. The ``*_str`` operations
    inject raw fragments and are never quoted or checked.
    """

    query_type: ClassVar[QueryType] = QueryType.UNKNOWN

    table_schema: TableSchema
    settings: TableQuerySettings = Field(default_factory=get_settings, repr=False, exclude=True)

    @property
    def table(self) -> str:
        return self.table_schema.table

    @property
    def alias(self) -> str:
        return self.table_schema.alias

    @property
    def primary_key(self) -> str:
        return self.table_schema.primary_key

    def quote_literal(self, value: Any) -> str:
        """Quote a value as an SQL string literal.

        Args:
            value: Any value; it is converted with ``str()``

        Returns:
            The value wrapped in single quotes, with embedded quotes doubled
            when ``escape_literals`` is enabled
        """
        text = str(value)
        if self.settings.escape_literals:
            text = text.replace("'", "''")
        return f"'{text}'"

    def _log_render(self, sql: str) -> None:
        logger.debug(
            "Rendered %s statement for table %s",
            self.query_type.value,
            self.table,
            extra={"sql": sql},
        )
