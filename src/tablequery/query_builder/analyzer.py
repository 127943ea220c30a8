"""Statement analysis for rendered SQL.

This module parses statements with SQLGlot to report which tables a
statement reads from and which table it writes to. It is used to check
what a chain of builder calls actually touches, e.g. that a subquery
filter pulls in the expected table, without executing anything.

Example:
    >>> analyzer = StatementAnalyzer()
    >>> deps = analyzer.extract_dependencies(
    ...     "SELECT orders.id FROM orders LEFT JOIN customers ON customers.id = orders.customer_id"
    ... )
    >>> sorted(deps.reads_from)
    ['customers', 'orders']
    >>> deps.writes_to is None
    True
"""

from typing import FrozenSet, Optional, Set

import sqlglot
from sqlglot import exp
from sqlglot.errors import ParseError

from tablequery.common.exceptions import configuration_error, sql_parse_error, validation_error
from tablequery.constants.sql import QueryType
from tablequery.logging import get_logger
from tablequery.settings import TableQuerySettings, get_settings
from tablequery.types.base import TQBaseModel

logger = get_logger(__name__)

_QUERY_TYPES = (
    (exp.Select, QueryType.SELECT),
    (exp.Insert, QueryType.INSERT),
    (exp.Update, QueryType.UPDATE),
    (exp.Delete, QueryType.DELETE),
)


class StatementDependencies(TQBaseModel):
    """Tables referenced by one statement.

    Attributes:
        query_type: Statement type
        reads_from: Tables read (FROM, JOIN, subqueries), excluding CTEs
        writes_to: Target of an INSERT, UPDATE or DELETE
    """
    query_type: QueryType
    reads_from: FrozenSet[str] = frozenset()
    writes_to: Optional[str] = None


class StatementAnalyzer:
    """Analyzes rendered statements using the SQLGlot parser.

    Attributes:
        dialect: SQLGlot dialect used for parsing (``settings.dialect``)

    Raises:
        TableQueryError: CONFIG_ERROR when SQLGlot does not know the dialect
    """

    def __init__(self, settings: Optional[TableQuerySettings] = None):
        self.settings = settings or get_settings()
        self.dialect = self.settings.dialect
        try:
            sqlglot.Dialect.get_or_raise(self.dialect)
        except ValueError as exc:
            raise configuration_error(
                f"Unknown SQLGlot dialect '{self.dialect}'",
                config_key="dialect",
                cause=exc,
            ) from exc

    def extract_dependencies(self, sql: str) -> StatementDependencies:
        """Extract source and target tables from a statement.

        Args:
            sql: SQL statement to analyze

        Returns:
            StatementDependencies for the statement

        Raises:
            TableQueryError: VALIDATION_ERROR for blank input,
                SQL_PARSE_ERROR when SQLGlot cannot parse the statement
        """
        if not sql or not sql.strip():
            raise validation_error("SQL statement must be a non-empty string.", field="sql")

        try:
            parsed = sqlglot.parse_one(sql, dialect=self.dialect)
        except ParseError as exc:
            raise sql_parse_error(
                f"Could not parse statement with dialect '{self.dialect}'", sql, cause=exc
            ) from exc

        target = self._target_table(parsed)
        ctes = self._cte_names(parsed)

        reads: Set[str] = set()
        for table in parsed.find_all(exp.Table):
            if table is target:
                continue
            name = self._table_name(table)
            if name in ctes:
                continue
            reads.add(name)

        dependencies = StatementDependencies(
            query_type=self._query_type(parsed),
            reads_from=frozenset(reads),
            writes_to=self._table_name(target) if target is not None else None,
        )
        logger.debug(
            "Analyzed %s statement",
            dependencies.query_type,
            extra={"reads_from": sorted(dependencies.reads_from), "writes_to": dependencies.writes_to},
        )
        return dependencies

    def _query_type(self, ast: exp.Expression) -> QueryType:
        for expression_type, query_type in _QUERY_TYPES:
            if isinstance(ast, expression_type):
                return query_type
        return QueryType.UNKNOWN

    def _target_table(self, ast: exp.Expression) -> Optional[exp.Table]:
        """Target table node of an INSERT, UPDATE or DELETE."""
        if not isinstance(ast, (exp.Insert, exp.Update, exp.Delete)):
            return None
        target = ast.this
        if isinstance(target, exp.Schema):
            target = target.this
        if isinstance(target, exp.Table):
            return target
        return None

    def _cte_names(self, ast: exp.Expression) -> Set[str]:
        return {cte.alias for cte in ast.find_all(exp.CTE) if cte.alias}

    def _table_name(self, table: exp.Table) -> str:
        return ".".join(part for part in (table.db, table.name) if part)
