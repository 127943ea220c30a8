"""Query builder module for SQL statement generation.

Builders only generate SQL strings; nothing here connects to or executes
against a database.

Architecture:
    - base.py: shared builder state (schema, settings, literal quoting)
    - select.py: SelectBuilder and KeyedSelectBuilder
    - insert.py, update.py, delete.py: DML builders
    - factory.py: Table, the per-record entry point, and define_table()
    - analyzer.py: SQLGlot-based analysis of rendered statements

Example:
    >>> from tablequery.query_builder import define_table
    >>>
    >>> customers = define_table("customers", ["id", "first_name", "mobile_number"], primary_key="id")
    >>> customers.update().stage_value("first_name", "JOHN").update_where_column_eq("mobile_number", "9876543210")
    "UPDATE customers SET first_name = 'JOHN' WHERE mobile_number = '9876543210'"
    >>> customers.delete().delete_where_column_eq("mobile_number", "9876543210")
    "DELETE FROM customers WHERE mobile_number = '9876543210'"

Security:
    Values are wrapped in single quotes without escaping unless the
    ``escape_literals`` setting is enabled. The ``*_str`` operations insert
    raw fragments verbatim. Both are only safe with trusted input.
"""

from tablequery.query_builder.analyzer import StatementAnalyzer, StatementDependencies
from tablequery.query_builder.base import BaseBuilder
from tablequery.query_builder.delete import DeleteBuilder
from tablequery.query_builder.factory import Table, define_table
from tablequery.query_builder.insert import InsertBuilder
from tablequery.query_builder.select import KeyedSelectBuilder, SelectBuilder
from tablequery.query_builder.update import UpdateBuilder

__all__ = [
    "BaseBuilder",
    "SelectBuilder",
    "KeyedSelectBuilder",
    "InsertBuilder",
    "UpdateBuilder",
    "DeleteBuilder",
    "Table",
    "define_table",
    "StatementAnalyzer",
    "StatementDependencies",
]
