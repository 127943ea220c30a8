"""SQL and query-related constants.

This module contains the statement, join and sort enums shared by the
schema, the builders and the statement analyzer. It has no dependencies
on other tablequery modules.
"""

from enum import Enum


class QueryType(str, Enum):
    """SQL statement type enumeration.

    Identifies the kind of statement a builder renders. Used for log
    records, telemetry attributes and statement analysis.
    """

    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    UNKNOWN = "UNKNOWN"


class JoinKind(str, Enum):
    """Join flavours understood by the select builder.

    The value is the keyword prefix placed in front of ``JOIN``; the plain
    join has no prefix.
    """

    JOIN = ""
    INNER = "INNER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    FULL = "FULL"

    @property
    def keyword(self) -> str:
        """Full join keyword, e.g. ``LEFT JOIN``."""
        if not self.value:
            return "JOIN"
        return f"{self.value} JOIN"


class SortOrder(str, Enum):
    """ORDER BY directions."""

    ASC = "ASC"
    DESC = "DESC"
