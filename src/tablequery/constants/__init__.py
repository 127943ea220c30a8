"""Constants module for tablequery.

Enumerations used throughout the package. As the lowest layer this module
has no dependencies on other tablequery modules.
"""

from tablequery.constants.sql import JoinKind, QueryType, SortOrder

__all__ = [
    "QueryType",
    "JoinKind",
    "SortOrder",
]
