"""Schema descriptors consumed by the query builders."""

from tablequery.schema.descriptor import Column, TableSchema, is_valid_identifier

__all__ = [
    "Column",
    "TableSchema",
    "is_valid_identifier",
]
