from tablequery.types.base import TQBaseModel

__all__ = [
    "TQBaseModel",
]
