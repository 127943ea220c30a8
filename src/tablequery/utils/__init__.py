"""Utility helpers shared across tablequery modules."""

from tablequery.utils.decorators import traced

__all__ = [
    "traced",
]
