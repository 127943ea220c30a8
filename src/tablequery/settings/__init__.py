"""Settings module providing configuration management for tablequery.

Configuration is built on Pydantic Settings.

Configuration Sources (precedence order):
    1. Explicit keyword arguments to ``TableQuerySettings(...)``
    2. Environment Variables (``TABLEQUERY_`` prefix, case-insensitive)
    3. ``.env`` file in the working directory
    4. Default Values in code (lowest priority)

Quick Start:
    >>> from tablequery.settings import get_settings
    >>>
    >>> settings = get_settings()
    >>> settings.escape_literals
    False
"""

from .main import TableQuerySettings, get_settings, _reload_settings

__all__ = [
    "TableQuerySettings",
    "get_settings",
]
