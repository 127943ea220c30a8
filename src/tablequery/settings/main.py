import logging
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tablequery.common.exceptions import ErrorCode, configuration_error


class TableQuerySettings(BaseSettings):
    """Runtime configuration for statement rendering.

    Values are read from ``TABLEQUERY_*`` environment variables or a local
    ``.env`` file. Defaults reproduce the historical output byte for byte.
    """

    model_config = SettingsConfigDict(
        env_prefix="TABLEQUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Level used by setup_logging() when no explicit level is passed "
                    "(DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )
    escape_literals: bool = Field(
        default=False,
        description="Double embedded single quotes in every quoted literal. "
                    "Disabled by default, so values are interpolated verbatim and "
                    "callers are responsible for passing trusted input."
    )
    legacy_full_join: bool = Field(
        default=False,
        description="Render the primary-key full_join() as RIGHT JOIN, matching the "
                    "output of earlier releases. Column-anchored full joins always "
                    "render FULL JOIN."
    )
    dialect: str = Field(
        default="mysql",
        min_length=1,
        description="sqlglot dialect used by the statement analyzer to parse rendered SQL."
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the level name and reject unknown levels."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(
                f"Invalid log level '{v}'. "
                "Expected one of DEBUG, INFO, WARNING, ERROR, CRITICAL."
            )
        return level


_settings: Optional[TableQuerySettings] = None


def get_settings(force_reload: bool = False) -> TableQuerySettings:
    """Get the singleton settings instance.

    Settings are loaded from the environment on first access and reused
    afterwards. Builders created without explicit settings use this
    instance.

    Args:
        force_reload: If True, creates a new settings instance even if
                     one already exists. Useful for testing or when
                     environment variables have changed.

    Returns:
        The singleton TableQuerySettings instance

    Raises:
        TableQueryError: CONFIG_INVALID when the environment holds values
            that fail validation

    Example:
        ```python
        settings = get_settings()
        assert settings is get_settings()

        new_settings = get_settings(force_reload=True)
        assert new_settings is not settings
        ```
    """
    global _settings

    if _settings is None or force_reload:
        try:
            _settings = TableQuerySettings()
        except ValidationError as exc:
            fields = sorted({str(error["loc"][0]) for error in exc.errors() if error["loc"]})
            raise configuration_error(
                "Invalid tablequery settings in environment",
                config_key=", ".join(fields) or None,
                error_code=ErrorCode.CONFIG_INVALID,
                cause=exc,
            ) from exc

    return _settings


def _reload_settings() -> TableQuerySettings:
    """Force reload of settings.

    This is primarily for testing purposes where you need to reset
    the singleton instance.

    Returns:
        A fresh TableQuerySettings instance
    """
    global _settings
    _settings = None
    return get_settings(force_reload=True)
