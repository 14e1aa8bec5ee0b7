from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import SettingsConfigDict

from adlsproxy.common.exceptions import configuration_error

from .base import ProxyBaseSettings
from .sql import SqlSettings

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ProxySettings(ProxyBaseSettings):
    """Root settings object aggregating every domain of configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__"
    )

    log_level: str = Field(default="INFO", description="Root log level")
    structured_logging: bool = Field(
        default=False,
        description="Replace the host's log handlers with JSON output on stdout"
    )
    sql: SqlSettings = Field(
        default_factory=SqlSettings,
        description="SQL backend connection and authentication"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Invalid log level '{v}'. Expected one of {sorted(_LOG_LEVELS)}.")
        return level


_settings: Optional[ProxySettings] = None


def get_settings(force_reload: bool = False) -> ProxySettings:
    """Get the singleton settings instance.

    Settings are read from the environment on first access and reused
    afterwards.

    Args:
        force_reload: Build a fresh instance even if one exists. Useful
            for tests or after environment variables change.

    Returns:
        ProxySettings: The singleton settings instance

    Raises:
        ProxyError: With CONFIG_ERROR code if the environment holds invalid values

    Example:
        ```python
        settings = get_settings()
        assert settings is get_settings()
        assert get_settings(force_reload=True) is not settings
        ```
    """
    global _settings

    if _settings is None or force_reload:
        try:
            _settings = ProxySettings()
        except ValidationError as e:
            raise configuration_error(
                f"Invalid proxy configuration: {e.error_count()} error(s)",
                details={"fields": [".".join(str(loc) for loc in err["loc"]) for err in e.errors()]},
                cause=e,
            )

    return _settings


def _reload_settings() -> ProxySettings:
    """Force reload of settings. Primarily for tests."""
    global _settings
    _settings = None
    return get_settings(force_reload=True)
