from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProxyBaseSettings(BaseSettings):
    """Base class for every settings model.

    Values come from environment variables first, then ``.env``, then the
    defaults declared on each field.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__"
    )

    app_env: str = Field(
        default="dev",
        description="Application deployment environment (e.g., dev, qa, prod, local)"
    )
