from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import SettingsConfigDict

from adlsproxy.constants.query import DEFAULT_SCHEMA
from .base import ProxyBaseSettings


class SqlSettings(ProxyBaseSettings):
    """Connection and authentication settings for the SQL backend.

    The server and database come from each request; everything else about
    the connection is configured here with the ``SQL_`` prefix.

    Authentication:
        - ``SQL_TENANT_ID`` + ``SQL_CLIENT_ID`` + ``SQL_CLIENT_SECRET`` set:
          service principal (ClientSecretCredential).
        - Otherwise: DefaultAzureCredential, pinned to
          ``SQL_MANAGED_IDENTITY_CLIENT_ID`` when a user-assigned identity
          is used.
    """
    model_config = SettingsConfigDict(
        env_prefix="SQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    odbc_driver: str = Field(
        default="ODBC Driver 18 for SQL Server",
        description="ODBC driver name used in the connection string"
    )
    encrypt: bool = Field(default=True, description="Encrypt the connection")
    trust_server_certificate: bool = Field(
        default=False,
        description="Skip server certificate validation (local development only)"
    )
    connection_timeout: int = Field(default=30, ge=1, le=600, description="Login timeout in seconds")
    schema_name: str = Field(
        default=DEFAULT_SCHEMA,
        min_length=1,
        description="Schema owning every queried entity"
    )

    tenant_id: Optional[str] = Field(default=None, description="Azure AD tenant for service principal auth")
    client_id: Optional[str] = Field(default=None, description="Service principal client ID")
    client_secret: Optional[SecretStr] = Field(default=None, description="Service principal client secret")
    managed_identity_client_id: Optional[str] = Field(
        default=None,
        description="Client ID of a user-assigned managed identity"
    )
    token_scope: str = Field(
        default="https://database.windows.net/.default",
        description="Azure AD scope requested for the SQL access token"
    )

    max_connect_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Retries for transient connection failures"
    )
    retry_delay_seconds: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="Initial delay between connection retries in seconds"
    )

    @field_validator("odbc_driver")
    @classmethod
    def strip_driver_braces(cls, v: str) -> str:
        """Accept the driver with or without surrounding braces."""
        return v.strip().strip("{}")

    @property
    def uses_service_principal(self) -> bool:
        """True when service principal credentials are fully configured."""
        return bool(self.tenant_id and self.client_id and self.client_secret)
