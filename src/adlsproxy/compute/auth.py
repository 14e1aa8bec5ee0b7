"""Azure AD authentication for SQL connections."""

import struct
from typing import TYPE_CHECKING

from adlsproxy.common.exceptions import auth_error
from adlsproxy.logging import get_logger

if TYPE_CHECKING:
    from azure.core.credentials import TokenCredential
    from adlsproxy.settings import SqlSettings

logger = get_logger(__name__)


def get_credential(settings: 'SqlSettings') -> 'TokenCredential':
    """Pick the Azure credential for the SQL backend.

    A fully configured service principal wins; otherwise
    ``DefaultAzureCredential`` is used, which resolves to the function's
    managed identity when deployed and to developer credentials locally.
    """
    from azure.identity import ClientSecretCredential, DefaultAzureCredential

    if settings.uses_service_principal:
        return ClientSecretCredential(
            tenant_id=settings.tenant_id,
            client_id=settings.client_id,
            client_secret=settings.client_secret.get_secret_value(),
        )

    if settings.managed_identity_client_id:
        return DefaultAzureCredential(managed_identity_client_id=settings.managed_identity_client_id)
    return DefaultAzureCredential()


def get_access_token_struct(settings: 'SqlSettings') -> bytes:
    """Get an Azure AD token formatted for the SQL Server ODBC driver.

    Returns:
        Length-prefixed UTF-16-LE token bytes for ``SQL_COPT_SS_ACCESS_TOKEN``

    Raises:
        ProxyError: With AUTH_ERROR code if no token can be acquired
    """
    credential = get_credential(settings)
    try:
        token = credential.get_token(settings.token_scope)
    except Exception as exc:
        raise auth_error(
            "Failed to acquire an Azure AD token for the SQL endpoint",
            details={"scope": settings.token_scope},
            cause=exc,
        )

    logger.debug("SQL access token acquired", extra={"token.expires_on": str(token.expires_on)})

    token_bytes = token.token.encode("utf-16-le")
    return struct.pack(f"<I{len(token_bytes)}s", len(token_bytes), token_bytes)
