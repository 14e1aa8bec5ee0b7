"""Settings for the proxy, built on Pydantic Settings.

Configuration Sources (precedence order):
    1. Environment variables
    2. ``.env`` file in the working directory
    3. Defaults in code

Environment Variable Naming:
    - Root settings: ``LOG_LEVEL``, ``APP_ENV``
    - SQL settings: ``SQL_`` prefix (e.g., ``SQL_ODBC_DRIVER``,
      ``SQL_MANAGED_IDENTITY_CLIENT_ID``)

Quick Start:
    >>> from adlsproxy.settings import get_settings
    >>> settings = get_settings()
    >>> settings.sql.odbc_driver
    'ODBC Driver 18 for SQL Server'
"""

from .main import ProxySettings, get_settings, _reload_settings
from .base import ProxyBaseSettings
from .sql import SqlSettings

__all__ = [
    "get_settings",
    "ProxySettings",
    "ProxyBaseSettings",
    "SqlSettings",
]
