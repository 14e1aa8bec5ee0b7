"""SQLAlchemy-based SQL engine for SQL Server-compatible endpoints."""

import time
from typing import TYPE_CHECKING, Any, Dict, Optional
from urllib import parse

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.pool import NullPool

from adlsproxy.common.exceptions import ProxyError, connection_error, query_execution_error
from adlsproxy.compute.auth import get_access_token_struct
from adlsproxy.compute.types import ResultSet
from adlsproxy.logging import get_logger
from adlsproxy.utils.decorators import retry_with_backoff, traced

if TYPE_CHECKING:
    from adlsproxy.settings import SqlSettings

logger = get_logger(__name__)

# pyodbc connection attribute carrying an Azure AD access token
SQL_COPT_SS_ACCESS_TOKEN = 1256


def _is_retryable(exc: Exception) -> bool:
    return getattr(exc, "is_retryable", False)


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


class SQLEngine:
    """Executes literal SQL text against one server/database pair.

    An engine is created per request: the target server and database come
    from the request document. Connections are not pooled; each call
    opens one connection and closes it when the result is materialized.

    Example:
        >>> engine = SQLEngine(settings.sql, server="ws-ondemand.sql.azuresynapse.net", database="lake")
        >>> result = engine.execute("SELECT COUNT(*) FROM [lake].[dbo].[items];")
        >>> result.rows[0][0]
        42
    """

    def __init__(self, settings: 'SqlSettings', server: str, database: str):
        """Initialize SQL engine.

        Args:
            settings: SQL connection and authentication settings
            server: SQL endpoint host name
            database: Initial catalog
        """
        self.settings = settings
        self.server = server
        self.database = database
        self._engine: Optional[Engine] = None

    def build_connection_string(self) -> str:
        """Assemble the ODBC connection string (no credentials)."""
        parts = [
            f"DRIVER={{{self.settings.odbc_driver}}}",
            f"SERVER={self.server}",
            f"DATABASE={self.database}",
            f"Encrypt={_yes_no(self.settings.encrypt)}",
            f"TrustServerCertificate={_yes_no(self.settings.trust_server_certificate)}",
            f"Connection Timeout={self.settings.connection_timeout}",
        ]
        return ";".join(parts) + ";"

    @property
    def engine(self) -> Engine:
        """Get or create the SQLAlchemy engine."""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        """Create a non-pooling SQLAlchemy engine authenticated with Azure AD.

        Raises:
            ProxyError: If the token or the engine cannot be created
        """
        odbc_str = self.build_connection_string()
        logger.info("Connection parameters", extra={"connection_string": odbc_str})

        token_struct = get_access_token_struct(self.settings)
        url = f"mssql+pyodbc:///?odbc_connect={parse.quote_plus(odbc_str)}"

        try:
            return create_engine(
                url,
                poolclass=NullPool,
                connect_args={
                    "attrs_before": {SQL_COPT_SS_ACCESS_TOKEN: token_struct},
                    "autocommit": True,
                },
            )
        except Exception as e:
            raise connection_error(
                "Failed to create SQL engine",
                server=self.server,
                database=self.database,
                cause=e,
                is_retryable=False,
            )

    def _connect(self) -> Connection:
        try:
            return self.engine.connect()
        except ProxyError:
            raise
        except (OperationalError, InterfaceError) as e:
            raise connection_error(
                f"Failed to connect to {self.server}",
                server=self.server,
                database=self.database,
                cause=e,
            )

    def connect(self) -> Connection:
        """Open a connection, retrying transient failures with backoff."""
        connect = retry_with_backoff(
            max_retries=self.settings.max_connect_retries,
            initial_delay=self.settings.retry_delay_seconds,
            retry_condition=_is_retryable,
        )(self._connect)
        return connect()

    def _span_attributes(self, query: str) -> Dict[str, Any]:
        sanitized_query = (query or "").strip()
        if len(sanitized_query) > 4096:
            sanitized_query = f"{sanitized_query[:4093]}..."
        return {
            "db.system": "mssql",
            "db.name": self.database,
            "server.address": self.server,
            "db.statement": sanitized_query,
            "db.statement.length": len(sanitized_query),
        }

    @traced(
        span_name="adlsproxy.compute.sql.execute",
        attribute_getter=lambda self, query: self._span_attributes(query),
    )
    def execute(self, query: str) -> ResultSet:
        """Execute a statement and materialize its result set.

        The statement is sent to the driver as-is, without bind parameter
        parsing.

        Args:
            query: Literal SQL text

        Returns:
            ResultSet with column names and all rows; empty when the
            statement returns no rows

        Raises:
            ProxyError: CONNECTION_ERROR / AUTH_ERROR if the connection
                cannot be opened, QUERY_EXECUTION_ERROR if execution fails
        """
        start_time = time.time()
        conn = self.connect()
        try:
            result = conn.exec_driver_sql(query)
            if result.returns_rows:
                result_set = ResultSet.from_rows(result.keys(), result.fetchall())
            else:
                result_set = ResultSet()
        except DBAPIError as exc:
            raise query_execution_error(query, exc)
        finally:
            conn.close()

        duration = time.time() - start_time
        logger.info(
            "SQL query executed",
            extra={
                "db.server": self.server,
                "db.name": self.database,
                "row_count": str(result_set.row_count),
                "duration.seconds": f"{duration:.6f}",
            },
        )
        return result_set

    def dispose(self) -> None:
        """Release the underlying SQLAlchemy engine."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def __enter__(self) -> "SQLEngine":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()
