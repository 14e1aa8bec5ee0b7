"""Unit tests for the SQL engine and Azure AD token handling."""

import struct
from types import SimpleNamespace
from unittest.mock import MagicMock, Mock, patch

import pytest
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.pool import NullPool

from adlsproxy.common.exceptions import ErrorCode, ProxyError, auth_error
from adlsproxy.compute import SQL_COPT_SS_ACCESS_TOKEN, ResultSet, SQLEngine
from adlsproxy.compute.auth import get_access_token_struct, get_credential
from adlsproxy.settings import SqlSettings


@pytest.fixture
def sql_settings():
    return SqlSettings(_env_file=None, max_connect_retries=2, retry_delay_seconds=0.5)


@pytest.fixture
def no_sleep(monkeypatch):
    delays = []
    monkeypatch.setattr("adlsproxy.utils.decorators.time.sleep", delays.append)
    return delays


def _cursor_result(columns, rows):
    result = Mock()
    result.returns_rows = True
    result.keys.return_value = columns
    result.fetchall.return_value = rows
    return result


@pytest.fixture
def connection():
    conn = MagicMock()
    conn.exec_driver_sql.return_value = _cursor_result(["EntryNo", "Amount"], [(1, 10), (2, 20)])
    return conn


@pytest.fixture
def sa_engine(connection):
    engine = MagicMock()
    engine.connect.return_value = connection
    return engine


@pytest.fixture
def patched_engine(sa_engine):
    with patch("adlsproxy.compute.engine.get_access_token_struct", return_value=b"token") as token, \
            patch("adlsproxy.compute.engine.create_engine", return_value=sa_engine) as create:
        yield SimpleNamespace(token=token, create=create, engine=sa_engine)


class TestConnectionString:
    """Test ODBC connection string assembly."""

    def test_defaults(self, sql_settings):
        """Test the default driver and encryption flags."""
        engine = SQLEngine(sql_settings, server="ws.sql.azuresynapse.net", database="lake")

        assert engine.build_connection_string() == (
            "DRIVER={ODBC Driver 18 for SQL Server};"
            "SERVER=ws.sql.azuresynapse.net;"
            "DATABASE=lake;"
            "Encrypt=yes;"
            "TrustServerCertificate=no;"
            "Connection Timeout=30;"
        )

    def test_no_credentials_in_connection_string(self):
        """Test service principal secrets never appear in the string."""
        settings = SqlSettings(
            _env_file=None,
            tenant_id="t",
            client_id="c",
            client_secret="super-secret",
        )
        assert "super-secret" not in SQLEngine(settings, "srv", "db").build_connection_string()

    def test_driver_braces_are_normalized(self):
        """Test a braced driver name is not double-braced."""
        settings = SqlSettings(_env_file=None, odbc_driver="{ODBC Driver 17 for SQL Server}")
        assert SQLEngine(settings, "srv", "db").build_connection_string().startswith(
            "DRIVER={ODBC Driver 17 for SQL Server};"
        )


class TestExecute:
    """Test statement execution."""

    def test_engine_uses_token_and_no_pool(self, sql_settings, patched_engine):
        """Test the engine is created with the access token and without pooling."""
        SQLEngine(sql_settings, "srv", "db").execute("SELECT 1;")

        args, kwargs = patched_engine.create.call_args
        assert args[0].startswith("mssql+pyodbc:///?odbc_connect=")
        assert kwargs["poolclass"] is NullPool
        assert kwargs["connect_args"]["attrs_before"] == {SQL_COPT_SS_ACCESS_TOKEN: b"token"}

    def test_rows_materialized(self, sql_settings, patched_engine, connection):
        """Test rows and column names are returned and the connection closed."""
        result = SQLEngine(sql_settings, "srv", "db").execute("SELECT * FROM [db].[dbo].[t];")

        assert result == ResultSet(columns=("EntryNo", "Amount"), rows=((1, 10), (2, 20)))
        connection.exec_driver_sql.assert_called_once_with("SELECT * FROM [db].[dbo].[t];")
        connection.close.assert_called_once()

    def test_statement_without_rows(self, sql_settings, patched_engine, connection):
        """Test a statement with no result set yields an empty ResultSet."""
        connection.exec_driver_sql.return_value = Mock(returns_rows=False)

        assert SQLEngine(sql_settings, "srv", "db").execute("SET NOCOUNT ON;") == ResultSet()

    def test_query_failure_not_retried(self, sql_settings, patched_engine, connection, no_sleep):
        """Test execution errors are wrapped once and the connection still closed."""
        connection.exec_driver_sql.side_effect = ProgrammingError("SELECT", None, Exception("Invalid object name"))

        with pytest.raises(ProxyError) as exc_info:
            SQLEngine(sql_settings, "srv", "db").execute("SELECT * FROM [db].[dbo].[missing];")

        assert exc_info.value.error_code == ErrorCode.QUERY_EXECUTION_ERROR
        assert exc_info.value.details["query"] == "SELECT * FROM [db].[dbo].[missing];"
        assert connection.exec_driver_sql.call_count == 1
        connection.close.assert_called_once()
        assert no_sleep == []

    def test_engine_reused_within_instance(self, sql_settings, patched_engine):
        """Test the SQLAlchemy engine is created lazily once."""
        engine = SQLEngine(sql_settings, "srv", "db")
        engine.execute("SELECT 1;")
        engine.execute("SELECT 2;")

        assert patched_engine.create.call_count == 1

    def test_context_manager_disposes(self, sql_settings, patched_engine):
        """Test leaving the context releases the engine."""
        with SQLEngine(sql_settings, "srv", "db") as engine:
            engine.execute("SELECT 1;")

        patched_engine.engine.dispose.assert_called_once()


class TestConnectRetry:
    """Test retries of transient connection failures."""

    def test_transient_failure_retried(self, sql_settings, patched_engine, connection, no_sleep):
        """Test a failed connect is retried with backoff."""
        patched_engine.engine.connect.side_effect = [
            OperationalError("connect", None, Exception("timeout")),
            connection,
        ]

        result = SQLEngine(sql_settings, "srv", "db").execute("SELECT 1;")

        assert result.row_count == 2
        assert no_sleep == [0.5]

    def test_retries_exhausted(self, sql_settings, patched_engine, no_sleep):
        """Test the connection error surfaces after the last attempt."""
        patched_engine.engine.connect.side_effect = OperationalError("connect", None, Exception("down"))

        with pytest.raises(ProxyError) as exc_info:
            SQLEngine(sql_settings, "srv", "db").execute("SELECT 1;")

        assert exc_info.value.error_code == ErrorCode.CONNECTION_ERROR
        assert exc_info.value.details == {"server": "srv", "database": "db"}
        assert patched_engine.engine.connect.call_count == 3
        assert no_sleep == [0.5, 1.0]

    def test_auth_failure_not_retried(self, sql_settings, no_sleep):
        """Test token errors fail fast."""
        with patch(
            "adlsproxy.compute.engine.get_access_token_struct",
            side_effect=auth_error("no token"),
        ), patch("adlsproxy.compute.engine.create_engine") as create:
            with pytest.raises(ProxyError) as exc_info:
                SQLEngine(sql_settings, "srv", "db").execute("SELECT 1;")

        assert exc_info.value.error_code == ErrorCode.AUTH_ERROR
        create.assert_not_called()
        assert no_sleep == []


class TestAccessToken:
    """Test Azure AD credential selection and token packing."""

    def test_token_struct(self, sql_settings):
        """Test the token is length-prefixed UTF-16-LE."""
        credential = Mock()
        credential.get_token.return_value = SimpleNamespace(token="abc", expires_on=0)

        with patch("adlsproxy.compute.auth.get_credential", return_value=credential):
            token_struct = get_access_token_struct(sql_settings)

        credential.get_token.assert_called_once_with("https://database.windows.net/.default")
        assert token_struct == struct.pack("<I6s", 6, "abc".encode("utf-16-le"))

    def test_token_failure_wrapped(self, sql_settings):
        """Test credential errors become AUTH_ERROR."""
        credential = Mock()
        credential.get_token.side_effect = RuntimeError("no identity")

        with patch("adlsproxy.compute.auth.get_credential", return_value=credential):
            with pytest.raises(ProxyError) as exc_info:
                get_access_token_struct(sql_settings)

        assert exc_info.value.error_code == ErrorCode.AUTH_ERROR
        assert isinstance(exc_info.value.cause, RuntimeError)

    def test_service_principal_credential(self):
        """Test a configured service principal is preferred."""
        settings = SqlSettings(_env_file=None, tenant_id="t", client_id="c", client_secret="s")

        with patch("azure.identity.ClientSecretCredential") as client_secret:
            get_credential(settings)

        client_secret.assert_called_once_with(tenant_id="t", client_id="c", client_secret="s")

    def test_user_assigned_managed_identity(self):
        """Test the managed identity client id is passed through."""
        settings = SqlSettings(_env_file=None, managed_identity_client_id="mi-1")

        with patch("azure.identity.DefaultAzureCredential") as default:
            get_credential(settings)

        default.assert_called_once_with(managed_identity_client_id="mi-1")
