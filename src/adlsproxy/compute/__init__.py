"""Query execution against the SQL backend."""

from adlsproxy.compute.engine import SQL_COPT_SS_ACCESS_TOKEN, SQLEngine
from adlsproxy.compute.types import ResultSet

__all__ = [
    "SQLEngine",
    "ResultSet",
    "SQL_COPT_SS_ACCESS_TOKEN",
]
