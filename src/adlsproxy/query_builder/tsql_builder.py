"""T-SQL query builder for SQL Server-compatible endpoints."""

from adlsproxy.operations.query import CountRequest, FindSetRequest, IsEmptyRequest
from adlsproxy.query_builder.base import BaseQueryBuilder


class TSqlQueryBuilder(BaseQueryBuilder):
    """Query builder for SQL Server and Synapse serverless SQL endpoints.

    Produces one literal statement per request:

        FindSet:  SELECT <fields> FROM <table>[ WHERE ...][ ORDER BY ...];
        Count:    SELECT COUNT(*) FROM <table>[ WHERE ...];
        IsEmpty:  IF EXISTS (SELECT TOP 1 1 FROM <table>[ WHERE ...]) SELECT 0 ELSE SELECT 1;

    Count and IsEmpty requests carry no projection or ordering.
    """

    def _build_find_set(self, request: FindSetRequest) -> str:
        full_name = self.fully_qualified_name(request.database, request.entity)
        columns = self.format_column_list(request.fields)
        where = self.build_where(request.filters)
        order_by = self.build_order_by(request.order_by)
        return f"SELECT {columns} FROM {full_name}{where}{order_by};"

    def _build_count(self, request: CountRequest) -> str:
        full_name = self.fully_qualified_name(request.database, request.entity)
        where = self.build_where(request.filters)
        return f"SELECT COUNT(*) FROM {full_name}{where};"

    def _build_is_empty(self, request: IsEmptyRequest) -> str:
        full_name = self.fully_qualified_name(request.database, request.entity)
        where = self.build_where(request.filters)
        return f"IF EXISTS (SELECT TOP 1 1 FROM {full_name}{where}) SELECT 0 ELSE SELECT 1;"
