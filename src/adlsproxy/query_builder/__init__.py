"""Query builder module for SQL generation.

Query builders translate typed requests into SQL text but do NOT execute
it - that's handled by the engine.

Design Principles:
    1. **SQL Generation Only**: Builders only generate SQL strings
    2. **Stateless**: Builders don't keep state between calls
    3. **Request-Based**: Builders work from parsed, typed requests
    4. **Literal Text**: Identifiers and values are interpolated as received

Example:
    >>> from adlsproxy.query_builder import TSqlQueryBuilder
    >>> from adlsproxy.operations import parse_request
    >>>
    >>> request = parse_request("FindSet", {
    ...     "server": "s", "database": "db", "entity": "custledgerentry_21",
    ...     "filters": [{"op": "GreaterThanOrEquals", "field": "CustomerNo-3", "value": "40000"}],
    ...     "orderBy": [{"field": "EntryNo-1"}],
    ... })
    >>> TSqlQueryBuilder().build_query(request)
    "SELECT * FROM [db].[dbo].[custledgerentry_21] WHERE [CustomerNo-3] >= '40000' ORDER BY [EntryNo-1] ASC;"
"""

from adlsproxy.query_builder.base import BaseQueryBuilder
from adlsproxy.query_builder.tsql_builder import TSqlQueryBuilder
from adlsproxy.query_builder.factory import QueryBuilderFactory, get_query_builder

__all__ = [
    "BaseQueryBuilder",
    "TSqlQueryBuilder",
    "QueryBuilderFactory",
    "get_query_builder",
]
