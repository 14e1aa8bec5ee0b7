"""Request definitions.

Requests describe what should be queried, independent of how the SQL is
rendered or executed. ``parse_request`` is the single entry point from an
untyped JSON body to a typed request.
"""

from adlsproxy.operations.base import EntityRequest, FilterClause, ScalarValue, SortKey
from adlsproxy.operations.query import CountRequest, FindSetRequest, IsEmptyRequest
from adlsproxy.operations.parser import load_body, parse_filter, parse_request, parse_sort_key

__all__ = [
    "EntityRequest",
    "FilterClause",
    "SortKey",
    "ScalarValue",
    "FindSetRequest",
    "CountRequest",
    "IsEmptyRequest",
    "load_body",
    "parse_filter",
    "parse_sort_key",
    "parse_request",
]
