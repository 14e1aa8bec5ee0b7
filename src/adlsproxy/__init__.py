from adlsproxy.__version__ import __version__
from adlsproxy.constants import FilterOperator, OperationKind

from adlsproxy.operations import (
    CountRequest,
    FindSetRequest,
    IsEmptyRequest,
    parse_request,
)
from adlsproxy.query_builder import TSqlQueryBuilder, get_query_builder
from adlsproxy.results import ResultEncoder

from adlsproxy.api import ProxyResponse, QueryProcessor, process_query

from adlsproxy.common.exceptions import ErrorCode, MalformedRequestError, ProxyError


__all__ = [
    "__version__",

    "OperationKind",
    "FilterOperator",

    "FindSetRequest",
    "CountRequest",
    "IsEmptyRequest",
    "parse_request",

    "TSqlQueryBuilder",
    "get_query_builder",
    "ResultEncoder",

    "ProxyResponse",
    "QueryProcessor",
    "process_query",

    # Exceptions (public API)
    "ProxyError",
    "MalformedRequestError",
    "ErrorCode",
]
