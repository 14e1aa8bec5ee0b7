"""Shared building blocks used across the proxy."""

from adlsproxy.common.exceptions import (
    ErrorCode,
    MalformedRequestError,
    ProxyError,
    auth_error,
    configuration_error,
    connection_error,
    malformed_request,
    query_execution_error,
    result_shape_error,
)

__all__ = [
    "ErrorCode",
    "ProxyError",
    "MalformedRequestError",
    "malformed_request",
    "configuration_error",
    "connection_error",
    "auth_error",
    "query_execution_error",
    "result_shape_error",
]
