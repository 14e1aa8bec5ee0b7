"""Constants shared by every layer of the proxy."""

from adlsproxy.constants.query import DEFAULT_SCHEMA, FilterOperator, OperationKind

__all__ = [
    "OperationKind",
    "FilterOperator",
    "DEFAULT_SCHEMA",
]
