"""Observability utilities for the proxy."""

from .context import (
    ExecutionRequestContext,
    execution_request_scope,
    merge_telemetry,
    resolve_request_context,
)

__all__ = [
    "ExecutionRequestContext",
    "execution_request_scope",
    "resolve_request_context",
    "merge_telemetry",
]
