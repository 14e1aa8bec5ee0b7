"""Logging filters for context injection.

Filters copy context variables onto every log record so log lines from
one HTTP request can be correlated.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Dict, Optional
from adlsproxy.__version__ import __version__

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
operation_var: ContextVar[Optional[str]] = ContextVar("operation", default=None)

_static_context: Dict[str, Any] = {}


class ContextFilter(logging.Filter):
    """Logging filter that adds request and process context to records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context variables to the log record.

        Args:
            record: Log record to enhance

        Returns:
            Always True (doesn't filter out any records)
        """
        for key, value in _static_context.items():
            setattr(record, key, value)

        setattr(record, "request_id", request_id_var.get())
        setattr(record, "operation", operation_var.get())
        setattr(record, "service_name", "adlsproxy")
        setattr(record, "core_version", __version__)

        return True


def set_logging_context(
    environment: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    """Replace the process-wide attributes stamped on every record."""
    _static_context.clear()
    if environment is not None:
        _static_context["environment"] = environment
    if extra:
        _static_context.update(extra)


def set_request_context(
    request_id: Optional[str] = None,
    operation: Optional[str] = None,
) -> None:
    """Set request context variables."""
    if request_id is not None:
        request_id_var.set(request_id)
    if operation is not None:
        operation_var.set(operation)


def clear_request_context() -> None:
    """Clear all request context variables."""
    request_id_var.set(None)
    operation_var.set(None)
