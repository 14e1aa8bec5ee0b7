"""Logging infrastructure for the proxy.

Structured JSON output with request context tracking.
"""

from adlsproxy.logging.filters import ContextFilter
from adlsproxy.logging.logger import CustomJsonFormatter, configure_logging, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "configure_logging",
    "CustomJsonFormatter",
    "ContextFilter",
]
