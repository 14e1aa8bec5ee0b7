"""Request handling entry points."""

from adlsproxy.api.processor import (
    INTERNAL_ERROR_MESSAGE,
    EngineFactory,
    ProxyResponse,
    QueryProcessor,
    get_processor,
    process_query,
)

__all__ = [
    "INTERNAL_ERROR_MESSAGE",
    "EngineFactory",
    "ProxyResponse",
    "QueryProcessor",
    "get_processor",
    "process_query",
]
