"""Request orchestration: parse, build, execute, encode.

This is the only layer that logs. Query building and result encoding
stay pure and report failures as exceptions, which are classified here:

    MalformedRequestError -> 400, message returned as plain text
    anything else         -> 500, fixed message; details only in the log
"""

import json
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Union

from adlsproxy.common.exceptions import MalformedRequestError, ProxyError
from adlsproxy.constants.query import OperationKind
from adlsproxy.logging import get_logger
from adlsproxy.observability.context import (
    execution_request_scope,
    merge_telemetry,
    resolve_request_context,
)
from adlsproxy.operations.parser import RequestBody, parse_request
from adlsproxy.query_builder.base import BaseQueryBuilder
from adlsproxy.results.encoder import ResultEncoder
from adlsproxy.types.base import ProxyBaseModel

if TYPE_CHECKING:
    from adlsproxy.compute.engine import SQLEngine

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = (
    "The server encountered an error processing your request. "
    "Please take a look at the server logs."
)

JSON_MIMETYPE = "text/json"
TEXT_MIMETYPE = "text/plain"


class ProxyResponse(ProxyBaseModel):
    """Transport-neutral response produced for one request."""
    status_code: int
    body: str
    mimetype: str = TEXT_MIMETYPE
    charset: str = "utf-8"

    @property
    def content_type(self) -> str:
        return f"{self.mimetype}; charset={self.charset}"

    @classmethod
    def ok(cls, body: str) -> "ProxyResponse":
        return cls(status_code=200, body=body, mimetype=JSON_MIMETYPE)

    @classmethod
    def bad_request(cls, message: str) -> "ProxyResponse":
        return cls(status_code=400, body=message)

    @classmethod
    def internal_error(cls) -> "ProxyResponse":
        return cls(status_code=500, body=INTERNAL_ERROR_MESSAGE)


# Anything with SQLEngine's ``execute`` and context manager protocol will do
EngineFactory = Callable[[str, str], 'SQLEngine']


def _error_fields(exc: Exception) -> Dict[str, Any]:
    fields = exc.to_dict() if isinstance(exc, ProxyError) else {"type": type(exc).__name__}
    return {f"error.{key}": value for key, value in fields.items()}


class QueryProcessor:
    """Runs one proxy request end to end.

    Collaborators are injectable; anything not supplied is built from
    settings on first use.

    Args:
        query_builder: Renders typed requests to SQL
        encoder: Turns result sets into JSON values
        engine_factory: ``(server, database) -> engine`` used per request
    """

    def __init__(
        self,
        query_builder: Optional[BaseQueryBuilder] = None,
        encoder: Optional[ResultEncoder] = None,
        engine_factory: Optional[EngineFactory] = None,
    ):
        self._query_builder = query_builder
        self.encoder = encoder or ResultEncoder()
        self._engine_factory = engine_factory

    @property
    def query_builder(self) -> BaseQueryBuilder:
        if self._query_builder is None:
            from adlsproxy.query_builder.factory import get_query_builder
            self._query_builder = get_query_builder()
        return self._query_builder

    @property
    def engine_factory(self) -> EngineFactory:
        if self._engine_factory is None:
            from adlsproxy.compute.engine import SQLEngine
            from adlsproxy.settings import get_settings

            sql_settings = get_settings().sql
            self._engine_factory = lambda server, database: SQLEngine(sql_settings, server, database)
        return self._engine_factory

    def process(
        self,
        kind: Union[OperationKind, str],
        body: RequestBody,
        *,
        ctx: Optional[Any] = None,
    ) -> ProxyResponse:
        """Process one request and classify the outcome.

        Args:
            kind: Operation to run
            body: Raw request body (JSON text/bytes or decoded object)
            ctx: Request context, request id, or host invocation context

        Returns:
            ProxyResponse with ``{"result": ...}`` on success, or a plain
            text error with status 400/500
        """
        kind = OperationKind(kind)
        context = resolve_request_context(ctx)
        operation = f"adlsproxy.{kind.value}"

        with execution_request_scope(context, operation=operation):
            telemetry = merge_telemetry(context, extra={"operation.kind": kind.value})
            try:
                return self._run(kind, body, telemetry)
            except MalformedRequestError as exc:
                logger.warning(
                    f"Invalid input presented. {exc.message}",
                    extra={**telemetry, **_error_fields(exc)},
                )
                return ProxyResponse.bad_request(exc.message)
            except Exception as exc:
                logger.error(
                    f"Exception! {exc}",
                    extra={**telemetry, **_error_fields(exc)},
                    exc_info=True,
                )
                return ProxyResponse.internal_error()

    def _run(self, kind: OperationKind, body: RequestBody, telemetry: dict) -> ProxyResponse:
        request = parse_request(kind, body)
        query = self.query_builder.build_query(request)
        logger.info(
            f"Query constructed: {query}",
            extra={**telemetry, "db.target": request.target},
        )

        with self.engine_factory(request.server, request.database) as engine:
            result_set = engine.execute(query)

        output = json.dumps(
            {"result": self.encoder.encode(kind, result_set)},
            indent=2,
            ensure_ascii=False,
        )
        logger.info("Request processed.", extra=telemetry)
        logger.info(f"Length of the response: {len(output)}.", extra=telemetry)
        return ProxyResponse.ok(output)


_processor: Optional[QueryProcessor] = None


def get_processor() -> QueryProcessor:
    """Get the shared processor used by the HTTP triggers."""
    global _processor
    if _processor is None:
        _processor = QueryProcessor()
    return _processor


def process_query(
    kind: Union[OperationKind, str],
    body: RequestBody,
    *,
    ctx: Optional[Any] = None,
    processor: Optional[QueryProcessor] = None,
) -> ProxyResponse:
    """Process a request with the given or shared processor."""
    return (processor or get_processor()).process(kind, body, ctx=ctx)
