"""Azure Functions HTTP adapter.

Translates between ``azure.functions`` request/response objects and the
transport-neutral processor.
"""

from typing import Any, Optional, Union

import azure.functions as func

from adlsproxy.api.processor import QueryProcessor, get_processor
from adlsproxy.constants.query import OperationKind


def handle_http_request(
    kind: Union[OperationKind, str],
    req: func.HttpRequest,
    context: Optional[Any] = None,
    processor: Optional[QueryProcessor] = None,
) -> func.HttpResponse:
    """Run ``kind`` for the JSON document in the request body.

    Args:
        kind: Operation bound to the route
        req: Incoming HTTP request
        context: Function invocation context; its invocation id becomes
            the request id in logs and spans
        processor: Processor to use instead of the shared one

    Returns:
        HttpResponse carrying the processor's status, body and content type
    """
    response = (processor or get_processor()).process(kind, req.get_body(), ctx=context)
    return func.HttpResponse(
        body=response.body,
        status_code=response.status_code,
        mimetype=response.mimetype,
        charset=response.charset,
    )
