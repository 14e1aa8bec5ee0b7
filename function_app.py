import azure.functions as func

from adlsproxy.api.http import handle_http_request
from adlsproxy.constants import OperationKind
from adlsproxy.logging import configure_logging
from adlsproxy.settings import get_settings

configure_logging(get_settings())

app = func.FunctionApp(http_auth_level=func.AuthLevel.FUNCTION)


@app.function_name(name="FindSet")
@app.route(route="FindSet", methods=["POST"])
def find_set(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    return handle_http_request(OperationKind.FIND_SET, req, context)


@app.function_name(name="Count")
@app.route(route="Count", methods=["POST"])
def count(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    return handle_http_request(OperationKind.COUNT, req, context)


@app.function_name(name="IsEmpty")
@app.route(route="IsEmpty", methods=["POST"])
def is_empty(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    return handle_http_request(OperationKind.IS_EMPTY, req, context)
