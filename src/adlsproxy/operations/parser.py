"""Boundary validation of request documents.

The request body arrives as an untyped JSON tree. Every structural check
happens here, before any SQL is rendered, and the result is one typed
request per operation kind. Failures raise ``MalformedRequestError`` with a
message naming the offending sub-document; that message goes back to the
client as-is.
"""

import json
import math
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type, Union

from adlsproxy.common.exceptions import ErrorCode, malformed_request
from adlsproxy.constants.query import FilterOperator, OperationKind
from adlsproxy.operations.base import EntityRequest, FilterClause, SortKey
from adlsproxy.operations.query import CountRequest, FindSetRequest, IsEmptyRequest

RequestBody = Union[str, bytes, bytearray, Mapping[str, Any]]

_REQUEST_TYPES: Dict[OperationKind, Type[EntityRequest]] = {
    OperationKind.FIND_SET: FindSetRequest,
    OperationKind.COUNT: CountRequest,
    OperationKind.IS_EMPTY: IsEmptyRequest,
}


def _render(item: Any) -> str:
    return json.dumps(item, default=str)


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_scalar(value: Any) -> bool:
    # bool is an int subclass; both are scalars here
    if isinstance(value, float):
        return math.isfinite(value)
    return isinstance(value, (str, int, date))


def _reject_constant(token: str) -> Any:
    # NaN and Infinity are accepted by the json module but are not JSON
    raise ValueError(f"Invalid JSON constant {token}")


def load_body(body: RequestBody) -> Dict[str, Any]:
    """Decode a raw request body into a JSON object.

    Raises:
        MalformedRequestError: If the body is not a JSON object
    """
    if isinstance(body, Mapping):
        return dict(body)

    if isinstance(body, (bytes, bytearray)):
        try:
            body = body.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise malformed_request(
                "Body in the request must be in the correct JSON format.",
                error_code=ErrorCode.INVALID_BODY,
                cause=exc,
            )

    try:
        document = json.loads(body, parse_constant=_reject_constant)
    except (TypeError, ValueError) as exc:
        raise malformed_request(
            "Body in the request must be in the correct JSON format.",
            error_code=ErrorCode.INVALID_BODY,
            cause=exc,
        )

    if not isinstance(document, dict):
        raise malformed_request(
            "Body in the request must be in the correct JSON format.",
            error_code=ErrorCode.INVALID_BODY,
        )
    return document


def _require_string(document: Mapping[str, Any], key: str, message: str) -> str:
    value = document.get(key)
    if not _is_string(value) or not value:
        raise malformed_request(message, error_code=ErrorCode.MISSING_PARAMETER, details={"key": key})
    return value


def _optional_list(document: Mapping[str, Any], key: str, error_code: ErrorCode) -> Optional[List[Any]]:
    value = document.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise malformed_request(
            f"The '{key}' element must be an array.",
            error_code=error_code,
            item=value,
        )
    return value


def parse_filter(item: Any) -> FilterClause:
    """Validate one filter clause.

    Raises:
        MalformedRequestError: If the clause is not a well-formed
            ``{op, field, value}`` object
    """
    if not isinstance(item, dict):
        raise malformed_request(
            f"Bad item {_render(item)} in the filters expression.",
            error_code=ErrorCode.INVALID_FILTER,
            item=item,
        )

    op_name = item.get("op")
    if not _is_string(op_name):
        raise malformed_request(
            f"Bad or missing operator in the filter {_render(item)}.",
            error_code=ErrorCode.INVALID_FILTER,
            item=item,
        )

    op = FilterOperator.parse(op_name)
    if op is None:
        raise malformed_request(
            f"Bad operator passed in the filter {_render(item)}.",
            error_code=ErrorCode.INVALID_FILTER,
            item=item,
        )

    field = item.get("field")
    if not _is_string(field) or not field:
        raise malformed_request(
            f"Bad or missing field in the expression {_render(item)}.",
            error_code=ErrorCode.INVALID_FILTER,
            item=item,
        )

    value = item.get("value")
    if value is None:
        raise malformed_request(
            f"Missing value in the filter {_render(item)}.",
            error_code=ErrorCode.INVALID_FILTER,
            item=item,
        )
    if not _is_scalar(value):
        raise malformed_request(
            f"Bad value in the filter {_render(item)}; only strings, numbers, booleans and dates are supported.",
            error_code=ErrorCode.INVALID_FILTER,
            item=item,
        )

    return FilterClause(op=op, field=field, value=value)


def parse_sort_key(item: Any) -> SortKey:
    """Validate one ORDER BY entry; ``ascending`` defaults to true.

    Raises:
        MalformedRequestError: If the entry is not a ``{field, ascending?}`` object
    """
    if not isinstance(item, dict):
        raise malformed_request(
            f"Bad item {_render(item)} in the order by expression.",
            error_code=ErrorCode.INVALID_ORDER_BY,
            item=item,
        )

    field = item.get("field")
    if not _is_string(field) or not field:
        raise malformed_request(
            f"Bad or missing field in the expression {_render(item)} in the order by expression.",
            error_code=ErrorCode.INVALID_ORDER_BY,
            item=item,
        )

    ascending = item.get("ascending")
    if ascending is None:
        ascending = True
    elif not isinstance(ascending, bool):
        raise malformed_request(
            f"Bad ascending flag in the expression {_render(item)} in the order by expression.",
            error_code=ErrorCode.INVALID_ORDER_BY,
            item=item,
        )

    return SortKey(field=field, ascending=ascending)


def _parse_fields(items: List[Any]) -> Tuple[str, ...]:
    for item in items:
        if not _is_string(item) or not item:
            raise malformed_request(
                f"Bad item {_render(item)} in the fields expression.",
                error_code=ErrorCode.INVALID_FIELDS,
                item=item,
            )
    return tuple(items)


def _parse_items(items: Optional[List[Any]], parse: Callable[[Any], Any]) -> Tuple[Any, ...]:
    if not items:
        return ()
    return tuple(parse(item) for item in items)


def parse_request(kind: Union[OperationKind, str], body: RequestBody) -> EntityRequest:
    """Parse and validate a request document for one operation kind.

    ``fields`` and ``orderBy`` are only read for FindSet; the other kinds
    ignore them even when present.

    Args:
        kind: Operation the request is for
        body: Raw JSON text/bytes, or an already decoded JSON object

    Returns:
        FindSetRequest, CountRequest or IsEmptyRequest

    Raises:
        MalformedRequestError: If any part of the document is malformed
    """
    kind = OperationKind(kind)
    document = load_body(body)

    server = _require_string(document, "server", "Bad or missing SQL endpoint.")
    database = _require_string(document, "database", "Bad or missing SQL database name.")
    entity = _require_string(document, "entity", "Bad or missing entity to be queried.")

    filters = _parse_items(
        _optional_list(document, "filters", ErrorCode.INVALID_FILTER),
        parse_filter,
    )

    common: Dict[str, Any] = {
        "server": server,
        "database": database,
        "entity": entity,
        "filters": filters,
    }

    if kind == OperationKind.FIND_SET:
        fields = _optional_list(document, "fields", ErrorCode.INVALID_FIELDS)
        common["fields"] = _parse_fields(fields) if fields is not None else None
        common["order_by"] = _parse_items(
            _optional_list(document, "orderBy", ErrorCode.INVALID_ORDER_BY),
            parse_sort_key,
        )

    return _REQUEST_TYPES[kind](**common)


__all__ = [
    "RequestBody",
    "load_body",
    "parse_filter",
    "parse_sort_key",
    "parse_request",
]
