"""Conversion of tabular results into JSON values.

One encoder per operation kind:

    FindSet  -> list of objects, one per row, keys in column order
    Count    -> integer from the single row/column the query returns
    IsEmpty  -> boolean from the single 0/1 flag the query returns

Encoding is pure: no logging, no I/O.
"""

import base64
from datetime import date, time
from decimal import Decimal
from typing import Any, Callable, Dict, List, Union

from adlsproxy.common.exceptions import result_shape_error
from adlsproxy.compute.types import ResultSet
from adlsproxy.constants.query import OperationKind

JsonValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]


def to_json_value(value: Any) -> JsonValue:
    """Coerce one SQL scalar into a native JSON value.

    ``None`` stays null; bool, int, float and str pass through. Decimals
    become int when integral and float otherwise. Dates and times become
    ISO 8601 strings, binary becomes base64, anything else its ``str``.
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Decimal):
        if value.is_finite() and value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return str(value)


def _first_value(result: ResultSet, operation: OperationKind) -> Any:
    if not result.rows or not result.rows[0]:
        raise result_shape_error(
            f"{operation.value} query returned no rows; expected exactly one.",
            operation=operation.value,
            details={"columns": list(result.columns)},
        )
    return result.rows[0][0]


def encode_find_set(result: ResultSet) -> List[Dict[str, JsonValue]]:
    """Encode every row as an object keyed by column name.

    When a column name repeats, the right-most value wins.
    """
    records = []
    for row in result.rows:
        record: Dict[str, JsonValue] = {}
        for name, value in zip(result.columns, row):
            record[name] = to_json_value(value)
        records.append(record)
    return records


def encode_count(result: ResultSet) -> int:
    """Encode the scalar of the first row and column as an integer.

    Raises:
        ProxyError: If the result has no rows
    """
    return int(_first_value(result, OperationKind.COUNT))


def encode_is_empty(result: ResultSet) -> bool:
    """Encode the existence flag: ``0`` means empty (true), anything else false.

    Raises:
        ProxyError: If the result has no rows
    """
    return _first_value(result, OperationKind.IS_EMPTY) == 0


class ResultEncoder:
    """Dispatches a result set to the encoder for its operation kind."""

    _ENCODERS: Dict[OperationKind, Callable[[ResultSet], JsonValue]] = {
        OperationKind.FIND_SET: encode_find_set,
        OperationKind.COUNT: encode_count,
        OperationKind.IS_EMPTY: encode_is_empty,
    }

    def encode(self, kind: Union[OperationKind, str], result: ResultSet) -> JsonValue:
        """Encode ``result`` for ``kind``.

        Raises:
            ValueError: If ``kind`` is not an operation kind
        """
        return self._ENCODERS[OperationKind(kind)](result)
