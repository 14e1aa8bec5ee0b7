"""Result encoding: tabular rows to JSON values."""

from adlsproxy.results.encoder import (
    JsonValue,
    ResultEncoder,
    encode_count,
    encode_find_set,
    encode_is_empty,
    to_json_value,
)

__all__ = [
    "JsonValue",
    "ResultEncoder",
    "encode_find_set",
    "encode_count",
    "encode_is_empty",
    "to_json_value",
]
