"""Unit tests for result set encoding."""

from datetime import date, datetime, time
from decimal import Decimal
from uuid import UUID

import pytest

from adlsproxy.common.exceptions import ErrorCode, ProxyError
from adlsproxy.compute.types import ResultSet
from adlsproxy.constants.query import OperationKind
from adlsproxy.results import (
    ResultEncoder,
    encode_count,
    encode_find_set,
    encode_is_empty,
    to_json_value,
)


def _scalar(value):
    return ResultSet.from_rows(["value"], [(value,)])


class TestResultSet:
    """Test the engine/encoder contract type."""

    def test_from_rows(self):
        """Test building from cursor-like iterables."""
        result = ResultSet.from_rows(iter(["a", "b"]), [[1, 2], (3, 4)])

        assert result.columns == ("a", "b")
        assert result.rows == ((1, 2), (3, 4))
        assert result.column_count == 2
        assert result.row_count == 2
        assert result.column_name(1) == "b"

    def test_empty(self):
        """Test the default result has no columns or rows."""
        result = ResultSet()
        assert result.row_count == 0
        assert result.column_count == 0


class TestFindSet:
    """Test row-to-object encoding."""

    def test_rows_become_objects(self):
        """Test one object per row keyed by column name."""
        result = ResultSet.from_rows(["EntryNo", "PostingDate"], [(1001, None)])
        assert encode_find_set(result) == [{"EntryNo": 1001, "PostingDate": None}]

    def test_column_order_is_kept(self):
        """Test keys follow cursor order."""
        result = ResultSet.from_rows(["z", "a", "m"], [(1, 2, 3)])
        assert list(encode_find_set(result)[0]) == ["z", "a", "m"]

    def test_no_rows(self):
        """Test an empty result encodes as an empty list."""
        assert encode_find_set(ResultSet.from_rows(["a"], [])) == []

    def test_duplicate_column_last_value_wins(self):
        """Test a repeated column name keeps the right-most value."""
        result = ResultSet.from_rows(["a", "a"], [(1, 2)])
        assert encode_find_set(result) == [{"a": 2}]


class TestScalarEncoders:
    """Test Count and IsEmpty encoding."""

    def test_count(self):
        """Test the first cell becomes an integer."""
        assert encode_count(_scalar(7)) == 7

    def test_count_from_decimal(self):
        """Test numeric driver types are coerced."""
        assert encode_count(_scalar(Decimal("12"))) == 12

    def test_is_empty_zero_means_empty(self):
        """Test a 0 flag encodes as true."""
        assert encode_is_empty(_scalar(0)) is True

    def test_is_empty_non_zero_means_not_empty(self):
        """Test any non-zero flag encodes as false."""
        assert encode_is_empty(_scalar(5)) is False
        assert encode_is_empty(_scalar(1)) is False

    @pytest.mark.parametrize("encoder", [encode_count, encode_is_empty])
    def test_no_rows_is_an_error(self, encoder):
        """Test scalar encoders reject an empty result."""
        with pytest.raises(ProxyError) as exc_info:
            encoder(ResultSet.from_rows(["value"], []))

        assert exc_info.value.error_code == ErrorCode.RESULT_SHAPE_ERROR
        assert "no rows" in exc_info.value.message


class TestJsonValueCoercion:
    """Test coercion of driver values to JSON values."""

    @pytest.mark.parametrize("value", [None, True, 3, 1.5, "text"])
    def test_primitives_pass_through(self, value):
        """Test JSON-native values are unchanged."""
        assert to_json_value(value) == value

    def test_decimal(self):
        """Test integral decimals become int and others float."""
        assert to_json_value(Decimal("10.00")) == 10
        assert isinstance(to_json_value(Decimal("10.00")), int)
        assert to_json_value(Decimal("10.25")) == 10.25

    def test_temporal_values(self):
        """Test dates and times use ISO 8601."""
        assert to_json_value(date(2024, 1, 31)) == "2024-01-31"
        assert to_json_value(datetime(2024, 1, 31, 8, 30)) == "2024-01-31T08:30:00"
        assert to_json_value(time(8, 30)) == "08:30:00"

    def test_binary(self):
        """Test binary values are base64 encoded."""
        assert to_json_value(b"\x00\x01") == "AAE="

    def test_other_values_use_str(self):
        """Test unknown types fall back to their string form."""
        value = UUID("12345678-1234-5678-1234-567812345678")
        assert to_json_value(value) == "12345678-1234-5678-1234-567812345678"


class TestResultEncoder:
    """Test dispatch by operation kind."""

    def test_dispatch(self):
        """Test each kind reaches its encoder."""
        encoder = ResultEncoder()

        assert encoder.encode(OperationKind.COUNT, _scalar(3)) == 3
        assert encoder.encode("IsEmpty", _scalar(0)) is True
        assert encoder.encode(OperationKind.FIND_SET, _scalar(3)) == [{"value": 3}]

    def test_unknown_kind(self):
        """Test an unknown kind name is rejected."""
        with pytest.raises(ValueError):
            ResultEncoder().encode("Delete", _scalar(3))
