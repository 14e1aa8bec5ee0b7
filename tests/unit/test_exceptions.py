"""Unit tests for error types and helper constructors."""

from adlsproxy.common.exceptions import (
    ErrorCode,
    MalformedRequestError,
    ProxyError,
    connection_error,
    malformed_request,
    query_execution_error,
)


class TestProxyError:
    """Test the base error."""

    def test_str_includes_code_and_cause(self):
        """Test the string form names the code and underlying error."""
        error = ProxyError("failed", error_code=ErrorCode.EXECUTION_ERROR, cause=ValueError("bad"))
        assert str(error) == "[EXECUTION_001] failed (caused by: ValueError: bad)"

    def test_to_dict(self):
        """Test serialization for structured logs."""
        error = ProxyError("failed", details={"k": "v"})

        assert error.to_dict() == {
            "type": "ProxyError",
            "message": "failed",
            "error_code": "EXECUTION_001",
            "error_name": "EXECUTION_ERROR",
            "details": {"k": "v"},
            "is_retryable": False,
        }

    def test_timeouts_retryable_by_default(self):
        """Test from_error_code marks timeouts retryable."""
        assert ProxyError.from_error_code(ErrorCode.TIMEOUT_ERROR, "slow").is_retryable
        assert not ProxyError.from_error_code(ErrorCode.CONFIG_ERROR, "bad").is_retryable


class TestHelpers:
    """Test helper constructors."""

    def test_malformed_request(self):
        """Test malformed request errors are never retryable and record the item."""
        error = malformed_request("Bad item 1 in the filters expression.", ErrorCode.INVALID_FILTER, item=1)

        assert isinstance(error, MalformedRequestError)
        assert isinstance(error, ProxyError)
        assert error.details == {"item": 1}
        assert not error.is_retryable

    def test_connection_error_retryable_unless_overridden(self):
        """Test connection errors default to retryable."""
        assert connection_error("down", server="s").is_retryable
        assert not connection_error("bad url", is_retryable=False).is_retryable

    def test_query_execution_error_truncates_query(self):
        """Test long statements are truncated in details."""
        error = query_execution_error("S" * 600, RuntimeError("x"))

        assert error.error_code == ErrorCode.QUERY_EXECUTION_ERROR
        assert len(error.details["query"]) == 503
        assert error.cause.args == ("x",)
