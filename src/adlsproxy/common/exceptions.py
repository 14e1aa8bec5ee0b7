from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Standard error codes for proxy operations.

    Codes are grouped by category so callers can classify a failure
    without a dedicated exception class per case.

    Attributes:
        CONFIG_*: Configuration-related errors
        VALIDATION_*: Malformed client input
        CONNECTION_*: Network, authentication and connection errors
        EXECUTION_*: Query execution and result handling errors
    """
    # Configuration errors
    CONFIG_ERROR = "CONFIG_001"
    CONFIG_MISSING = "CONFIG_002"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_001"
    INVALID_BODY = "VALIDATION_002"
    MISSING_PARAMETER = "VALIDATION_003"
    INVALID_FILTER = "VALIDATION_004"
    INVALID_ORDER_BY = "VALIDATION_005"
    INVALID_FIELDS = "VALIDATION_006"

    # Connection errors
    CONNECTION_ERROR = "CONNECTION_001"
    AUTH_ERROR = "CONNECTION_002"
    TIMEOUT_ERROR = "CONNECTION_003"

    # Execution errors
    EXECUTION_ERROR = "EXECUTION_001"
    QUERY_EXECUTION_ERROR = "EXECUTION_002"
    RESULT_SHAPE_ERROR = "EXECUTION_003"


class ProxyError(Exception):
    """Base exception for all proxy errors.

    Errors are categorized with an ``ErrorCode`` rather than a deep class
    hierarchy. They carry enough detail for the operational log; only
    ``MalformedRequestError`` messages are ever shown to a client.

    Attributes:
        message: Error message
        error_code: Error code from ErrorCode enum
        details: Additional error details
        cause: Optional underlying exception
        is_retryable: Whether the error is transient and can be retried
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.EXECUTION_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        is_retryable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause
        self.is_retryable = is_retryable

    def __str__(self) -> str:
        msg = f"[{self.error_code.value}] {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
            "is_retryable": self.is_retryable
        }

    @classmethod
    def from_error_code(
        cls,
        error_code: ErrorCode,
        message: str,
        **kwargs
    ) -> "ProxyError":
        """Create exception from error code.

        Timeouts are marked retryable unless the caller says otherwise.
        """
        if error_code == ErrorCode.TIMEOUT_ERROR:
            kwargs.setdefault('is_retryable', True)

        return cls(message=message, error_code=error_code, **kwargs)


class MalformedRequestError(ProxyError):
    """The request document is structurally invalid.

    The message is returned to the caller verbatim with a bad-request
    classification, so it must describe the offending input.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(
            message,
            error_code=error_code,
            details=details,
            cause=cause,
            is_retryable=False,
        )


def malformed_request(
    message: str,
    error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    item: Any = None,
    **kwargs
) -> MalformedRequestError:
    """Create a malformed request error.

    Args:
        message: Error message shown to the client
        error_code: One of the VALIDATION_* codes
        item: Offending sub-document, recorded in details
        **kwargs: Additional error details

    Returns:
        MalformedRequestError
    """
    details = kwargs.get('details', {})
    if item is not None:
        details["item"] = item

    return MalformedRequestError(
        message=message,
        error_code=error_code,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def configuration_error(
    message: str,
    config_key: Optional[str] = None,
    **kwargs
) -> ProxyError:
    """Create a configuration error."""
    details = kwargs.get('details', {})
    if config_key:
        details["config_key"] = config_key

    return ProxyError(
        message=message,
        error_code=ErrorCode.CONFIG_ERROR,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def connection_error(
    message: str,
    server: Optional[str] = None,
    database: Optional[str] = None,
    **kwargs
) -> ProxyError:
    """Create a connection error.

    Connection failures are transient by default and may be retried by
    the engine.

    Args:
        message: Error message
        server: SQL endpoint that failed
        database: Database name
        **kwargs: Additional error details

    Returns:
        ProxyError with CONNECTION_ERROR code
    """
    details = kwargs.get('details', {})
    if server:
        details["server"] = server
    if database:
        details["database"] = database
    kwargs.setdefault('is_retryable', True)

    return ProxyError(
        message=message,
        error_code=ErrorCode.CONNECTION_ERROR,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def auth_error(
    message: str,
    **kwargs
) -> ProxyError:
    """Create an authentication error."""
    return ProxyError(
        message=message,
        error_code=ErrorCode.AUTH_ERROR,
        **kwargs
    )


def query_execution_error(
    query: str,
    original_error: Exception,
    **kwargs
) -> ProxyError:
    """Create a query execution error.

    Args:
        query: SQL query that failed
        original_error: The underlying exception
        **kwargs: Additional error details

    Returns:
        ProxyError with QUERY_EXECUTION_ERROR code
    """
    details = kwargs.get('details', {})
    details["query"] = query[:500] + "..." if len(query) > 500 else query

    return ProxyError(
        message=f"Query execution failed: {str(original_error)}",
        error_code=ErrorCode.QUERY_EXECUTION_ERROR,
        details=details,
        cause=original_error,
        **{k: v for k, v in kwargs.items() if k not in ['details', 'cause']}
    )


def result_shape_error(
    message: str,
    operation: Optional[str] = None,
    **kwargs
) -> ProxyError:
    """Create an error for a result set that breaks the backend contract."""
    details = kwargs.get('details', {})
    if operation:
        details["operation"] = operation

    return ProxyError(
        message=message,
        error_code=ErrorCode.RESULT_SHAPE_ERROR,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )
