"""
Exception definitions for Pyro SDK
"""

from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..types import ConfirmationTarget, RawStatus


class ErrorCode(Enum):
    """
    Unified error codes for Pyro SDK operations

    1xxx - RPC errors
    2xxx - Transaction errors
    8xxx - Validation errors
    9xxx - Configuration errors
    """
    # RPC errors (recoverable)
    RPC_CONNECTION_FAILED = "1001"
    RPC_TIMEOUT = "1002"
    RPC_RATE_LIMITED = "1003"
    RPC_INVALID_RESPONSE = "1004"
    RPC_HTTP_ERROR = "1005"

    # Transaction errors
    TX_CHAIN_FAILED = "2001"
    TX_CONFIRMATION_TIMEOUT = "2002"
    TX_CONFIRMATION_CANCELLED = "2003"

    # Validation errors
    VALIDATION_FAILED = "8001"
    INVALID_HANDLE = "8002"
    INVALID_TARGET = "8003"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


class PyroError(Exception):
    """
    Base exception for all Pyro SDK errors

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        recoverable: Whether the error might succeed on retry
        original_error: The underlying exception if any
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"

    @property
    def should_retry(self) -> bool:
        """Indicate if the operation should be retried"""
        return self.recoverable


class RpcError(PyroError):
    """
    Transient RPC errors - always recoverable

    Raised when:
    - Connection to RPC endpoint fails
    - Request times out
    - Rate limit is hit
    - Endpoint answers with an HTTP error or a JSON-RPC error body
    - Requested data is not available yet (e.g. block not produced)
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RPC_CONNECTION_FAILED,
        original_error: Optional[Exception] = None,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        details = {}
        if endpoint:
            details["endpoint"] = endpoint
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            message,
            code,
            recoverable=True,
            original_error=original_error,
            details=details,
        )
        self.endpoint = endpoint
        self.status_code = status_code

    @classmethod
    def connection_failed(cls, endpoint: str, error: Exception = None) -> "RpcError":
        return cls(
            f"Failed to connect to RPC endpoint: {endpoint}",
            ErrorCode.RPC_CONNECTION_FAILED,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def timeout(cls, endpoint: str, timeout_seconds: float) -> "RpcError":
        return cls(
            f"RPC request timed out after {timeout_seconds}s",
            ErrorCode.RPC_TIMEOUT,
            endpoint=endpoint,
        )

    @classmethod
    def rate_limited(cls, endpoint: str) -> "RpcError":
        return cls(
            "RPC rate limit exceeded",
            ErrorCode.RPC_RATE_LIMITED,
            endpoint=endpoint,
            status_code=429,
        )

    @classmethod
    def http_status(cls, endpoint: str, status_code: int) -> "RpcError":
        return cls(
            f"HTTP error {status_code}",
            ErrorCode.RPC_HTTP_ERROR,
            endpoint=endpoint,
            status_code=status_code,
        )

    @classmethod
    def invalid_response(cls, reason: str, endpoint: Optional[str] = None) -> "RpcError":
        return cls(
            f"Invalid RPC response: {reason}",
            ErrorCode.RPC_INVALID_RESPONSE,
            endpoint=endpoint,
        )


class ChainReportedFailure(PyroError):
    """
    The chain itself marked the transaction as failed - terminal, never retried

    The tracker reports this condition as a failed TransactionResult;
    TransactionResult.raise_for_status() raises it for callers that prefer
    exceptions.
    """

    def __init__(self, handle: str, error: Optional[str] = None):
        super().__init__(
            f"Transaction {handle} failed on-chain: {error or 'unknown error'}",
            ErrorCode.TX_CHAIN_FAILED,
            recoverable=False,
            details={"handle": handle, "chain_error": error},
        )
        self.handle = handle
        self.error = error


class ConfirmationTimeout(PyroError):
    """
    The confirmation deadline elapsed with no terminal resolution

    Distinct from ChainReportedFailure: the transaction may still land,
    the caller simply stopped watching it.
    """

    def __init__(
        self,
        handle: str,
        elapsed: float,
        target: "ConfirmationTarget",
        last_status: Optional["RawStatus"] = None,
    ):
        super().__init__(
            f"Transaction {handle} not confirmed after {elapsed:.1f}s "
            f"(timeout {target.timeout}s)",
            ErrorCode.TX_CONFIRMATION_TIMEOUT,
            recoverable=True,
            details={
                "handle": handle,
                "elapsed": elapsed,
                "timeout": target.timeout,
                "last_status": last_status.describe() if last_status else None,
            },
        )
        self.handle = handle
        self.elapsed = elapsed
        self.target = target
        self.last_status = last_status


class ConfirmationCancelled(PyroError):
    """The caller aborted a confirmation wait before it resolved"""

    def __init__(self, handle: str, elapsed: float):
        super().__init__(
            f"Confirmation wait for {handle} cancelled after {elapsed:.1f}s",
            ErrorCode.TX_CONFIRMATION_CANCELLED,
            recoverable=True,
            details={"handle": handle, "elapsed": elapsed},
        )
        self.handle = handle
        self.elapsed = elapsed


class ValidationError(PyroError):
    """
    Malformed input rejected before any RPC call

    Raised when:
    - Transaction handle is not a valid hash/signature for the chain
    - Confirmation target is inconsistent
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        code: ErrorCode = ErrorCode.VALIDATION_FAILED,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            details={"field": field},
        )
        self.field = field

    @classmethod
    def invalid_handle(cls, handle: str, reason: str) -> "ValidationError":
        return cls(
            f"Invalid transaction handle {handle!r}: {reason}",
            field="handle",
            code=ErrorCode.INVALID_HANDLE,
        )

    @classmethod
    def invalid_target(cls, field: str, reason: str) -> "ValidationError":
        return cls(
            f"Invalid confirmation target '{field}': {reason}",
            field=field,
            code=ErrorCode.INVALID_TARGET,
        )


class ConfigurationError(PyroError):
    """
    Configuration-related errors

    Raised when:
    - Required configuration is missing
    - Configuration values are invalid
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ):
        super().__init__(message, code, recoverable=False)

    @classmethod
    def missing(cls, param: str) -> "ConfigurationError":
        return cls(f"Missing required configuration: {param}", ErrorCode.CONFIG_MISSING)

    @classmethod
    def invalid(cls, param: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration '{param}': {reason}", ErrorCode.CONFIG_INVALID)
