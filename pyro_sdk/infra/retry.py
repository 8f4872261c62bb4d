"""
Retry Logic Helper Module

Provides bounded retry with linear backoff for single RPC calls across
Solana and EVM chains. Includes structured logging with correlation IDs so
every line logged while tracking one transaction can be tied together.
"""

import asyncio
import logging
import time
import uuid
import contextvars
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from ..errors import ErrorCode, PyroError, ConfigurationError
from ..config import get_config

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Context variable for correlation ID (task-local under asyncio)
_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    'correlation_id', default=None
)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for transaction tracing."""
    return uuid.uuid4().hex[:12]


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: Optional[str]) -> contextvars.Token:
    """Set the correlation ID in context. Returns token for reset."""
    return _correlation_id.set(correlation_id)


class CorrelationContext:
    """
    Context manager for correlation ID scoping.

    Usage:
        with CorrelationContext("confirm") as cid:
            logger.info(f"[{cid}] Waiting for transaction")
            result = await tracker.await_confirmation(...)
    """

    def __init__(self, prefix: Optional[str] = None):
        """
        Initialize correlation context.

        Args:
            prefix: Optional prefix for the correlation ID (e.g., "confirm")
        """
        self.correlation_id = generate_correlation_id()
        if prefix:
            self.correlation_id = f"{prefix}_{self.correlation_id}"
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self._token = set_correlation_id(self.correlation_id)
        return self.correlation_id

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            _correlation_id.reset(self._token)


def log_with_correlation(
    level: int,
    message: str,
    operation_name: str,
    attempt: Optional[int] = None,
    max_retries: Optional[int] = None,
    log: Optional[logging.Logger] = None,
    **extra
):
    """
    Log message with correlation ID and structured context.

    Args:
        level: Logging level (logging.INFO, logging.WARNING, etc.)
        message: Log message
        operation_name: Name of the operation being executed
        attempt: Current attempt number (1-indexed)
        max_retries: Maximum number of attempts
        log: Logger to write to (defaults to this module's logger)
        **extra: Additional context fields
    """
    cid = get_correlation_id()

    parts = []
    if cid:
        parts.append(f"[{cid}]")
    parts.append(f"[{operation_name}]")
    if attempt is not None and max_retries is not None:
        parts.append(f"[{attempt}/{max_retries}]")
    parts.append(message)

    extra_context = {
        "correlation_id": cid,
        "operation": operation_name,
        "attempt": attempt,
        "max_retries": max_retries,
        **extra
    }

    (log or logger).log(level, " ".join(parts), extra=extra_context)


# Error keywords for classification of exceptions that are not PyroErrors
RECOVERABLE_KEYWORDS = [
    "timeout", "timed out", "connection", "network", "rate limit",
    "too many requests", "429", "500", "502", "503", "504",
    "temporarily unavailable", "service unavailable",
    "econnreset", "enotfound", "etimedout",
    "socket hang up", "request failed",
]


def classify_error(error: Exception) -> Tuple[bool, Optional[ErrorCode]]:
    """
    Classify an error to determine if it's a transient RPC failure.

    Args:
        error: The exception to classify

    Returns:
        Tuple of (is_recoverable, error_code)
    """
    if isinstance(error, PyroError):
        return error.recoverable, error.code

    error_str = str(error).lower()
    is_recoverable = isinstance(error, (asyncio.TimeoutError, ConnectionError)) or any(
        keyword in error_str for keyword in RECOVERABLE_KEYWORDS
    )

    error_code = None
    if is_recoverable:
        if "timeout" in error_str or "timed out" in error_str or isinstance(error, asyncio.TimeoutError):
            error_code = ErrorCode.RPC_TIMEOUT
        elif "rate limit" in error_str or "too many requests" in error_str or "429" in error_str:
            error_code = ErrorCode.RPC_RATE_LIMITED
        elif any(kw in error_str for kw in ["connection", "network", "socket"]) or isinstance(error, ConnectionError):
            error_code = ErrorCode.RPC_CONNECTION_FAILED
        else:
            error_code = ErrorCode.RPC_INVALID_RESPONSE

    return is_recoverable, error_code


class RetryPolicy:
    """
    Bounded retry with linear backoff for one async operation

    Attempt i (0-indexed) that fails with a transient error is followed by a
    wait of base_delay * (i + 1): 1s, 2s, 3s... with the defaults. After
    max_attempts consecutive failures the last error is re-raised unchanged.
    Errors that are not transient propagate immediately without retry.

    Usage:
        policy = RetryPolicy(max_attempts=3, base_delay=1.0)
        status = await policy.run(lambda: adapter.get_status(sig), "get_status")
    """

    def __init__(
        self,
        max_attempts: Optional[int] = None,
        base_delay: Optional[float] = None,
        retry_on: Tuple[Type[BaseException], ...] = (Exception,),
        log: Optional[logging.Logger] = None,
    ):
        self.max_attempts = max_attempts if max_attempts is not None else get_config().rpc.max_retries
        self.base_delay = base_delay if base_delay is not None else get_config().rpc.retry_delay_seconds
        if self.max_attempts < 1:
            raise ConfigurationError.invalid("max_attempts", f"must be >= 1, got {self.max_attempts}")
        if self.base_delay < 0:
            raise ConfigurationError.invalid("base_delay", f"must be >= 0, got {self.base_delay}")
        self.retry_on = retry_on
        self._log = log

    def delay_for(self, attempt: int) -> float:
        """Backoff before the retry that follows 0-indexed attempt"""
        return self.base_delay * (attempt + 1)

    def is_retryable(self, error: BaseException) -> bool:
        if not isinstance(error, self.retry_on):
            return False
        is_recoverable, _ = classify_error(error)
        return is_recoverable

    async def _sleep(self, delay: float) -> None:
        await asyncio.sleep(delay)

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        operation_name: str = "operation",
        deadline: Optional[float] = None,
    ) -> T:
        """
        Run operation with retry.

        Args:
            operation: Zero-argument callable returning an awaitable
            operation_name: Name for logging purposes
            deadline: time.monotonic() value after which no further attempt
                is started; backoff sleeps are shortened to end by then

        Returns:
            The operation's result

        Raises:
            The last error after max_attempts transient failures, or the
            first non-transient error
        """
        for attempt in range(self.max_attempts):
            try:
                result = await operation()
            except Exception as e:
                if not self.is_retryable(e):
                    log_with_correlation(
                        logging.ERROR,
                        f"Failed: {e}",
                        operation_name,
                        attempt + 1,
                        self.max_attempts,
                        log=self._log,
                        error_type="fatal",
                    )
                    raise

                if attempt >= self.max_attempts - 1:
                    log_with_correlation(
                        logging.WARNING,
                        f"Max attempts ({self.max_attempts}) exceeded. Last error: {e}",
                        operation_name,
                        attempt + 1,
                        self.max_attempts,
                        log=self._log,
                        error_type="exhausted",
                    )
                    raise

                delay = self.delay_for(attempt)
                if deadline is not None:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        log_with_correlation(
                            logging.WARNING,
                            f"Deadline reached after {attempt + 1} attempts. Last error: {e}",
                            operation_name,
                            attempt + 1,
                            self.max_attempts,
                            log=self._log,
                            error_type="exhausted",
                        )
                        raise
                    delay = min(delay, remaining)
                log_with_correlation(
                    logging.WARNING,
                    f"Recoverable error: {e}, retrying in {delay:.2f}s",
                    operation_name,
                    attempt + 1,
                    self.max_attempts,
                    log=self._log,
                    error_type="recoverable",
                )
                await self._sleep(delay)
                continue

            if attempt > 0:
                log_with_correlation(
                    logging.INFO,
                    f"Succeeded after {attempt + 1} attempts",
                    operation_name,
                    attempt + 1,
                    self.max_attempts,
                    log=self._log,
                )
            return result

        # max_attempts >= 1 is enforced in __init__, the loop always returns or raises
        raise AssertionError("unreachable")


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 1.0,
    operation_name: str = "operation",
) -> T:
    """
    Run operation with up to max_attempts attempts and linear backoff.

    Example:
        block = await run_with_retry(lambda: rpc.call("getBlock", [slot]), 3, 1.0)
    """
    policy = RetryPolicy(max_attempts=max_attempts, base_delay=base_delay)
    return await policy.run(operation, operation_name)
