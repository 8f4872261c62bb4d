"""
Infrastructure layer for Pyro SDK

Provides:
- AsyncRpcClient: JSON-RPC over httpx with endpoint fallback
- RetryPolicy: bounded retry with linear backoff
- CorrelationContext: correlation IDs for log tracing
"""

from .rpc import AsyncRpcClient, RpcClientConfig
from .retry import (
    RetryPolicy,
    run_with_retry,
    classify_error,
    CorrelationContext,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
    log_with_correlation,
)

__all__ = [
    "AsyncRpcClient",
    "RpcClientConfig",
    "RetryPolicy",
    "run_with_retry",
    "classify_error",
    "CorrelationContext",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
    "log_with_correlation",
]
