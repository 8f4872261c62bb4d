"""
Error definitions for Pyro SDK
"""

from .exceptions import (
    ErrorCode,
    PyroError,
    RpcError,
    ChainReportedFailure,
    ConfirmationTimeout,
    ConfirmationCancelled,
    ValidationError,
    ConfigurationError,
)

__all__ = [
    "ErrorCode",
    "PyroError",
    "RpcError",
    "ChainReportedFailure",
    "ConfirmationTimeout",
    "ConfirmationCancelled",
    "ValidationError",
    "ConfigurationError",
]
