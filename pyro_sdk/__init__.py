"""
Pyro SDK - Chain-agnostic transaction confirmation tracking

Waits for submitted transactions to confirm on:
- EVM chains (Ethereum, Polygon, Arbitrum, Optimism, Base) by block depth
- Solana by commitment level (processed / confirmed / finalized)

Every RPC call is retried with linear backoff; chain-reported failures
end the wait immediately.
"""

from .client import PyroClient
from .types import (
    TransactionHandle,
    ChainFamily,
    Commitment,
    RawStatus,
    BlockInfo,
    ConfirmationTarget,
    TransactionResult,
    TxStatus,
    NetworkConfig,
    get_network,
    list_networks,
)
from .errors import (
    ErrorCode,
    PyroError,
    RpcError,
    ChainReportedFailure,
    ConfirmationTimeout,
    ConfirmationCancelled,
    ValidationError,
    ConfigurationError,
)

# Tracking
from .modules.confirmation import ConfirmationTracker, meets_target
from .infra.retry import RetryPolicy

# Chain adapters
from .chains import ChainAdapter, SolanaAdapter, EvmAdapter, create_adapter, create_adapter_for_network

__all__ = [
    # Client
    "PyroClient",
    # Types
    "TransactionHandle",
    "ChainFamily",
    "Commitment",
    "RawStatus",
    "BlockInfo",
    "ConfirmationTarget",
    "TransactionResult",
    "TxStatus",
    "NetworkConfig",
    "get_network",
    "list_networks",
    # Errors
    "ErrorCode",
    "PyroError",
    "RpcError",
    "ChainReportedFailure",
    "ConfirmationTimeout",
    "ConfirmationCancelled",
    "ValidationError",
    "ConfigurationError",
    # Tracking
    "ConfirmationTracker",
    "meets_target",
    "RetryPolicy",
    # Chain adapters
    "ChainAdapter",
    "SolanaAdapter",
    "EvmAdapter",
    "create_adapter",
    "create_adapter_for_network",
]

__version__ = "0.1.0"
