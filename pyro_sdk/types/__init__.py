"""
Type definitions for Pyro SDK
"""

from .common import TransactionHandle, ChainFamily, Commitment
from .status import RawStatus, BlockInfo
from .target import ConfirmationTarget
from .result import TransactionResult, TxStatus

# Network registry
from .networks import (
    NetworkConfig,
    EVM_NETWORKS,
    SOLANA_NETWORKS,
    DEFAULT_EVM_RPC_URL,
    DEFAULT_SOLANA_RPC_URL,
    get_network,
    list_networks,
)

__all__ = [
    # Common types
    "TransactionHandle",
    "ChainFamily",
    "Commitment",
    "RawStatus",
    "BlockInfo",
    "ConfirmationTarget",
    "TransactionResult",
    "TxStatus",
    # Network registry
    "NetworkConfig",
    "EVM_NETWORKS",
    "SOLANA_NETWORKS",
    "DEFAULT_EVM_RPC_URL",
    "DEFAULT_SOLANA_RPC_URL",
    "get_network",
    "list_networks",
]
