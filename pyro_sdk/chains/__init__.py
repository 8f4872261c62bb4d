"""
Chain adapters

One adapter per chain family, all implementing ChainAdapter.
"""

from .base import ChainAdapter
from .solana import SolanaAdapter
from .evm import EvmAdapter, create_async_web3
from .registry import (
    ChainRegistry,
    create_adapter,
    create_adapter_for_network,
    register_adapter,
)

__all__ = [
    "ChainAdapter",
    "SolanaAdapter",
    "EvmAdapter",
    "create_async_web3",
    "ChainRegistry",
    "create_adapter",
    "create_adapter_for_network",
    "register_adapter",
]
