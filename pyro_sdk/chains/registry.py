"""
Chain adapter registry

Provides centralized registration and construction of chain adapters,
keyed by chain family, plus network-name based construction.
"""

from typing import Dict, Optional, Type, Union, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from .base import ChainAdapter

from ..errors import ConfigurationError
from ..config import get_config
from ..types import ChainFamily, get_network, DEFAULT_EVM_RPC_URL, DEFAULT_SOLANA_RPC_URL

logger = logging.getLogger(__name__)


class ChainRegistry:
    """
    Registry for chain adapters

    Usage:
        # Register adapter class
        ChainRegistry.register(ChainFamily.SOLANA, SolanaAdapter)

        # Build an adapter
        adapter = ChainRegistry.create("solana", rpc_url="https://api.devnet.solana.com")

        # List available chain families
        families = ChainRegistry.list()
    """

    # Registered adapter classes
    _adapters: Dict[ChainFamily, Type["ChainAdapter"]] = {}

    @classmethod
    def register(cls, family: Union[str, ChainFamily], adapter_class: Type["ChainAdapter"]):
        """
        Register a chain adapter class

        Args:
            family: Chain family (e.g., "evm", "solana")
            adapter_class: Adapter class (not instance)
        """
        family = ChainFamily.parse(family)
        cls._adapters[family] = adapter_class
        logger.debug(f"Registered chain adapter: {family.value} -> {adapter_class.__name__}")

    @classmethod
    def get_class(cls, family: Union[str, ChainFamily]) -> Type["ChainAdapter"]:
        family = ChainFamily.parse(family)
        if family not in cls._adapters:
            cls._try_load_adapter(family)
        if family not in cls._adapters:
            raise ConfigurationError.invalid("chain", f"no adapter registered for {family.value}")
        return cls._adapters[family]

    @classmethod
    def create(
        cls,
        family: Union[str, ChainFamily],
        rpc_url: Optional[str] = None,
        **kwargs,
    ) -> "ChainAdapter":
        """
        Build an adapter for a chain family

        Args:
            family: Chain family
            rpc_url: RPC endpoint (defaults to the configured URL, then the
                public mainnet endpoint)
            **kwargs: Adapter-specific options

        Returns:
            Chain adapter instance
        """
        family = ChainFamily.parse(family)
        adapter_class = cls.get_class(family)

        if family == ChainFamily.SOLANA:
            url = rpc_url or get_config().rpc.solana_url or DEFAULT_SOLANA_RPC_URL
            return adapter_class(url, **kwargs)

        url = rpc_url or get_config().rpc.evm_url or DEFAULT_EVM_RPC_URL
        return adapter_class(rpc_url=url, **kwargs)

    @classmethod
    def list(cls) -> list:
        """List registered chain families"""
        cls._ensure_loaded()
        return [family.value for family in cls._adapters]

    @classmethod
    def is_registered(cls, family: Union[str, ChainFamily]) -> bool:
        return ChainFamily.parse(family) in cls._adapters

    @classmethod
    def _try_load_adapter(cls, family: ChainFamily):
        """Lazy load an adapter module"""
        if family == ChainFamily.SOLANA:
            from .solana import SolanaAdapter
            cls.register(ChainFamily.SOLANA, SolanaAdapter)
        elif family == ChainFamily.EVM:
            from .evm import EvmAdapter
            cls.register(ChainFamily.EVM, EvmAdapter)

    @classmethod
    def _ensure_loaded(cls):
        for family in ChainFamily:
            if family not in cls._adapters:
                cls._try_load_adapter(family)


def create_adapter(
    chain: Union[str, ChainFamily],
    rpc_url: Optional[str] = None,
    **kwargs,
) -> "ChainAdapter":
    """
    Convenience function to build an adapter

    Args:
        chain: Chain family ("evm", "solana")
        rpc_url: Optional RPC endpoint
        **kwargs: Adapter-specific options

    Returns:
        Chain adapter instance
    """
    return ChainRegistry.create(chain, rpc_url=rpc_url, **kwargs)


def create_adapter_for_network(network: str, **kwargs) -> "ChainAdapter":
    """
    Build an adapter from a network name

    Args:
        network: Network name ("mainnet", "base-sepolia", "devnet", ...)
        **kwargs: Adapter-specific options

    Returns:
        Chain adapter instance using the network's public RPC endpoint
    """
    net = get_network(network)
    return ChainRegistry.create(net.family, rpc_url=net.rpc_url, **kwargs)


def register_adapter(family: Union[str, ChainFamily], adapter_class: Type["ChainAdapter"]):
    """
    Convenience function to register adapter

    Args:
        family: Chain family
        adapter_class: Adapter class
    """
    ChainRegistry.register(family, adapter_class)
