"""
Network registry for EVM chains and Solana clusters

Maps network names to default public RPC endpoints and chain IDs.
Public endpoints are rate limited; configure your own URL for production.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from .common import ChainFamily
from ..errors import ConfigurationError


@dataclass(frozen=True)
class NetworkConfig:
    """Network name with its default RPC endpoint"""
    name: str
    family: ChainFamily
    rpc_url: str
    chain_id: Optional[int] = None

    def __str__(self) -> str:
        return self.name


DEFAULT_EVM_RPC_URL = "https://eth.llamarpc.com"
DEFAULT_SOLANA_RPC_URL = "https://api.mainnet-beta.solana.com"


# =============================================================================
# EVM networks
# =============================================================================

EVM_NETWORKS: Dict[str, NetworkConfig] = {
    "mainnet": NetworkConfig("mainnet", ChainFamily.EVM, DEFAULT_EVM_RPC_URL, 1),
    "sepolia": NetworkConfig("sepolia", ChainFamily.EVM, "https://rpc.sepolia.org", 11155111),
    "holesky": NetworkConfig("holesky", ChainFamily.EVM, "https://ethereum-holesky-rpc.publicnode.com", 17000),
    "polygon": NetworkConfig("polygon", ChainFamily.EVM, "https://polygon-rpc.com", 137),
    "arbitrum": NetworkConfig("arbitrum", ChainFamily.EVM, "https://arb1.arbitrum.io/rpc", 42161),
    "arbitrum-sepolia": NetworkConfig(
        "arbitrum-sepolia", ChainFamily.EVM, "https://sepolia-rollup.arbitrum.io/rpc", 421614
    ),
    "optimism": NetworkConfig("optimism", ChainFamily.EVM, "https://mainnet.optimism.io", 10),
    "optimism-sepolia": NetworkConfig(
        "optimism-sepolia", ChainFamily.EVM, "https://sepolia.optimism.io", 11155420
    ),
    "base": NetworkConfig("base", ChainFamily.EVM, "https://mainnet.base.org", 8453),
    "base-sepolia": NetworkConfig("base-sepolia", ChainFamily.EVM, "https://sepolia.base.org", 84532),
}


# =============================================================================
# Solana clusters
# =============================================================================

SOLANA_NETWORKS: Dict[str, NetworkConfig] = {
    "mainnet-beta": NetworkConfig("mainnet-beta", ChainFamily.SOLANA, DEFAULT_SOLANA_RPC_URL),
    "testnet": NetworkConfig("testnet", ChainFamily.SOLANA, "https://api.testnet.solana.com"),
    "devnet": NetworkConfig("devnet", ChainFamily.SOLANA, "https://api.devnet.solana.com"),
}


def get_network(name: str, family: Optional[ChainFamily] = None) -> NetworkConfig:
    """
    Look up a network by name

    Args:
        name: Network name (e.g., "mainnet", "base-sepolia", "devnet")
        family: Restrict the lookup to one chain family. "mainnet" is
            ambiguous without it and resolves to the EVM network.

    Returns:
        NetworkConfig

    Raises:
        ConfigurationError: If the network is unknown
    """
    key = name.lower()
    if family is None or family == ChainFamily.EVM:
        if key in EVM_NETWORKS:
            return EVM_NETWORKS[key]
    if family is None or family == ChainFamily.SOLANA:
        if key in SOLANA_NETWORKS:
            return SOLANA_NETWORKS[key]
    raise ConfigurationError.invalid("network", f"unknown network {name!r}")


def list_networks(family: Optional[ChainFamily] = None) -> list:
    """List known network names, optionally for one chain family"""
    names = []
    if family is None or family == ChainFamily.EVM:
        names.extend(EVM_NETWORKS)
    if family is None or family == ChainFamily.SOLANA:
        names.extend(SOLANA_NETWORKS)
    return names
