"""
Base chain adapter interface

Every chain family (EVM, Solana) implements this interface so the
confirmation tracker can be written once, without branching on the chain.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..types import BlockInfo, ChainFamily, Commitment, RawStatus, TransactionHandle


class ChainAdapter(ABC):
    """
    Abstract base class for chain adapters

    Each adapter provides:
    - Handle validation (hash/signature format)
    - Status snapshots for a submitted transaction
    - Block metadata lookups

    Status and block calls must be idempotent and side-effect free. They
    report transient failures by raising RpcError; a transaction the chain
    rejected is not an exception but a RawStatus with error set.
    """

    family: ChainFamily

    @abstractmethod
    def validate_handle(self, handle: TransactionHandle) -> None:
        """
        Check a handle is well formed for this chain

        Raises:
            ValidationError: If the handle is malformed
        """
        ...

    @abstractmethod
    async def get_status(self, handle: TransactionHandle) -> RawStatus:
        """
        Get a fresh status snapshot for a transaction

        Returns:
            RawStatus (empty when the node has not seen the transaction)

        Raises:
            RpcError: On transient RPC failure
        """
        ...

    @abstractmethod
    async def get_block_info(
        self,
        identifier: int,
        commitment_hint: Optional[Commitment] = None,
    ) -> BlockInfo:
        """
        Get metadata for the block/slot that included a transaction

        Args:
            identifier: Block number (EVM) or slot (Solana)
            commitment_hint: Commitment to read the block at, if the
                chain supports one

        Raises:
            RpcError: On transient RPC failure or block not yet available
        """
        ...

    @abstractmethod
    async def get_transaction(self, handle: TransactionHandle) -> Optional[Dict[str, Any]]:
        """
        Get the raw transaction as returned by the node

        Returns:
            Transaction data, or None if not found
        """
        ...

    async def close(self) -> None:
        """Release network resources"""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(family={self.family.value})"
