"""
Result type definitions for tracked transactions
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any

from ..errors import ChainReportedFailure


class TxStatus(Enum):
    """Transaction status"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass
class TransactionResult:
    """
    Normalized outcome of tracking a transaction

    CONFIRMED and FAILED are terminal. PENDING is only produced by one-shot
    status lookups; a wait that runs out of time raises ConfirmationTimeout
    instead of returning PENDING.

    Attributes:
        handle: Transaction hash or signature
        status: Transaction status
        block_number: Block number (EVM) or slot (Solana) that included it
        block_hash: Hash of that block
        confirmations: Confirmation count at the time of the result
        error: Chain-reported error if failed
    """
    handle: str
    status: TxStatus
    block_number: Optional[int] = None
    block_hash: Optional[str] = None
    confirmations: Optional[int] = None
    error: Optional[str] = None

    @property
    def is_confirmed(self) -> bool:
        return self.status == TxStatus.CONFIRMED

    @property
    def is_failed(self) -> bool:
        return self.status == TxStatus.FAILED

    @property
    def is_pending(self) -> bool:
        return self.status == TxStatus.PENDING

    @property
    def is_terminal(self) -> bool:
        return self.status != TxStatus.PENDING

    @classmethod
    def confirmed(
        cls,
        handle: str,
        block_number: int,
        block_hash: str,
        confirmations: Optional[int] = None,
    ) -> "TransactionResult":
        """Create confirmed result"""
        return cls(
            handle=handle,
            status=TxStatus.CONFIRMED,
            block_number=block_number,
            block_hash=block_hash,
            confirmations=confirmations,
        )

    @classmethod
    def failed(cls, handle: str, error: Optional[str] = None, **kwargs) -> "TransactionResult":
        """Create failed result (chain rejected the transaction)"""
        return cls(
            handle=handle,
            status=TxStatus.FAILED,
            error=error,
            **kwargs
        )

    @classmethod
    def pending(cls, handle: str, **kwargs) -> "TransactionResult":
        """Create pending result (not yet included, or not deep enough)"""
        return cls(handle=handle, status=TxStatus.PENDING, **kwargs)

    def raise_for_status(self) -> "TransactionResult":
        """Raise ChainReportedFailure if the chain rejected the transaction"""
        if self.is_failed:
            raise ChainReportedFailure(self.handle, self.error)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with camelCase keys (txHash, blockNumber, ...)"""
        data: Dict[str, Any] = {"txHash": self.handle, "status": self.status.value}
        if self.block_number is not None:
            data["blockNumber"] = self.block_number
        if self.block_hash is not None:
            data["blockHash"] = self.block_hash
        if self.confirmations is not None:
            data["confirmations"] = self.confirmations
        if self.error is not None:
            data["error"] = self.error
        return data

    def __str__(self) -> str:
        handle_display = f"{self.handle[:16]}..." if len(self.handle) > 16 else self.handle
        if self.is_confirmed:
            return (
                f"TransactionResult(CONFIRMED, {handle_display}, block={self.block_number}, "
                f"confirmations={self.confirmations})"
            )
        if self.is_failed:
            return f"TransactionResult(FAILED, {handle_display}, error={self.error})"
        return f"TransactionResult(PENDING, {handle_display})"
