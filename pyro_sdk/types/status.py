"""
Chain-reported status snapshots
"""

from dataclasses import dataclass
from typing import Optional

from .common import Commitment


@dataclass(frozen=True)
class RawStatus:
    """
    Status of a transaction as reported by one RPC poll

    Produced fresh on every poll. All fields are optional: a transaction the
    node has not seen yet is a RawStatus with nothing set.

    Attributes:
        error: Chain-reported execution error (revert, instruction error)
        slot: Slot (Solana) or block number (EVM) that included the tx
        confirmations: Blocks/slots built on top, including the tx's own
        commitment: Solana commitment label, None on EVM
        block_hash: Block hash when the status call already knows it
    """
    error: Optional[str] = None
    slot: Optional[int] = None
    confirmations: Optional[int] = None
    commitment: Optional[Commitment] = None
    block_hash: Optional[str] = None

    @property
    def found(self) -> bool:
        """True when the node knows about the transaction at all"""
        return (
            self.error is not None
            or self.slot is not None
            or self.commitment is not None
        )

    @property
    def has_error(self) -> bool:
        return self.error is not None

    def describe(self) -> str:
        if not self.found:
            return "not found"
        parts = []
        if self.error is not None:
            parts.append(f"error={self.error}")
        if self.slot is not None:
            parts.append(f"slot={self.slot}")
        if self.confirmations is not None:
            parts.append(f"confirmations={self.confirmations}")
        if self.commitment is not None:
            parts.append(f"commitment={self.commitment.value}")
        return ", ".join(parts)

    def __str__(self) -> str:
        return f"RawStatus({self.describe()})"


@dataclass(frozen=True)
class BlockInfo:
    """Metadata of the block (or slot) that included a transaction"""
    number: int
    hash: str
    parent_hash: Optional[str] = None
    timestamp: Optional[int] = None
