"""
EVM chain adapter using web3.py

Confirmation on EVM chains is a block count: the receipt's block plus
every block built on top of it.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

from web3 import AsyncWeb3, AsyncHTTPProvider
from web3.exceptions import BlockNotFound, TransactionNotFound

from .base import ChainAdapter
from ..errors import ConfigurationError, RpcError, ValidationError
from ..types import BlockInfo, ChainFamily, Commitment, RawStatus, TransactionHandle

logger = logging.getLogger(__name__)

_TX_HASH = re.compile(r"^0x[0-9a-fA-F]{64}$")


def _to_hex(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value)


def create_async_web3(rpc_url: str) -> AsyncWeb3:
    """
    Create AsyncWeb3 instance for a chain

    Args:
        rpc_url: RPC endpoint URL

    Returns:
        AsyncWeb3 connected through an HTTP provider
    """
    if not rpc_url:
        raise ConfigurationError.missing("EVM RPC URL")
    return AsyncWeb3(AsyncHTTPProvider(rpc_url))


class EvmAdapter(ChainAdapter):
    """
    Chain adapter for Ethereum and other EVM chains

    Usage:
        async with EvmAdapter(rpc_url="https://sepolia.base.org") as adapter:
            status = await adapter.get_status(tx_hash)
    """

    family = ChainFamily.EVM

    def __init__(
        self,
        web3: Optional[AsyncWeb3] = None,
        rpc_url: Optional[str] = None,
    ):
        """
        Initialize adapter

        Args:
            web3: Pre-built AsyncWeb3 instance
            rpc_url: RPC endpoint to build one from when web3 is not given
        """
        if web3 is None:
            web3 = create_async_web3(rpc_url)
        self._w3 = web3
        self._endpoint = rpc_url

    @property
    def web3(self) -> AsyncWeb3:
        return self._w3

    def _rpc_error(self, method: str, error: Exception) -> RpcError:
        return RpcError(
            f"{method} failed: {error}",
            original_error=error,
            endpoint=self._endpoint,
        )

    def validate_handle(self, handle: TransactionHandle) -> None:
        if not isinstance(handle, str) or not _TX_HASH.match(handle):
            raise ValidationError.invalid_handle(handle, "expected a 0x-prefixed 32-byte transaction hash")

    async def get_status(self, handle: TransactionHandle) -> RawStatus:
        try:
            receipt = await self._w3.eth.get_transaction_receipt(handle)
        except TransactionNotFound:
            # Not mined yet (or dropped from the mempool)
            return RawStatus()
        except Exception as e:
            raise self._rpc_error("eth_getTransactionReceipt", e) from e

        try:
            head = await self._w3.eth.block_number
        except Exception as e:
            raise self._rpc_error("eth_blockNumber", e) from e

        block_number = int(receipt["blockNumber"])
        # A lagging load-balanced node can report a head behind the receipt
        confirmations = max(int(head) - block_number + 1, 1)

        error = None
        if receipt.get("status") == 0:
            error = "execution reverted"

        return RawStatus(
            error=error,
            slot=block_number,
            confirmations=confirmations,
            block_hash=_to_hex(receipt.get("blockHash")),
        )

    async def get_block_info(
        self,
        identifier: int,
        commitment_hint: Optional[Commitment] = None,
    ) -> BlockInfo:
        # Block numbers are absolute, the commitment hint has no EVM equivalent here
        try:
            block = await self._w3.eth.get_block(identifier)
        except BlockNotFound as e:
            raise RpcError.invalid_response(f"block {identifier} not available", self._endpoint) from e
        except Exception as e:
            raise self._rpc_error("eth_getBlockByNumber", e) from e

        return BlockInfo(
            number=int(block["number"]),
            hash=_to_hex(block["hash"]),
            parent_hash=_to_hex(block.get("parentHash")),
            timestamp=block.get("timestamp"),
        )

    async def get_transaction(self, handle: TransactionHandle) -> Optional[Dict[str, Any]]:
        """Return the transaction receipt, or None while it is not mined"""
        try:
            receipt = await self._w3.eth.get_transaction_receipt(handle)
        except TransactionNotFound:
            return None
        except Exception as e:
            raise self._rpc_error("eth_getTransactionReceipt", e) from e
        return dict(receipt)

    async def close(self) -> None:
        provider = getattr(self._w3, "provider", None)
        disconnect = getattr(provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()
