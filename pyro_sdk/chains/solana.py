"""
Solana chain adapter

Reads signature statuses and block metadata over Solana JSON-RPC.
Confirmation on Solana is expressed as a commitment level
(processed < confirmed < finalized) rather than a block count.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Union

from solders.signature import Signature

from .base import ChainAdapter
from ..errors import RpcError, ValidationError
from ..infra import AsyncRpcClient, RpcClientConfig
from ..types import BlockInfo, ChainFamily, Commitment, RawStatus, TransactionHandle

logger = logging.getLogger(__name__)

_BASE58_SIGNATURE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{64,88}$")


def _format_chain_error(err: Any) -> str:
    if isinstance(err, str):
        return err
    return json.dumps(err, separators=(",", ":"), sort_keys=True)


def _block_commitment(commitment: Optional[Commitment]) -> str:
    # getBlock and getTransaction reject "processed"
    if commitment is None or commitment is Commitment.PROCESSED:
        return Commitment.CONFIRMED.value
    return commitment.value


class SolanaAdapter(ChainAdapter):
    """
    Chain adapter for Solana clusters

    Usage:
        async with SolanaAdapter("https://api.devnet.solana.com") as adapter:
            status = await adapter.get_status(signature)
    """

    family = ChainFamily.SOLANA

    def __init__(
        self,
        rpc: Union[AsyncRpcClient, str, List[str]],
        commitment: Optional[Union[str, Commitment]] = None,
        search_transaction_history: bool = False,
        rpc_config: Optional[RpcClientConfig] = None,
    ):
        """
        Initialize adapter

        Args:
            rpc: RPC client, or endpoint URL(s) to build one from
            commitment: Default commitment for block/transaction reads
            search_transaction_history: Ask the node to search its ledger
                for signatures no longer in the recent status cache
            rpc_config: RPC configuration when building the client here
        """
        if isinstance(rpc, AsyncRpcClient):
            self._rpc = rpc
        else:
            self._rpc = AsyncRpcClient(rpc, config=rpc_config)
        self._commitment = Commitment.parse(commitment or self._rpc.commitment)
        self._search_history = search_transaction_history

    @property
    def rpc(self) -> AsyncRpcClient:
        """Access to RPC client"""
        return self._rpc

    @property
    def commitment(self) -> Commitment:
        return self._commitment

    def validate_handle(self, handle: TransactionHandle) -> None:
        if not isinstance(handle, str) or not _BASE58_SIGNATURE.match(handle):
            raise ValidationError.invalid_handle(handle, "expected a base58 transaction signature")
        try:
            Signature.from_string(handle)
        except (ValueError, TypeError) as e:
            raise ValidationError.invalid_handle(handle, f"not a 64-byte signature ({e})") from e

    async def get_status(self, handle: TransactionHandle) -> RawStatus:
        result = await self._rpc.call(
            "getSignatureStatuses",
            [[handle], {"searchTransactionHistory": self._search_history}],
        )
        if not isinstance(result, dict):
            raise RpcError.invalid_response("getSignatureStatuses returned no result", self._rpc.endpoint)

        values = result.get("value") or []
        status = values[0] if values else None
        if not status:
            return RawStatus()

        err = status.get("err")
        label = status.get("confirmationStatus")
        try:
            commitment = Commitment.parse(label) if label else None
        except ValidationError:
            raise RpcError.invalid_response(
                f"unknown confirmationStatus {label!r}", self._rpc.endpoint
            ) from None

        # confirmations is null once the slot is rooted (finalized)
        return RawStatus(
            error=_format_chain_error(err) if err is not None else None,
            slot=status.get("slot"),
            confirmations=status.get("confirmations"),
            commitment=commitment,
        )

    async def get_block_info(
        self,
        identifier: int,
        commitment_hint: Optional[Commitment] = None,
    ) -> BlockInfo:
        commitment = _block_commitment(commitment_hint or self._commitment)
        block = await self._rpc.call(
            "getBlock",
            [
                identifier,
                {
                    "commitment": commitment,
                    "encoding": "json",
                    "transactionDetails": "none",
                    "rewards": False,
                    "maxSupportedTransactionVersion": 0,
                },
            ],
        )
        if not block or not block.get("blockhash"):
            raise RpcError.invalid_response(
                f"block for slot {identifier} not available at {commitment}", self._rpc.endpoint
            )

        return BlockInfo(
            number=identifier,
            hash=block["blockhash"],
            parent_hash=block.get("previousBlockhash"),
            timestamp=block.get("blockTime"),
        )

    async def get_transaction(self, handle: TransactionHandle) -> Optional[Dict[str, Any]]:
        return await self._rpc.call(
            "getTransaction",
            [
                handle,
                {
                    "encoding": "jsonParsed",
                    "commitment": _block_commitment(self._commitment),
                    "maxSupportedTransactionVersion": 0,
                },
            ],
        )

    async def close(self) -> None:
        await self._rpc.close()
