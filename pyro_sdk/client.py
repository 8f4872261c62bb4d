"""
PyroClient - Unified entry point for transaction tracking

Binds one chain adapter to a confirmation tracker and exposes the
receive / get-status / wait-for-confirmation surface of the SDK.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, Optional, Union

from .chains import ChainAdapter, create_adapter, create_adapter_for_network
from .errors import PyroError
from .infra import RetryPolicy
from .modules.confirmation import ConfirmationTracker
from .types import ChainFamily, Commitment, ConfirmationTarget, TransactionHandle, TransactionResult


class PyroClient:
    """
    Unified transaction tracking client

    Usage:
        # Solana devnet
        async with PyroClient.for_network("devnet") as client:
            result = await client.wait_for_confirmation(signature, commitment="finalized")

        # EVM with a custom endpoint, 3 confirmations
        async with PyroClient("evm", rpc_url="https://sepolia.base.org") as client:
            result = await client.wait_for_confirmation(tx_hash, confirmations=3)
            print(result.block_number, result.confirmations)
    """

    def __init__(
        self,
        chain: Union[str, ChainFamily, ChainAdapter],
        rpc_url: Optional[str] = None,
        retry_policy: Optional[RetryPolicy] = None,
        log: Optional[logging.Logger] = None,
        **adapter_kwargs,
    ):
        """
        Initialize PyroClient

        Args:
            chain: Chain family ("evm", "solana") or a ready adapter
            rpc_url: RPC endpoint (ignored when an adapter is passed)
            retry_policy: Retry policy for single RPC calls
            log: Logger injected into the tracker
            **adapter_kwargs: Adapter-specific options
        """
        if isinstance(chain, ChainAdapter):
            self._adapter = chain
        else:
            self._adapter = create_adapter(chain, rpc_url=rpc_url, **adapter_kwargs)
        self._tracker = ConfirmationTracker(retry_policy=retry_policy, log=log)

    @classmethod
    def for_network(cls, network: str, **kwargs) -> "PyroClient":
        """Build a client for a named network using its public endpoint"""
        adapter_kwargs = {k: v for k, v in kwargs.items() if k not in ("retry_policy", "log")}
        adapter = create_adapter_for_network(network, **adapter_kwargs)
        return cls(adapter, retry_policy=kwargs.get("retry_policy"), log=kwargs.get("log"))

    @property
    def adapter(self) -> ChainAdapter:
        """Access to chain adapter"""
        return self._adapter

    @property
    def tracker(self) -> ConfirmationTracker:
        """Access to confirmation tracker"""
        return self._tracker

    @property
    def family(self) -> ChainFamily:
        return self._adapter.family

    def default_target(
        self,
        commitment: Optional[Union[str, Commitment]] = None,
        confirmations: Optional[int] = None,
        timeout: Optional[float] = None,
        max_confirmations: Optional[int] = None,
        poll_interval: Optional[float] = None,
    ) -> ConfirmationTarget:
        """
        Build a target with this chain family's defaults

        Solana waits for "confirmed" unless told otherwise, EVM for one block.
        """
        if self.family == ChainFamily.SOLANA and confirmations is None:
            return ConfirmationTarget.solana(
                commitment=commitment or Commitment.CONFIRMED,
                timeout=timeout,
                poll_interval=poll_interval,
                max_confirmations=max_confirmations,
            )
        if self.family == ChainFamily.EVM and commitment is None:
            return ConfirmationTarget.evm(
                confirmations=confirmations,
                timeout=timeout,
                poll_interval=poll_interval,
                max_confirmations=max_confirmations,
            )

        # Both kinds of condition requested explicitly
        base = (
            ConfirmationTarget.solana() if self.family == ChainFamily.SOLANA else ConfirmationTarget.evm()
        )
        return ConfirmationTarget(
            commitment=commitment,
            min_confirmations=confirmations,
            max_confirmations=max_confirmations,
            timeout=timeout if timeout is not None else base.timeout,
            poll_interval=poll_interval if poll_interval is not None else base.poll_interval,
        )

    async def wait_for_confirmation(
        self,
        handle: TransactionHandle,
        target: Optional[ConfirmationTarget] = None,
        cancel_event: Optional[asyncio.Event] = None,
        **target_kwargs,
    ) -> TransactionResult:
        """
        Wait for a transaction to confirm

        Args:
            handle: Transaction hash or signature
            target: Explicit target; otherwise built from target_kwargs
                (commitment, confirmations, timeout, max_confirmations,
                poll_interval) with chain defaults
            cancel_event: Optional event that aborts the wait when set

        Raises:
            ConfirmationTimeout: Deadline passed without resolution
        """
        if target is None:
            target = self.default_target(**target_kwargs)
        return await self._tracker.await_confirmation(handle, target, self._adapter, cancel_event)

    async def wait_for_confirmations(
        self,
        handles: Iterable[TransactionHandle],
        target: Optional[ConfirmationTarget] = None,
        **target_kwargs,
    ) -> Dict[TransactionHandle, Union[TransactionResult, PyroError]]:
        """Wait on several transactions concurrently"""
        if target is None:
            target = self.default_target(**target_kwargs)
        return await self._tracker.await_confirmations(handles, target, self._adapter)

    async def get_transaction_status(self, handle: TransactionHandle) -> TransactionResult:
        """One-shot status lookup (pending / failed / confirmed)"""
        return await self._tracker.get_transaction_status(handle, self._adapter)

    async def receive(self, handle: TransactionHandle) -> Optional[Dict[str, Any]]:
        """
        Fetch the transaction as the node returns it

        Solana: parsed transaction with metadata. EVM: transaction receipt.
        None while the node does not know the transaction.
        """
        self._adapter.validate_handle(handle)
        return await self._tracker.retry_policy.run(
            lambda: self._adapter.get_transaction(handle), "get_transaction"
        )

    async def close(self):
        await self._adapter.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return f"PyroClient(adapter={self._adapter!r})"
