"""
Confirmation Tracker

Polls a chain adapter after a transaction was broadcast until it reaches
the requested confirmation depth, fails on-chain, or the deadline passes.

One tracker serves every chain family: EVM confirmation counts and Solana
commitment levels are both expressed through ConfirmationTarget, and all
chain access goes through the ChainAdapter interface.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, Iterable, Optional, TypeVar, Union

from ..chains.base import ChainAdapter
from ..errors import ConfirmationCancelled, ConfirmationTimeout, PyroError
from ..infra.retry import CorrelationContext, RetryPolicy, log_with_correlation
from ..types import (
    Commitment,
    ConfirmationTarget,
    RawStatus,
    TransactionHandle,
    TransactionResult,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def meets_target(status: RawStatus, target: ConfirmationTarget) -> bool:
    """
    Whether a status snapshot satisfies a confirmation target.

    The first satisfied condition wins: a commitment match, or a
    confirmation count at or above the target's threshold.
    """
    if target.commitment is not None and status.commitment is not None:
        if status.commitment.satisfies(target.commitment):
            return True

    threshold = target.confirmation_threshold
    if threshold is not None and status.confirmations is not None:
        return status.confirmations >= threshold

    return False


class ConfirmationTracker:
    """
    Waits for submitted transactions to confirm

    The tracker keeps no state between calls, so one instance can wait on
    many handles concurrently.

    Usage:
        tracker = ConfirmationTracker()
        target = ConfirmationTarget.solana("finalized")

        async with SolanaAdapter(rpc_url) as adapter:
            try:
                result = await tracker.await_confirmation(signature, target, adapter)
            except ConfirmationTimeout as e:
                print(f"Still unresolved after {e.elapsed:.0f}s")

        if result.is_failed:
            print(f"Rejected on-chain: {result.error}")
    """

    def __init__(
        self,
        retry_policy: Optional[RetryPolicy] = None,
        log: Optional[logging.Logger] = None,
    ):
        """
        Initialize tracker

        Args:
            retry_policy: Retry policy for each single RPC call (defaults
                to config.rpc.max_retries attempts, linear backoff)
            log: Logger for tracker output (defaults to this module's)
        """
        self._logger = log or logger
        self._retry = retry_policy or RetryPolicy(log=self._logger)

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry

    def _log(self, level: int, message: str, **extra):
        log_with_correlation(level, message, "await_confirmation", log=self._logger, **extra)

    async def await_confirmation(
        self,
        handle: TransactionHandle,
        target: ConfirmationTarget,
        adapter: ChainAdapter,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> TransactionResult:
        """
        Wait until a transaction confirms or fails on-chain.

        Args:
            handle: Transaction hash or signature
            target: What counts as confirmed, and how long to wait
            adapter: Chain adapter to poll
            cancel_event: Optional event; setting it aborts the wait

        Returns:
            CONFIRMED result with block number, hash and confirmations, or
            FAILED result when the chain rejected the transaction

        Raises:
            ValidationError: Malformed handle (before any RPC call)
            ConfirmationTimeout: Deadline passed without resolution
            ConfirmationCancelled: cancel_event was set
        """
        adapter.validate_handle(handle)

        with CorrelationContext("confirm"):
            return await self._poll(handle, target, adapter, cancel_event)

    async def _poll(
        self,
        handle: TransactionHandle,
        target: ConfirmationTarget,
        adapter: ChainAdapter,
        cancel_event: Optional[asyncio.Event],
    ) -> TransactionResult:
        start = time.monotonic()
        deadline = start + target.timeout
        last_status: Optional[RawStatus] = None
        polls = 0

        self._log(logging.INFO, f"Waiting for {handle} ({target.describe()})", handle=handle)

        while True:
            elapsed = time.monotonic() - start
            if elapsed >= target.timeout:
                break
            self._check_cancelled(handle, start, cancel_event)

            polls += 1
            try:
                status = await self._call(
                    lambda: adapter.get_status(handle), "get_status", deadline, start, cancel_event, handle
                )
            except ConfirmationCancelled:
                raise
            except Exception as e:
                if not self._is_transient(e):
                    raise
                self._log(
                    logging.WARNING,
                    f"Status poll {polls} failed, still waiting: {e!r}",
                    handle=handle,
                )
            else:
                last_status = status

                # A chain-reported failure is final, never retried
                if status.has_error:
                    self._log(logging.WARNING, f"{handle} failed on-chain: {status.error}", handle=handle)
                    return TransactionResult.failed(
                        handle,
                        status.error,
                        block_number=status.slot,
                        block_hash=status.block_hash,
                        confirmations=status.confirmations,
                    )

                if meets_target(status, target):
                    result = await self._complete(handle, status, target, adapter, deadline, start, cancel_event)
                    if result is not None:
                        self._log(
                            logging.INFO,
                            f"{handle} confirmed after {time.monotonic() - start:.2f}s ({polls} polls)",
                            handle=handle,
                        )
                        return result
                else:
                    self._log(logging.DEBUG, f"Poll {polls}: {status.describe()}", handle=handle)

            await self._wait(target, start, cancel_event, handle)

        self._log(
            logging.WARNING,
            f"Gave up on {handle} after {elapsed:.2f}s, last status: "
            f"{last_status.describe() if last_status else 'none'}",
            handle=handle,
        )
        raise ConfirmationTimeout(handle, elapsed, target, last_status)

    def _is_transient(self, error: Exception) -> bool:
        # Deadline expiry of a single call counts as transient
        return isinstance(error, asyncio.TimeoutError) or self._retry.is_retryable(error)

    async def _call(
        self,
        operation: Callable[[], Awaitable[T]],
        operation_name: str,
        deadline: float,
        start: float,
        cancel_event: Optional[asyncio.Event],
        handle: TransactionHandle,
    ) -> T:
        """
        Run one retried RPC call inside the remaining time budget

        Raises:
            asyncio.TimeoutError: The wait deadline passed first
            ConfirmationCancelled: cancel_event was set first
        """
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise asyncio.TimeoutError()

        call = asyncio.ensure_future(self._retry.run(operation, operation_name, deadline=deadline))
        waiters = {call}
        cancel_waiter = None
        if cancel_event is not None:
            cancel_waiter = asyncio.ensure_future(cancel_event.wait())
            waiters.add(cancel_waiter)

        try:
            done, _ = await asyncio.wait(waiters, timeout=remaining, return_when=asyncio.FIRST_COMPLETED)
        finally:
            pending = [w for w in waiters if not w.done()]
            for waiter in pending:
                waiter.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        if call in done:
            return call.result()
        if cancel_waiter is not None and cancel_waiter in done:
            self._check_cancelled(handle, start, cancel_event)
        raise asyncio.TimeoutError()

    async def _complete(
        self,
        handle: TransactionHandle,
        status: RawStatus,
        target: ConfirmationTarget,
        adapter: ChainAdapter,
        deadline: float,
        start: float,
        cancel_event: Optional[asyncio.Event],
    ) -> Optional[TransactionResult]:
        """Build the confirmed result, or None to keep polling"""
        if status.slot is None:
            self._log(logging.DEBUG, "Target met but no slot reported yet", handle=handle)
            return None

        hint = target.commitment or Commitment.CONFIRMED
        try:
            block = await self._call(
                lambda: adapter.get_block_info(status.slot, hint),
                "get_block_info",
                deadline,
                start,
                cancel_event,
                handle,
            )
        except ConfirmationCancelled:
            raise
        except Exception as e:
            if not self._is_transient(e):
                raise
            self._log(
                logging.WARNING,
                f"Block {status.slot} lookup failed, polling again: {e!r}",
                handle=handle,
            )
            return None

        confirmations = target.cap_confirmations(status.confirmations)
        return TransactionResult.confirmed(
            handle,
            block_number=block.number,
            block_hash=block.hash,
            # Rooted Solana slots report no confirmation count
            confirmations=confirmations if confirmations is not None else 0,
        )

    def _check_cancelled(
        self,
        handle: TransactionHandle,
        start: float,
        cancel_event: Optional[asyncio.Event],
    ) -> None:
        if cancel_event is not None and cancel_event.is_set():
            elapsed = time.monotonic() - start
            self._log(logging.INFO, f"Wait for {handle} cancelled after {elapsed:.2f}s", handle=handle)
            raise ConfirmationCancelled(handle, elapsed)

    async def _wait(
        self,
        target: ConfirmationTarget,
        start: float,
        cancel_event: Optional[asyncio.Event],
        handle: TransactionHandle,
    ) -> None:
        remaining = target.timeout - (time.monotonic() - start)
        delay = min(target.poll_interval, remaining)
        if delay <= 0:
            return

        if cancel_event is None:
            await asyncio.sleep(delay)
            return

        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return
        self._check_cancelled(handle, start, cancel_event)

    async def await_confirmations(
        self,
        handles: Iterable[TransactionHandle],
        target: ConfirmationTarget,
        adapter: ChainAdapter,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Dict[TransactionHandle, Union[TransactionResult, PyroError]]:
        """
        Wait on several transactions concurrently.

        Returns:
            Mapping of handle to its TransactionResult, or to the PyroError
            (timeout, cancellation, validation) that ended its wait
        """
        handles = list(dict.fromkeys(handles))
        outcomes = await asyncio.gather(
            *(self.await_confirmation(h, target, adapter, cancel_event) for h in handles),
            return_exceptions=True,
        )

        results: Dict[TransactionHandle, Union[TransactionResult, PyroError]] = {}
        for handle, outcome in zip(handles, outcomes):
            if isinstance(outcome, BaseException) and not isinstance(outcome, PyroError):
                raise outcome
            results[handle] = outcome
        return results

    async def get_transaction_status(
        self,
        handle: TransactionHandle,
        adapter: ChainAdapter,
        commitment_hint: Optional[Commitment] = None,
    ) -> TransactionResult:
        """
        Single status lookup without waiting.

        Returns PENDING while the chain has not seen the transaction, FAILED
        if it was rejected, CONFIRMED with block data once it is included.

        Raises:
            ValidationError: Malformed handle
            RpcError: RPC failed after retries
        """
        adapter.validate_handle(handle)

        status = await self._retry.run(lambda: adapter.get_status(handle), "get_status")
        if not status.found:
            return TransactionResult.pending(handle)
        if status.has_error:
            return TransactionResult.failed(
                handle,
                status.error,
                block_number=status.slot,
                block_hash=status.block_hash,
                confirmations=status.confirmations,
            )
        if status.slot is None:
            return TransactionResult.pending(handle, confirmations=status.confirmations)

        block = await self._retry.run(
            lambda: adapter.get_block_info(status.slot, commitment_hint), "get_block_info"
        )
        return TransactionResult.confirmed(
            handle,
            block_number=block.number,
            block_hash=block.hash,
            confirmations=status.confirmations if status.confirmations is not None else 0,
        )
