"""
Test PyroClient and the chain registry

End-to-end waits run through the real Solana adapter against a mocked
JSON-RPC node, and through the EVM adapter with a fake web3 namespace.
"""

import json
import unittest
from types import SimpleNamespace

import httpx
import pytest
from web3.exceptions import TransactionNotFound

from pyro_sdk import (
    ChainFamily,
    Commitment,
    ConfigurationError,
    ConfirmationTarget,
    ConfirmationTimeout,
    EvmAdapter,
    PyroClient,
    RetryPolicy,
    SolanaAdapter,
    ValidationError,
)
from pyro_sdk.chains import ChainRegistry, create_adapter, create_adapter_for_network
from pyro_sdk.infra import AsyncRpcClient, RpcClientConfig

SIGNATURE = "5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnbJLgp8uirBgmQpjKhoR4tjF3ZpRzrFmBV6UjKdiSZkQUW"
TX_HASH = "0x" + "5c" * 32
BLOCKHASH = "EtWTRABZaYq6iMfeYKouRu166VU2xqa1wcaWoxPkrZBG"


def solana_node(statuses, block=None, transaction=None):
    """Mock node replaying signature statuses, one per getSignatureStatuses call"""
    calls = {"getSignatureStatuses": 0, "getBlock": 0, "getTransaction": 0}

    def handler(request):
        body = json.loads(request.content)
        method = body["method"]
        calls[method] += 1
        if method == "getSignatureStatuses":
            value = statuses[min(calls[method], len(statuses)) - 1]
            result = {"context": {"slot": 1000}, "value": [value]}
        elif method == "getBlock":
            result = block
        else:
            result = transaction
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    rpc = AsyncRpcClient(
        "https://api.devnet.solana.com",
        config=RpcClientConfig(commitment="confirmed"),
        http_client=http_client,
    )
    return SolanaAdapter(rpc), calls


class FakeEth:
    """Replays receipts and mines blocks_per_call blocks on each receipt lookup"""

    def __init__(self, receipts, head, blocks_per_call=0):
        self.receipts = list(receipts)
        self.head = head
        self.blocks_per_call = blocks_per_call

    @property
    async def block_number(self):
        return self.head

    async def get_transaction_receipt(self, tx_hash):
        self.head += self.blocks_per_call
        receipt = self.receipts.pop(0) if len(self.receipts) > 1 else self.receipts[0]
        if receipt is None:
            raise TransactionNotFound(f"Transaction with hash: '{tx_hash}' not found.")
        return receipt

    async def get_block(self, identifier):
        return {"number": identifier, "hash": "0x" + "11" * 32, "parentHash": "0x" + "22" * 32, "timestamp": 1}


def fast_retry():
    return RetryPolicy(max_attempts=2, base_delay=0)


class TestSolanaClient(unittest.IsolatedAsyncioTestCase):

    async def test_wait_for_finalized(self):
        adapter, calls = solana_node(
            [
                None,
                {"slot": 77, "confirmations": 0, "err": None, "confirmationStatus": "processed"},
                {"slot": 77, "confirmations": 12, "err": None, "confirmationStatus": "confirmed"},
                {"slot": 77, "confirmations": None, "err": None, "confirmationStatus": "finalized"},
            ],
            block={"blockhash": BLOCKHASH, "previousBlockhash": None, "blockTime": 1700000000},
        )

        async with PyroClient(adapter, retry_policy=fast_retry()) as client:
            result = await client.wait_for_confirmation(
                SIGNATURE, commitment="finalized", timeout=2.0, poll_interval=0.01
            )

        self.assertTrue(result.is_confirmed)
        self.assertEqual(result.block_number, 77)
        self.assertEqual(result.block_hash, BLOCKHASH)
        self.assertEqual(result.confirmations, 0)
        self.assertEqual(calls["getSignatureStatuses"], 4)
        self.assertEqual(calls["getBlock"], 1)

    async def test_wait_reports_instruction_error(self):
        adapter, calls = solana_node([
            {"slot": 77, "confirmations": 1, "err": {"InstructionError": [1, "InvalidAccountData"]},
             "confirmationStatus": "confirmed"},
        ])

        async with PyroClient(adapter, retry_policy=fast_retry()) as client:
            result = await client.wait_for_confirmation(SIGNATURE, timeout=1.0, poll_interval=0.01)

        self.assertTrue(result.is_failed)
        self.assertEqual(result.error, '{"InstructionError":[1,"InvalidAccountData"]}')
        self.assertEqual(calls["getBlock"], 0)

    async def test_wait_with_explicit_target(self):
        adapter, _ = solana_node([None])
        target = ConfirmationTarget.solana("confirmed", timeout=0.05, poll_interval=0.01)

        async with PyroClient(adapter, retry_policy=fast_retry()) as client:
            with self.assertRaises(ConfirmationTimeout):
                await client.wait_for_confirmation(SIGNATURE, target)

    async def test_invalid_signature(self):
        adapter, calls = solana_node([None])

        async with PyroClient(adapter) as client:
            with self.assertRaises(ValidationError):
                await client.wait_for_confirmation(TX_HASH)

        self.assertEqual(calls["getSignatureStatuses"], 0)

    async def test_get_transaction_status(self):
        adapter, _ = solana_node(
            [{"slot": 77, "confirmations": 3, "err": None, "confirmationStatus": "confirmed"}],
            block={"blockhash": BLOCKHASH},
        )

        async with PyroClient(adapter, retry_policy=fast_retry()) as client:
            result = await client.get_transaction_status(SIGNATURE)

        self.assertTrue(result.is_confirmed)
        self.assertEqual(result.to_dict(), {
            "txHash": SIGNATURE,
            "status": "confirmed",
            "blockNumber": 77,
            "blockHash": BLOCKHASH,
            "confirmations": 3,
        })

    async def test_receive(self):
        tx = {"slot": 77, "meta": {"err": None}}
        adapter, calls = solana_node([None], transaction=tx)

        async with PyroClient(adapter, retry_policy=fast_retry()) as client:
            self.assertEqual(await client.receive(SIGNATURE), tx)

        self.assertEqual(calls["getTransaction"], 1)


class TestEvmClient(unittest.IsolatedAsyncioTestCase):

    async def test_wait_for_three_confirmations(self):
        receipt = {"blockNumber": 100, "blockHash": "0x" + "11" * 32, "status": 1}
        # Head moves 100 -> 101 -> 102 across the three polls
        eth = FakeEth([None, receipt], head=99, blocks_per_call=1)
        client = PyroClient(EvmAdapter(web3=SimpleNamespace(eth=eth)), retry_policy=fast_retry())

        result = await client.wait_for_confirmation(
            TX_HASH, confirmations=3, timeout=2.0, poll_interval=0.01
        )

        self.assertTrue(result.is_confirmed)
        self.assertEqual(result.block_number, 100)
        self.assertEqual(result.confirmations, 3)
        self.assertEqual(eth.head, 102)

    async def test_reverted(self):
        receipt = {"blockNumber": 100, "blockHash": "0x" + "11" * 32, "status": 0}
        adapter = EvmAdapter(web3=SimpleNamespace(eth=FakeEth([receipt], head=105)))

        result = await PyroClient(adapter).wait_for_confirmation(TX_HASH, timeout=1.0, poll_interval=0.01)

        self.assertTrue(result.is_failed)
        self.assertEqual(result.error, "execution reverted")

    async def test_pending(self):
        adapter = EvmAdapter(web3=SimpleNamespace(eth=FakeEth([None], head=105)))

        result = await PyroClient(adapter).get_transaction_status(TX_HASH)

        self.assertTrue(result.is_pending)


class TestDefaultTarget(unittest.TestCase):

    def test_solana_defaults(self):
        client = PyroClient("solana", rpc_url="https://api.devnet.solana.com")
        target = client.default_target()

        self.assertIs(target.commitment, Commitment.CONFIRMED)
        self.assertIsNone(target.min_confirmations)

    def test_evm_defaults(self):
        client = PyroClient("evm", rpc_url="https://sepolia.base.org")
        target = client.default_target(confirmations=2)

        self.assertEqual(target.min_confirmations, 2)
        self.assertIsNone(target.commitment)

    def test_both_conditions(self):
        client = PyroClient("solana", rpc_url="https://api.devnet.solana.com")
        target = client.default_target(commitment="finalized", confirmations=20, timeout=5.0)

        self.assertIs(target.commitment, Commitment.FINALIZED)
        self.assertEqual(target.min_confirmations, 20)
        self.assertEqual(target.timeout, 5.0)


# =============================================================================
# Registry
# =============================================================================

def test_registry_lists_families():
    assert set(ChainRegistry.list()) == {"evm", "solana"}
    assert ChainRegistry.is_registered("solana")


def test_create_adapter_by_family():
    solana = create_adapter("solana", rpc_url="https://api.devnet.solana.com")
    assert isinstance(solana, SolanaAdapter)
    assert solana.rpc.endpoint == "https://api.devnet.solana.com"

    evm = create_adapter(ChainFamily.EVM, rpc_url="https://sepolia.base.org")
    assert isinstance(evm, EvmAdapter)


def test_create_adapter_for_network():
    adapter = create_adapter_for_network("devnet")
    assert isinstance(adapter, SolanaAdapter)
    assert adapter.rpc.endpoint == "https://api.devnet.solana.com"

    assert isinstance(create_adapter_for_network("base-sepolia"), EvmAdapter)


def test_client_for_network():
    client = PyroClient.for_network("devnet", search_transaction_history=True)
    assert client.family == ChainFamily.SOLANA


def test_unknown_family_and_network():
    with pytest.raises(ValidationError):
        create_adapter("bitcoin")
    with pytest.raises(ConfigurationError):
        create_adapter_for_network("goerli")
