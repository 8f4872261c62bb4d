"""
Test Types Module

Tests for pyro_sdk.types package.
"""

import pytest

from pyro_sdk.errors import ChainReportedFailure, ConfigurationError, ErrorCode, ValidationError
from pyro_sdk.types import (
    ChainFamily,
    Commitment,
    ConfirmationTarget,
    RawStatus,
    TransactionResult,
    TxStatus,
    get_network,
    list_networks,
    EVM_NETWORKS,
    SOLANA_NETWORKS,
)


# =============================================================================
# ChainFamily / Commitment
# =============================================================================

def test_chain_family_parse():
    assert ChainFamily.parse("EVM") is ChainFamily.EVM
    assert ChainFamily.parse(ChainFamily.SOLANA) is ChainFamily.SOLANA

    with pytest.raises(ValidationError):
        ChainFamily.parse("bitcoin")


def test_commitment_parse():
    assert Commitment.parse("Finalized") is Commitment.FINALIZED
    assert str(Commitment.CONFIRMED) == "confirmed"

    with pytest.raises(ValidationError) as exc_info:
        Commitment.parse("rooted")
    assert exc_info.value.code == ErrorCode.INVALID_TARGET


def test_commitment_ordering():
    assert Commitment.PROCESSED.rank < Commitment.CONFIRMED.rank < Commitment.FINALIZED.rank


def test_finalized_satisfies_confirmed():
    """Finalized meets a confirmed target"""
    assert Commitment.FINALIZED.satisfies(Commitment.CONFIRMED)
    assert Commitment.CONFIRMED.satisfies(Commitment.CONFIRMED)


def test_confirmed_does_not_satisfy_finalized():
    """Subsumption is one-way"""
    assert not Commitment.CONFIRMED.satisfies(Commitment.FINALIZED)
    assert not Commitment.PROCESSED.satisfies(Commitment.FINALIZED)
    assert Commitment.FINALIZED.satisfies(Commitment.FINALIZED)


def test_processed_only_met_by_processed():
    assert Commitment.PROCESSED.satisfies(Commitment.PROCESSED)
    assert not Commitment.CONFIRMED.satisfies(Commitment.PROCESSED)
    assert not Commitment.FINALIZED.satisfies(Commitment.PROCESSED)
    assert not Commitment.PROCESSED.satisfies(Commitment.CONFIRMED)


# =============================================================================
# RawStatus
# =============================================================================

def test_raw_status_not_found():
    status = RawStatus()
    assert not status.found
    assert not status.has_error
    assert status.describe() == "not found"


def test_raw_status_describe():
    status = RawStatus(slot=42, confirmations=3, commitment=Commitment.CONFIRMED)
    assert status.found
    assert status.describe() == "slot=42, confirmations=3, commitment=confirmed"

    failed = RawStatus(error="execution reverted", slot=42)
    assert failed.has_error
    assert "error=execution reverted" in str(failed)


# =============================================================================
# ConfirmationTarget
# =============================================================================

def test_target_parses_commitment_string():
    target = ConfirmationTarget(commitment="finalized", timeout=10.0, poll_interval=0.5)
    assert target.commitment is Commitment.FINALIZED


def test_target_requires_a_condition():
    with pytest.raises(ValidationError) as exc_info:
        ConfirmationTarget(timeout=10.0)
    assert exc_info.value.code == ErrorCode.INVALID_TARGET


@pytest.mark.parametrize("kwargs, field", [
    ({"min_confirmations": 1, "timeout": 0}, "timeout"),
    ({"min_confirmations": 1, "timeout": -1.0}, "timeout"),
    ({"min_confirmations": 1, "poll_interval": 0}, "poll_interval"),
    ({"min_confirmations": 0}, "min_confirmations"),
    ({"max_confirmations": 0}, "max_confirmations"),
    ({"min_confirmations": 5, "max_confirmations": 3}, "max_confirmations"),
])
def test_target_rejects_invalid_values(kwargs, field):
    with pytest.raises(ValidationError) as exc_info:
        ConfirmationTarget(**kwargs)
    assert exc_info.value.field == field


def test_target_threshold_and_cap():
    target = ConfirmationTarget(min_confirmations=2, max_confirmations=5)
    assert target.confirmation_threshold == 2
    assert target.cap_confirmations(9) == 5
    assert target.cap_confirmations(3) == 3
    assert target.cap_confirmations(None) is None

    only_max = ConfirmationTarget(commitment="finalized", max_confirmations=32)
    assert only_max.confirmation_threshold == 32

    only_commitment = ConfirmationTarget(commitment="confirmed")
    assert only_commitment.confirmation_threshold is None
    assert only_commitment.cap_confirmations(7) == 7


def test_evm_target_defaults():
    target = ConfirmationTarget.evm()
    assert target.min_confirmations == 1
    assert target.commitment is None
    assert target.timeout == 60.0
    assert target.poll_interval == 2.0

    custom = ConfirmationTarget.evm(confirmations=3, timeout=5.0, poll_interval=0.5)
    assert custom.min_confirmations == 3
    assert custom.timeout == 5.0


def test_solana_target_defaults():
    target = ConfirmationTarget.solana()
    assert target.commitment is Commitment.CONFIRMED
    assert target.min_confirmations is None
    assert target.timeout == 30.0
    assert target.poll_interval == 0.5

    finalized = ConfirmationTarget.solana("finalized")
    assert finalized.commitment is Commitment.FINALIZED


def test_target_is_immutable():
    target = ConfirmationTarget.evm()
    with pytest.raises(Exception):
        target.timeout = 1.0


# =============================================================================
# TransactionResult
# =============================================================================

def test_confirmed_result():
    result = TransactionResult.confirmed("0xabc", block_number=100, block_hash="0xdef", confirmations=3)

    assert result.status == TxStatus.CONFIRMED
    assert result.is_confirmed
    assert result.is_terminal
    assert not result.is_failed
    assert result.raise_for_status() is result


def test_failed_result():
    result = TransactionResult.failed("0xabc", "execution reverted", block_number=100)

    assert result.is_failed
    assert result.is_terminal
    assert result.block_number == 100

    with pytest.raises(ChainReportedFailure) as exc_info:
        result.raise_for_status()
    assert exc_info.value.error == "execution reverted"


def test_pending_result():
    result = TransactionResult.pending("sig")
    assert result.is_pending
    assert not result.is_terminal


def test_result_to_dict():
    result = TransactionResult.confirmed("0xabc", block_number=100, block_hash="0xdef", confirmations=0)
    assert result.to_dict() == {
        "txHash": "0xabc",
        "status": "confirmed",
        "blockNumber": 100,
        "blockHash": "0xdef",
        "confirmations": 0,
    }

    failed = TransactionResult.failed("0xabc", "boom")
    assert failed.to_dict() == {"txHash": "0xabc", "status": "failed", "error": "boom"}


def test_result_str_truncates_handle():
    result = TransactionResult.failed("0x" + "ab" * 32, "boom")
    text = str(result)
    assert text.startswith("TransactionResult(FAILED, 0xababababababab...")
    assert "error=boom" in text


# =============================================================================
# Networks
# =============================================================================

def test_get_network():
    base = get_network("base-sepolia")
    assert base.family == ChainFamily.EVM
    assert base.chain_id == 84532

    devnet = get_network("DEVNET")
    assert devnet.family == ChainFamily.SOLANA
    assert devnet.rpc_url == "https://api.devnet.solana.com"


def test_get_network_mainnet_is_ambiguous():
    """Plain "mainnet" resolves to EVM unless a family is given"""
    assert get_network("mainnet").family == ChainFamily.EVM
    with pytest.raises(ConfigurationError):
        get_network("mainnet", ChainFamily.SOLANA)
    assert get_network("mainnet-beta", ChainFamily.SOLANA).family == ChainFamily.SOLANA


def test_get_network_unknown():
    with pytest.raises(ConfigurationError):
        get_network("goerli")


def test_list_networks():
    assert list_networks(ChainFamily.SOLANA) == list(SOLANA_NETWORKS)
    assert len(list_networks()) == len(EVM_NETWORKS) + len(SOLANA_NETWORKS)
