"""
Common type definitions shared by all chain families
"""

from enum import Enum
from typing import Union

from ..errors import ValidationError


# Transaction hash (EVM) or signature (Solana), as returned by the submitter
TransactionHandle = str


class ChainFamily(Enum):
    """Chain families supported by the SDK"""
    EVM = "evm"
    SOLANA = "solana"

    @classmethod
    def parse(cls, value: Union[str, "ChainFamily"]) -> "ChainFamily":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValidationError(
                f"Unknown chain family: {value!r}",
                field="chain",
            ) from None


class Commitment(Enum):
    """
    Solana commitment levels, ordered processed < confirmed < finalized
    """
    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"

    @property
    def rank(self) -> int:
        return _COMMITMENT_RANK[self]

    def satisfies(self, target: "Commitment") -> bool:
        """
        Whether a reported level meets a requested one.

        Equal levels match, and a finalized report also meets a confirmed
        target. The rule is one-way: confirmed never meets finalized, and
        processed is only met by processed.
        """
        if self is target:
            return True
        return target is Commitment.CONFIRMED and self is Commitment.FINALIZED

    @classmethod
    def parse(cls, value: Union[str, "Commitment"]) -> "Commitment":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValidationError.invalid_target(
                "commitment",
                f"expected one of processed/confirmed/finalized, got {value!r}",
            ) from None

    def __str__(self) -> str:
        return self.value


_COMMITMENT_RANK = {
    Commitment.PROCESSED: 0,
    Commitment.CONFIRMED: 1,
    Commitment.FINALIZED: 2,
}
