"""
Confirmation target definition
"""

from dataclasses import dataclass
from typing import Optional, Union

from .common import Commitment
from ..errors import ValidationError
from ..config import get_config


@dataclass(frozen=True)
class ConfirmationTarget:
    """
    What "confirmed" means for one wait

    Solana waits use a commitment level, EVM waits a confirmation count.
    Both may be set, in which case whichever is reached first wins.

    Attributes:
        commitment: Required commitment level (Solana)
        min_confirmations: Required confirmation count (EVM)
        max_confirmations: Confirmation count that ends the wait even when
            the commitment level is not reached yet; reported confirmations
            are capped at this value
        timeout: Seconds to wait before giving up
        poll_interval: Seconds between two status polls

    Usage:
        target = ConfirmationTarget(min_confirmations=3, timeout=5.0, poll_interval=0.5)
        target = ConfirmationTarget.solana("finalized")
    """
    commitment: Optional[Commitment] = None
    min_confirmations: Optional[int] = None
    max_confirmations: Optional[int] = None
    timeout: float = 60.0
    poll_interval: float = 2.0

    def __post_init__(self):
        if self.commitment is not None:
            object.__setattr__(self, "commitment", Commitment.parse(self.commitment))

        if self.commitment is None and self.min_confirmations is None and self.max_confirmations is None:
            raise ValidationError.invalid_target(
                "commitment",
                "either a commitment level or a confirmation count is required",
            )
        if self.timeout is None or self.timeout <= 0:
            raise ValidationError.invalid_target("timeout", f"must be > 0, got {self.timeout}")
        if self.poll_interval is None or self.poll_interval <= 0:
            raise ValidationError.invalid_target("poll_interval", f"must be > 0, got {self.poll_interval}")
        if self.min_confirmations is not None and self.min_confirmations < 1:
            raise ValidationError.invalid_target(
                "min_confirmations", f"must be >= 1, got {self.min_confirmations}"
            )
        if self.max_confirmations is not None:
            if self.max_confirmations < 1:
                raise ValidationError.invalid_target(
                    "max_confirmations", f"must be >= 1, got {self.max_confirmations}"
                )
            if self.min_confirmations is not None and self.max_confirmations < self.min_confirmations:
                raise ValidationError.invalid_target(
                    "max_confirmations",
                    f"{self.max_confirmations} is below min_confirmations={self.min_confirmations}",
                )

    @property
    def confirmation_threshold(self) -> Optional[int]:
        """Confirmation count that satisfies this target, if any"""
        if self.min_confirmations is not None:
            return self.min_confirmations
        return self.max_confirmations

    def cap_confirmations(self, confirmations: Optional[int]) -> Optional[int]:
        if confirmations is None or self.max_confirmations is None:
            return confirmations
        return min(confirmations, self.max_confirmations)

    def describe(self) -> str:
        parts = []
        if self.commitment is not None:
            parts.append(f"commitment={self.commitment.value}")
        if self.min_confirmations is not None:
            parts.append(f"min_confirmations={self.min_confirmations}")
        if self.max_confirmations is not None:
            parts.append(f"max_confirmations={self.max_confirmations}")
        parts.append(f"timeout={self.timeout}s")
        return ", ".join(parts)

    @classmethod
    def evm(
        cls,
        confirmations: Optional[int] = None,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        max_confirmations: Optional[int] = None,
    ) -> "ConfirmationTarget":
        """Confirmation-count target with EVM defaults (1 block, 60s, 2s polls)"""
        conf = get_config().confirmation
        return cls(
            min_confirmations=confirmations if confirmations is not None else conf.evm_confirmations,
            max_confirmations=max_confirmations,
            timeout=timeout if timeout is not None else conf.evm_timeout,
            poll_interval=poll_interval if poll_interval is not None else conf.evm_poll_interval,
        )

    @classmethod
    def solana(
        cls,
        commitment: Union[str, Commitment] = Commitment.CONFIRMED,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        max_confirmations: Optional[int] = None,
    ) -> "ConfirmationTarget":
        """Commitment-level target with Solana defaults (30s, 500ms polls)"""
        conf = get_config().confirmation
        return cls(
            commitment=Commitment.parse(commitment),
            max_confirmations=max_confirmations,
            timeout=timeout if timeout is not None else conf.solana_timeout,
            poll_interval=poll_interval if poll_interval is not None else conf.solana_poll_interval,
        )
