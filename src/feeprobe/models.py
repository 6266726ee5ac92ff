from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from .constants import EIP712_TX_TYPE
from .errors import FeeProbeError, SubmissionError, ValidationError

__all__ = [
    "FeeParameters",
    "TransactionEnvelope",
    "Scenario",
    "ScenarioStage",
    "ReceiptSummary",
    "OutcomeKind",
    "Confirmed",
    "Failed",
    "TimedOut",
    "Outcome",
    "ScenarioResult",
]


@dataclass(frozen=True)
class FeeParameters:
    """Per-scenario fee parameters.

    Attributes:
        gas_per_pubdata: Data-gas unit price (zkSync ``gasPerPubdata``)
        gas_limit: Execution gas limit
    """

    gas_per_pubdata: int
    gas_limit: int

    def __post_init__(self) -> None:
        for name in ("gas_per_pubdata", "gas_limit"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"{name} must be an integer")
            if value < 0:
                raise ValidationError(f"{name} must be non-negative")


@dataclass(frozen=True)
class TransactionEnvelope:
    """Fully populated custom-fee transaction, immutable once built."""

    to: str
    from_: str
    data: bytes
    gas_limit: int
    gas_price: int
    chain_id: int
    nonce: int
    gas_per_pubdata: int
    tx_type: int = EIP712_TX_TYPE
    value: int = 0

    @property
    def max_fee_per_gas(self) -> int:
        return self.gas_price

    @property
    def max_priority_fee_per_gas(self) -> int:
        return self.gas_price

    def to_tx_params(self) -> Dict[str, Any]:
        """Render the envelope as JSON-RPC style transaction parameters."""
        return {
            "to": self.to,
            "from": self.from_,
            "data": "0x" + self.data.hex(),
            "gas": self.gas_limit,
            "gasPrice": self.gas_price,
            "chainId": self.chain_id,
            "nonce": self.nonce,
            "type": self.tx_type,
            "value": self.value,
            "customData": {"gasPerPubdata": self.gas_per_pubdata},
        }


@dataclass(frozen=True)
class Scenario:
    """One (fee parameters, payload label) pair run end-to-end.

    Attributes:
        label: Payload variant encoded into the call (e.g. "Culture")
        fee_parameters: Fee parameters for the envelope
        ordinal: Zero-based position in the batch; ordinal N uses label N
    """

    label: str
    fee_parameters: FeeParameters
    ordinal: int


class ScenarioStage(str, Enum):
    BUILDING = "building"
    DISPATCHING = "dispatching"
    CONFIRMING = "confirming"


@dataclass(frozen=True)
class ReceiptSummary:
    tx_hash: str
    gas_used: int
    block_number: Optional[int] = None
    status: int = 1


class OutcomeKind(str, Enum):
    CONFIRMED = "confirmed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class Confirmed:
    receipt: ReceiptSummary
    kind: OutcomeKind = field(default=OutcomeKind.CONFIRMED, init=False)

    def describe(self) -> str:
        return f"Transaction successful! Gas used: {self.receipt.gas_used} (tx: {self.receipt.tx_hash})"


@dataclass(frozen=True)
class Failed:
    """Scenario failed at ``stage`` with a classified error."""

    error: FeeProbeError
    stage: ScenarioStage
    kind: OutcomeKind = field(default=OutcomeKind.FAILED, init=False)

    def describe(self) -> str:
        text = f"Transaction failed while {self.stage.value}: {self.error}"
        if isinstance(self.error, SubmissionError) and self.error.reason not in self.error.message:
            text += f" (reason: {self.error.reason})"
        return text


@dataclass(frozen=True)
class TimedOut:
    """Confirmation not observed within the budget.

    The transaction may still be included later; the outcome is ambiguous.
    """

    tx_hash: str
    timeout: float
    kind: OutcomeKind = field(default=OutcomeKind.TIMED_OUT, init=False)

    def describe(self) -> str:
        return f"Transaction confirmation timeout after {self.timeout:g}s (tx: {self.tx_hash})"


Outcome = Union[Confirmed, Failed, TimedOut]


@dataclass(frozen=True)
class ScenarioResult:
    scenario: Scenario
    outcome: Outcome
    nonce: Optional[int] = None
    tx_hash: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome.kind is OutcomeKind.CONFIRMED
