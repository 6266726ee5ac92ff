"""
feeprobe - custom-fee transaction submission and confirmation probe.

Submits zkSync-style EIP-712 (type 113) transactions with caller-chosen
data-gas unit price and gas limit, and reports for each scenario whether it
was confirmed, failed, or timed out.

Quick Start:
    >>> import asyncio
    >>> from feeprobe import (
    ...     ConfirmationRacer, ContractInterface, Dispatcher, Eip712Signer,
    ...     EnvelopeBuilder, LedgerEndpoint, ScenarioRunner, default_scenarios,
    ... )
    >>>
    >>> async def main():
    ...     signer = Eip712Signer("0x...")
    ...     endpoint = LedgerEndpoint("http://127.0.0.1:8011")
    ...     runner = ScenarioRunner(
    ...         EnvelopeBuilder(endpoint, ContractInterface.from_file("zkfest_voting.json"), signer.address),
    ...         Dispatcher(endpoint, signer),
    ...         ConfirmationRacer(timeout=60),
    ...         recipient="0x...",
    ...     )
    ...     for result in await runner.run(default_scenarios()):
    ...         print(result.outcome.describe())
    ...
    >>> asyncio.run(main())
"""

from feeprobe.version import __version__, __version_info__

from feeprobe.config import NETWORKS, Network, NetworkConfig, ProbeConfig, ProbeSettings, get_network_config, load_probe_settings
from feeprobe.constants import (
    DEFAULT_CONFIRMATION_TIMEOUT,
    DEFAULT_GAS_LIMIT,
    DEFAULT_GAS_PER_PUBDATA_LIMIT,
    EIP712_TX_TYPE,
    HIGH_GAS_LIMIT,
    LOW_GAS_PER_PUBDATA,
    STAGE_NAMES,
)
from feeprobe.contract import ContractInterface
from feeprobe.dispatcher import Dispatcher, PendingConfirmation
from feeprobe.endpoint import LedgerEndpoint
from feeprobe.envelope import EnvelopeBuilder, NonceSequencer
from feeprobe.errors import (
    ConfirmationError,
    EncodingError,
    FeeProbeError,
    NetworkQueryError,
    SubmissionError,
    ValidationError,
)
from feeprobe.models import (
    Confirmed,
    Failed,
    FeeParameters,
    Outcome,
    OutcomeKind,
    ReceiptSummary,
    Scenario,
    ScenarioResult,
    ScenarioStage,
    TimedOut,
    TransactionEnvelope,
)
from feeprobe.racer import ConfirmationRacer
from feeprobe.runner import ScenarioRunner, build_scenarios, default_scenarios
from feeprobe.signer import Eip712Signer, Signer

__all__ = [
    "__version__",
    "__version_info__",
    # Config
    "Network",
    "NetworkConfig",
    "NETWORKS",
    "get_network_config",
    "ProbeConfig",
    "ProbeSettings",
    "load_probe_settings",
    # Constants
    "DEFAULT_CONFIRMATION_TIMEOUT",
    "DEFAULT_GAS_LIMIT",
    "DEFAULT_GAS_PER_PUBDATA_LIMIT",
    "EIP712_TX_TYPE",
    "HIGH_GAS_LIMIT",
    "LOW_GAS_PER_PUBDATA",
    "STAGE_NAMES",
    # Models
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
    # Errors
    "FeeProbeError",
    "ValidationError",
    "EncodingError",
    "NetworkQueryError",
    "SubmissionError",
    "ConfirmationError",
    # Engine
    "ContractInterface",
    "LedgerEndpoint",
    "Signer",
    "Eip712Signer",
    "EnvelopeBuilder",
    "NonceSequencer",
    "Dispatcher",
    "PendingConfirmation",
    "ConfirmationRacer",
    "ScenarioRunner",
    "build_scenarios",
    "default_scenarios",
]
