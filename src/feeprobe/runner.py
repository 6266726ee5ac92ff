"""Scenario batch runner.

Runs fee-parameter scenarios strictly in order through
build -> dispatch -> confirm, turning every failure into that scenario's
outcome so the batch always completes with one result per input.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from .config import ProbeConfig
from .constants import (
    DEFAULT_GAS_LIMIT,
    DEFAULT_GAS_PER_PUBDATA_LIMIT,
    HIGH_GAS_LIMIT,
    LOW_GAS_PER_PUBDATA,
    STAGE_NAMES,
)
from .dispatcher import Dispatcher
from .endpoint import validate_address
from .envelope import EnvelopeBuilder
from .errors import FeeProbeError, NetworkQueryError, ValidationError
from .models import Failed, FeeParameters, Outcome, OutcomeKind, Scenario, ScenarioResult, ScenarioStage
from .racer import ConfirmationRacer
from .utils.logging import get_logger
from .utils.retry import RetryConfig, retry_async

__all__ = ["ScenarioRunner", "build_scenarios", "default_scenarios"]

_logger = get_logger(__name__)


def build_scenarios(
    fee_parameters: Sequence[FeeParameters],
    labels: Sequence[str] = STAGE_NAMES,
) -> List[Scenario]:
    """Pair fee parameters with labels in lockstep.

    Scenario N gets label N and ordinal N; labels are never reordered or
    repeated.

    Raises:
        ValidationError: If there are no fee parameters or too few labels
    """
    if not fee_parameters:
        raise ValidationError("at least one scenario is required")
    if len(labels) < len(fee_parameters):
        raise ValidationError(
            f"{len(fee_parameters)} scenarios need {len(fee_parameters)} labels, got {len(labels)}"
        )
    return [
        Scenario(label=labels[ordinal], fee_parameters=params, ordinal=ordinal)
        for ordinal, params in enumerate(fee_parameters)
    ]


def default_scenarios() -> List[Scenario]:
    """Default data-gas price, very low data-gas price, very high gas limit."""
    return build_scenarios(
        [
            FeeParameters(gas_per_pubdata=DEFAULT_GAS_PER_PUBDATA_LIMIT, gas_limit=DEFAULT_GAS_LIMIT),
            FeeParameters(gas_per_pubdata=LOW_GAS_PER_PUBDATA, gas_limit=DEFAULT_GAS_LIMIT),
            FeeParameters(gas_per_pubdata=DEFAULT_GAS_PER_PUBDATA_LIMIT, gas_limit=HIGH_GAS_LIMIT),
        ]
    )


class ScenarioRunner:
    """Drives scenarios one at a time against a single recipient.

    The endpoint connection and signer behind the builder and dispatcher are
    shared by every scenario; nothing else carries over between scenarios
    except the nonce floor of accepted submissions.
    """

    def __init__(
        self,
        builder: EnvelopeBuilder,
        dispatcher: Dispatcher,
        racer: ConfirmationRacer,
        recipient: str,
        config: Optional[ProbeConfig] = None,
    ):
        validate_address(recipient, "recipient")
        self.builder = builder
        self.dispatcher = dispatcher
        self.racer = racer
        self.recipient = recipient
        self.config = config or ProbeConfig()
        self._build_retry = RetryConfig(
            max_attempts=self.config.scenario_attempts,
            base_delay_ms=self.config.retry_base_delay_ms,
            retryable_errors=(NetworkQueryError,),
        )

    async def run(self, scenarios: Sequence[Scenario]) -> List[ScenarioResult]:
        """Run every scenario in input order.

        Returns:
            One result per scenario, same order, no early termination

        Raises:
            ValidationError: If ``scenarios`` is empty
        """
        if not scenarios:
            raise ValidationError("at least one scenario is required")

        results = []
        for scenario in scenarios:
            results.append(await self.run_scenario(scenario))

        confirmed = sum(1 for r in results if r.outcome.kind is OutcomeKind.CONFIRMED)
        _logger.info("Batch finished", extra={"scenarios": len(results), "confirmed": confirmed})
        return results

    async def run_scenario(self, scenario: Scenario) -> ScenarioResult:
        """Run one scenario; never raises."""
        params = scenario.fee_parameters
        _logger.info(
            f"Testing with gasPerPubdata: {params.gas_per_pubdata}, gasLimit: {params.gas_limit}",
            extra={"ordinal": scenario.ordinal, "label": scenario.label},
        )

        stage = ScenarioStage.BUILDING
        nonce: Optional[int] = None
        tx_hash: Optional[str] = None
        outcome: Outcome
        try:
            envelope = await retry_async(
                lambda: self.builder.build(self.recipient, scenario.label, params),
                self._build_retry,
            )
            nonce = envelope.nonce
            _logger.info(f"Voting for stage: {scenario.label}", extra={"nonce": nonce})

            stage = ScenarioStage.DISPATCHING
            pending = await self.dispatcher.dispatch(envelope)
            tx_hash = pending.tx_hash
            self.builder.nonces.mark_accepted(envelope.nonce)

            stage = ScenarioStage.CONFIRMING
            _logger.info("Transaction sent, waiting for confirmation...", extra={"tx_hash": tx_hash})
            outcome = await self.racer.race(pending)
        except FeeProbeError as e:
            outcome = Failed(error=e, stage=stage)
        except Exception as e:
            _logger.exception("Unexpected error in scenario", extra={"ordinal": scenario.ordinal})
            outcome = Failed(
                error=FeeProbeError(f"{type(e).__name__}: {e}", code="UNEXPECTED_ERROR", tx_hash=tx_hash),
                stage=stage,
            )

        self._report(scenario, outcome)
        return ScenarioResult(scenario=scenario, outcome=outcome, nonce=nonce, tx_hash=tx_hash)

    @staticmethod
    def _report(scenario: Scenario, outcome: Outcome) -> None:
        extra = {"ordinal": scenario.ordinal, "label": scenario.label, "outcome": outcome.kind.value}
        if outcome.kind is OutcomeKind.CONFIRMED:
            _logger.info(outcome.describe(), extra=extra)
        else:
            _logger.warning(outcome.describe(), extra=extra)
