#!/usr/bin/env python3
"""
Custom Fee Scenarios

Sweeps the data-gas unit price against a local in-memory node to find where
the endpoint starts rejecting transactions.

Usage:
    python examples/custom_scenarios.py

Environment Variables:
    WALLET_PRIVATE_KEY: Private key of a funded rich account
    CONTRACT_ADDRESS: Deployed voting contract
    RPC_URL: RPC URL (default: http://127.0.0.1:8011)
"""

import asyncio
import sys

from dotenv import load_dotenv

from feeprobe import (
    ConfirmationRacer,
    ContractInterface,
    Dispatcher,
    Eip712Signer,
    EnvelopeBuilder,
    FeeParameters,
    LedgerEndpoint,
    ScenarioRunner,
    ValidationError,
    build_scenarios,
    load_probe_settings,
)
from feeprobe.utils import configure_logging

load_dotenv()

GAS_PER_PUBDATA_SWEEP = [50_000, 800, 100]


async def main() -> int:
    configure_logging("WARNING")
    try:
        settings = load_probe_settings()
    except ValidationError as e:
        print(f"Missing configuration: {e.message}")
        return 1

    signer = Eip712Signer(settings.private_key)
    endpoint = LedgerEndpoint(settings.network.rpc_url)
    runner = ScenarioRunner(
        EnvelopeBuilder(endpoint, ContractInterface.from_file("zkfest_voting.json"), signer.address),
        Dispatcher(endpoint, signer),
        ConfirmationRacer(timeout=20),
        recipient=settings.contract_address,
    )

    scenarios = build_scenarios(
        [FeeParameters(gas_per_pubdata=price, gas_limit=2_000_000) for price in GAS_PER_PUBDATA_SWEEP],
    )

    print("=" * 60)
    print(f"Sweeping gasPerPubdata from {signer.address}")
    print("=" * 60)
    try:
        results = await runner.run(scenarios)
    finally:
        await endpoint.close()

    for result in results:
        price = result.scenario.fee_parameters.gas_per_pubdata
        print(f"  gasPerPubdata={price:>6}  {result.outcome.describe()}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
