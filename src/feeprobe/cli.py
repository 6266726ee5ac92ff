"""
Command-line interface for feeprobe.

Runs the default fee-parameter batch against an already deployed voting
contract.

Usage:
    feeprobe --contract 0x... [--network in-memory-node] [--timeout 60]

Environment Variables:
    WALLET_PRIVATE_KEY: Sender private key
    CONTRACT_ADDRESS: Deployed voting contract (overridden by --contract)
    NETWORK: Network name (overridden by --network)
    RPC_URL: RPC URL override
    LOG_LEVEL: Log level (default: INFO)
"""

import argparse
import asyncio
import os
import sys
from typing import List, Optional

from eth_utils import from_wei

from feeprobe import __version__
from feeprobe.config import Network, ProbeSettings, load_probe_settings
from feeprobe.contract import ContractInterface
from feeprobe.dispatcher import Dispatcher
from feeprobe.endpoint import LedgerEndpoint
from feeprobe.envelope import EnvelopeBuilder
from feeprobe.errors import FeeProbeError, ValidationError
from feeprobe.models import ScenarioResult
from feeprobe.racer import ConfirmationRacer
from feeprobe.runner import ScenarioRunner, default_scenarios
from feeprobe.signer import Eip712Signer
from feeprobe.utils.logging import configure_logging, get_logger

_logger = get_logger("feeprobe.cli")

VOTING_ABI = "zkfest_voting.json"


def build_runner(settings: ProbeSettings, endpoint: LedgerEndpoint, signer: Eip712Signer) -> ScenarioRunner:
    builder = EnvelopeBuilder(endpoint, ContractInterface.from_file(VOTING_ABI), signer.address)
    dispatcher = Dispatcher(endpoint, signer, poll_interval=settings.probe.receipt_poll_interval)
    racer = ConfirmationRacer(timeout=settings.probe.confirmation_timeout)
    return ScenarioRunner(builder, dispatcher, racer, settings.contract_address, settings.probe)


def format_results(results: List[ScenarioResult]) -> str:
    lines = []
    for result in results:
        params = result.scenario.fee_parameters
        lines.append(
            f"#{result.scenario.ordinal + 1} {result.scenario.label:<13} "
            f"gasPerPubdata={params.gas_per_pubdata:<7} gasLimit={params.gas_limit:<11} "
            f"{result.outcome.kind.value:<10} {result.outcome.describe()}"
        )
    return "\n".join(lines)


async def run(settings: ProbeSettings) -> List[ScenarioResult]:
    signer = Eip712Signer(settings.private_key)
    endpoint = LedgerEndpoint(settings.network.rpc_url, timeout=settings.probe.request_timeout)
    try:
        _logger.info(f"Sending from address: {signer.address}", extra={"network": settings.network.name.value})
        try:
            balance = await endpoint.get_balance(signer.address)
            _logger.info(f"Sender balance: {from_wei(balance, 'ether')} ETH")
        except FeeProbeError as e:
            # Informational only; the batch reports its own query failures
            _logger.warning("Could not fetch sender balance", extra={"error": str(e)})
        _logger.info(f"Target contract: {settings.contract_address}")

        runner = build_runner(settings, endpoint, signer)
        return await runner.run(default_scenarios())
    finally:
        await endpoint.close()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="feeprobe",
        description="Submit custom-fee transactions and report confirmation outcomes.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--contract", help="Deployed voting contract address")
    parser.add_argument("--network", choices=[n.value for n in Network], help="Target network")
    parser.add_argument("--rpc-url", help="RPC URL override")
    parser.add_argument("--timeout", type=float, help="Confirmation timeout in seconds")
    parser.add_argument("--env-file", help="Path to .env file")
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO"))
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level, json_format=args.json_logs)

    # CLI flags win over the environment
    for env_name, value in (
        ("CONTRACT_ADDRESS", args.contract),
        ("NETWORK", args.network),
        ("RPC_URL", args.rpc_url),
        ("CONFIRMATION_TIMEOUT", None if args.timeout is None else str(args.timeout)),
    ):
        if value is not None:
            os.environ[env_name] = value

    try:
        settings = load_probe_settings(args.env_file)
    except ValidationError as e:
        _logger.error(f"Configuration error: {e.message}")
        return 2

    try:
        results = asyncio.run(run(settings))
    except ValidationError as e:
        _logger.error(f"Configuration error: {e.message}")
        return 2
    except Exception:
        _logger.exception("Interaction failed")
        return 1

    print(format_results(results))
    return 0


if __name__ == "__main__":
    sys.exit(main())
