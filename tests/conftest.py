"""
Shared fixtures and stub collaborators for feeprobe tests.

The stub endpoint speaks the same async interface as LedgerEndpoint and
decodes the signed type-113 payloads it receives, so tests exercise the real
signer and serializer without any network access.
"""

import asyncio
from typing import Dict, List, Optional, Set

import pytest
import rlp

from feeprobe.contract import ContractInterface
from feeprobe.dispatcher import Dispatcher
from feeprobe.envelope import EnvelopeBuilder
from feeprobe.errors import NetworkQueryError, SubmissionError
from feeprobe.models import ReceiptSummary
from feeprobe.racer import ConfirmationRacer
from feeprobe.runner import ScenarioRunner
from feeprobe.signer import Eip712Signer

# Private key for tests (DO NOT USE IN PRODUCTION)
TEST_PRIVATE_KEY = "0x" + "11" * 32
CONTRACT_ADDRESS = "0x" + "ab" * 20
CHAIN_ID = 260
GAS_PRICE = 250_000_000

# Positions inside the RLP list of a serialized type-113 transaction
RLP_NONCE = 0
RLP_GAS_LIMIT = 3
RLP_GAS_PER_PUBDATA = 12


def decode_raw(raw: bytes) -> List:
    assert raw[:1] == b"\x71"
    return rlp.decode(raw[1:])


def as_int(value: bytes) -> int:
    return int.from_bytes(value, "big")


class StubEndpoint:
    """In-memory endpoint with knobs for rejections, lag and slow receipts."""

    def __init__(
        self,
        gas_price: int = GAS_PRICE,
        chain_id: int = CHAIN_ID,
        start_nonce: int = 0,
        gas_used: int = 150_000,
        confirm_delay: float = 0.0,
        advance_nonce_on_send: bool = True,
        min_gas_per_pubdata: Optional[int] = None,
        max_gas_limit: Optional[int] = None,
    ):
        self._gas_price = gas_price
        self._chain_id = chain_id
        self.nonce = start_nonce
        self.gas_used = gas_used
        self.confirm_delay = confirm_delay
        self.advance_nonce_on_send = advance_nonce_on_send
        self.min_gas_per_pubdata = min_gas_per_pubdata
        self.max_gas_limit = max_gas_limit

        self.reject_sends: Dict[int, str] = {}  # send index -> reason
        self.never_confirm: Set[str] = set()
        self.query_failures: Dict[str, int] = {}  # query -> remaining failures

        self.sent: List[bytes] = []
        self.accepted_nonces: List[int] = []
        self.query_counts: Dict[str, int] = {}
        self.waits_started = 0
        self.waits_cancelled = 0

    def _query(self, name: str) -> None:
        self.query_counts[name] = self.query_counts.get(name, 0) + 1
        if self.query_failures.get(name, 0) > 0:
            self.query_failures[name] -= 1
            raise NetworkQueryError(f"Failed to fetch {name}: connection reset")

    async def gas_price(self) -> int:
        self._query("gas_price")
        return self._gas_price

    async def chain_id(self) -> int:
        self._query("chain_id")
        return self._chain_id

    async def get_nonce(self, address: str) -> int:
        self._query("nonce")
        return self.nonce

    async def get_balance(self, address: str) -> int:
        self._query("balance")
        return 10**18

    async def send_raw_transaction(self, raw: bytes) -> str:
        index = len(self.sent)
        self.sent.append(raw)
        fields = decode_raw(raw)

        reason = self.reject_sends.get(index)
        if reason is None and self.min_gas_per_pubdata is not None:
            if as_int(fields[RLP_GAS_PER_PUBDATA]) < self.min_gas_per_pubdata:
                reason = "gas per pub data limit is too low"
        if reason is None and self.max_gas_limit is not None:
            if as_int(fields[RLP_GAS_LIMIT]) > self.max_gas_limit:
                reason = "exceeds block gas limit"
        if reason is not None:
            raise SubmissionError(f"Endpoint rejected transaction: {reason}", reason=reason)

        self.accepted_nonces.append(as_int(fields[RLP_NONCE]))
        if self.advance_nonce_on_send:
            self.nonce += 1
        return "0x" + f"{index + 1:064x}"

    async def wait_for_receipt(self, tx_hash: str, poll_interval: float = 1.0) -> ReceiptSummary:
        self.waits_started += 1
        try:
            if tx_hash in self.never_confirm:
                await asyncio.Event().wait()
            await asyncio.sleep(self.confirm_delay)
        except asyncio.CancelledError:
            self.waits_cancelled += 1
            raise
        return ReceiptSummary(tx_hash=tx_hash, gas_used=self.gas_used, block_number=1)


@pytest.fixture()
def signer() -> Eip712Signer:
    return Eip712Signer(TEST_PRIVATE_KEY)


@pytest.fixture()
def interface() -> ContractInterface:
    return ContractInterface.from_file("zkfest_voting.json")


@pytest.fixture()
def endpoint() -> StubEndpoint:
    return StubEndpoint()


@pytest.fixture()
def builder(endpoint, interface, signer) -> EnvelopeBuilder:
    return EnvelopeBuilder(endpoint, interface, signer.address)


def make_runner(endpoint, interface, signer, timeout: float = 1.0, config=None) -> ScenarioRunner:
    return ScenarioRunner(
        EnvelopeBuilder(endpoint, interface, signer.address),
        Dispatcher(endpoint, signer, poll_interval=0.01),
        ConfirmationRacer(timeout=timeout),
        CONTRACT_ADDRESS,
        config,
    )
