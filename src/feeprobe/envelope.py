"""Envelope construction.

Builds one custom-fee transaction envelope per scenario attempt, resolving
gas price, chain id and nonce from the endpoint at call time.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .constants import EIP712_TX_TYPE, VOTE_FUNCTION
from .contract import ContractInterface
from .endpoint import validate_address
from .models import FeeParameters, TransactionEnvelope
from .utils.logging import get_logger

if TYPE_CHECKING:
    from .endpoint import LedgerEndpoint

__all__ = ["EnvelopeBuilder", "NonceSequencer"]

_logger = get_logger(__name__)


class NonceSequencer:
    """Keeps nonces strictly increasing across accepted submissions.

    The endpoint's pending count is authoritative and is read before every
    build; the sequencer only raises it when the endpoint has not yet seen
    the previous acceptance. Strict monotonicity holds for accepted
    submissions only: a rejected submission does not consume a nonce, so
    the next scenario reuses it.
    """

    def __init__(self) -> None:
        self._last_accepted: Optional[int] = None

    @property
    def last_accepted(self) -> Optional[int]:
        return self._last_accepted

    def next_nonce(self, remote_nonce: int) -> int:
        if self._last_accepted is None:
            return remote_nonce
        return max(remote_nonce, self._last_accepted + 1)

    def mark_accepted(self, nonce: int) -> None:
        if self._last_accepted is None or nonce > self._last_accepted:
            self._last_accepted = nonce


class EnvelopeBuilder:
    """Constructs type-113 envelopes for ``function_name(label)`` calls.

    Example:
        >>> builder = EnvelopeBuilder(endpoint, ContractInterface.from_file("zkfest_voting.json"), signer.address)
        >>> envelope = await builder.build(contract_address, "Culture", FeeParameters(50_000, 2_000_000))
    """

    def __init__(
        self,
        endpoint: "LedgerEndpoint",
        interface: ContractInterface,
        sender: str,
        function_name: str = VOTE_FUNCTION,
        nonces: Optional[NonceSequencer] = None,
    ):
        validate_address(sender, "sender")
        self.endpoint = endpoint
        self.interface = interface
        self.sender = sender
        self.function_name = function_name
        self.nonces = nonces or NonceSequencer()

    async def build(self, recipient: str, label: str, fee_parameters: FeeParameters) -> TransactionEnvelope:
        """Build a fully populated envelope.

        Args:
            recipient: Deployed target contract address
            label: Payload variant passed as the single call argument
            fee_parameters: Data-gas unit price and gas limit

        Returns:
            Immutable envelope with ``tx_type`` 113 and zero value

        Raises:
            ValidationError: If recipient is empty or malformed
            EncodingError: If the label cannot be encoded against the interface
            NetworkQueryError: If gas price, chain id or nonce cannot be fetched
        """
        validate_address(recipient, "recipient")
        data = self.interface.encode_call(self.function_name, [label])

        # Network-dependent fields are never cached between builds
        gas_price = await self.endpoint.gas_price()
        chain_id = await self.endpoint.chain_id()
        nonce = self.nonces.next_nonce(await self.endpoint.get_nonce(self.sender))

        envelope = TransactionEnvelope(
            to=recipient,
            from_=self.sender,
            data=data,
            gas_limit=fee_parameters.gas_limit,
            gas_price=gas_price,
            chain_id=chain_id,
            nonce=nonce,
            gas_per_pubdata=fee_parameters.gas_per_pubdata,
            tx_type=EIP712_TX_TYPE,
            value=0,
        )
        _logger.debug(
            "Envelope built",
            extra={
                "label": label,
                "nonce": nonce,
                "chain_id": chain_id,
                "gas_price": gas_price,
                "gas_limit": fee_parameters.gas_limit,
                "gas_per_pubdata": fee_parameters.gas_per_pubdata,
            },
        )
        return envelope
