"""Signs envelopes and broadcasts them to the endpoint, exactly once per call."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .constants import RECEIPT_POLL_INTERVAL
from .errors import FeeProbeError, SubmissionError
from .models import ReceiptSummary, TransactionEnvelope
from .utils.logging import get_logger

if TYPE_CHECKING:
    from .endpoint import LedgerEndpoint
    from .signer import Signer

__all__ = ["Dispatcher", "PendingConfirmation"]

_logger = get_logger(__name__)


@dataclass(frozen=True)
class PendingConfirmation:
    """Handle for a transaction accepted into the endpoint's pending pool."""

    tx_hash: str
    nonce: int
    endpoint: "LedgerEndpoint"
    poll_interval: float = RECEIPT_POLL_INTERVAL

    async def wait(self) -> ReceiptSummary:
        """Resolve once the transaction is included.

        Raises:
            ConfirmationError: If the receipt reports a revert or polling fails
        """
        return await self.endpoint.wait_for_receipt(self.tx_hash, self.poll_interval)


class Dispatcher:
    def __init__(
        self,
        endpoint: "LedgerEndpoint",
        signer: "Signer",
        poll_interval: float = RECEIPT_POLL_INTERVAL,
    ):
        self.endpoint = endpoint
        self.signer = signer
        self.poll_interval = poll_interval

    async def dispatch(self, envelope: TransactionEnvelope) -> PendingConfirmation:
        """Sign and submit an envelope.

        Returns as soon as the endpoint acknowledges receipt, not after
        confirmation. There is no automatic retry.

        Returns:
            Pending-confirmation handle carrying the transaction hash

        Raises:
            SubmissionError: If signing fails or the endpoint rejects the envelope
        """
        try:
            raw = self.signer.sign(envelope)
        except FeeProbeError as e:
            raise SubmissionError(f"Could not sign envelope: {e.message}", reason=e.message) from e

        tx_hash = await self.endpoint.send_raw_transaction(raw)
        _logger.info("Transaction sent", extra={"tx_hash": tx_hash, "nonce": envelope.nonce})
        return PendingConfirmation(
            tx_hash=tx_hash,
            nonce=envelope.nonce,
            endpoint=self.endpoint,
            poll_interval=self.poll_interval,
        )
