"""
Confirmation racing.

Races a pending transaction's receipt wait against a fixed deadline and
reports whichever finishes first. On timeout the receipt watch is cancelled
so its connection is released instead of being left polling in the
background; a confirmation that would have arrived later is not reported.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Protocol

from .constants import DEFAULT_CONFIRMATION_TIMEOUT
from .errors import ValidationError
from .models import Confirmed, ReceiptSummary, TimedOut
from .utils.logging import get_logger

__all__ = ["ConfirmationRacer", "Confirmable"]

_logger = get_logger(__name__)


class Confirmable(Protocol):
    tx_hash: str

    def wait(self) -> Awaitable[ReceiptSummary]: ...


class ConfirmationRacer:
    """
    Bounded wait for a transaction receipt.

    Example:
        ```python
        racer = ConfirmationRacer(timeout=60)
        outcome = await racer.race(pending)
        if isinstance(outcome, TimedOut):
            ...  # may still confirm out-of-band
        ```
    """

    def __init__(self, timeout: float = DEFAULT_CONFIRMATION_TIMEOUT) -> None:
        if timeout <= 0:
            raise ValidationError("timeout must be positive")
        self.timeout = timeout

    async def race(self, pending: Confirmable) -> Confirmed | TimedOut:
        """
        Wait for ``pending`` to confirm, at most ``timeout`` seconds.

        Args:
            pending: Handle returned by the dispatcher

        Returns:
            Confirmed with the receipt summary, or TimedOut

        Raises:
            ConfirmationError: If the receipt reports a revert or the wait fails
                before the deadline
        """
        watch = asyncio.ensure_future(pending.wait())
        try:
            done, _ = await asyncio.wait({watch}, timeout=self.timeout)
        finally:
            # Also covers cancellation of the caller while waiting
            if not watch.done():
                watch.cancel()

        if watch in done:
            receipt = watch.result()
            return Confirmed(receipt=receipt)

        # Let the cancelled watch unwind; its result, if any, is discarded
        await asyncio.gather(watch, return_exceptions=True)
        _logger.warning(
            "Transaction confirmation timeout",
            extra={"tx_hash": pending.tx_hash, "timeout": self.timeout},
        )
        return TimedOut(tx_hash=pending.tx_hash, timeout=self.timeout)
