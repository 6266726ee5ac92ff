"""Remote ledger endpoint.

Thin async wrapper over ``web3.AsyncWeb3`` exposing exactly the queries and
submit/wait operations the engine needs, with web3/HTTP failures mapped onto
the feeprobe error taxonomy.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional, Union

from aiohttp import ClientTimeout
from web3 import AsyncWeb3, Web3
from web3.exceptions import TransactionNotFound

from .constants import ABI_SELECTOR_LENGTH, ABI_WORD_LENGTH, PROVIDER_TIMEOUT_SECONDS, RECEIPT_POLL_INTERVAL, REVERT_SELECTOR
from .errors import ConfirmationError, NetworkQueryError, SubmissionError, ValidationError
from .models import ReceiptSummary
from .utils.logging import get_logger

__all__ = ["LedgerEndpoint", "decode_revert_reason", "extract_rpc_reason", "validate_address", "to_receipt_summary"]

_logger = get_logger(__name__)


def validate_address(address: str, field: str = "address") -> None:
    """Validate Ethereum address format.

    Raises:
        ValidationError: If address is empty or malformed
    """
    if not address or not Web3.is_address(address):
        raise ValidationError(f"{field} must be a valid Ethereum address")


def decode_revert_reason(raw: str) -> Optional[str]:
    """Decode Solidity revert reason from error data.

    Args:
        raw: Hex-encoded error data string

    Returns:
        Decoded revert reason string, or None if decoding fails
    """
    # Standard Solidity revertWithReason selector 0x08c379a0 + encoded string
    if raw.startswith(REVERT_SELECTOR) and len(raw) >= 10:
        try:
            data = bytes.fromhex(raw[2:])
            # offset: 4 bytes selector + 32 bytes offset + 32 bytes length
            if len(data) >= ABI_SELECTOR_LENGTH + ABI_WORD_LENGTH + ABI_WORD_LENGTH:
                offset = ABI_SELECTOR_LENGTH + ABI_WORD_LENGTH
                strlen = int.from_bytes(data[offset : offset + ABI_WORD_LENGTH], "big")
                reason_start = offset + ABI_WORD_LENGTH
                reason_bytes = data[reason_start : reason_start + strlen]
                return reason_bytes.decode(errors="ignore")
        except (ValueError, UnicodeDecodeError):
            return None
    return None


def extract_rpc_reason(error: Exception) -> str:
    """Best human-readable reason from a web3/RPC exception.

    Handles JSON-RPC error dicts passed as the first exception argument and
    the ``rpc_response`` attached to ``Web3RPCError``; revert payloads in
    ``data`` take precedence over the generic message.
    """
    payload: Optional[Dict[str, Any]] = None
    rpc_response = getattr(error, "rpc_response", None)
    if isinstance(rpc_response, dict) and isinstance(rpc_response.get("error"), dict):
        payload = rpc_response["error"]
    elif error.args and isinstance(error.args[0], dict):
        payload = error.args[0]

    if payload is None:
        return str(error)

    reason = payload.get("message") or payload.get("reason")
    data = payload.get("data")
    if isinstance(data, str):
        decoded = decode_revert_reason(data)
        if decoded:
            reason = decoded
    return reason or str(error)


def to_receipt_summary(receipt: Dict[str, Any]) -> ReceiptSummary:
    tx_hash = receipt["transactionHash"]
    return ReceiptSummary(
        tx_hash=tx_hash if isinstance(tx_hash, str) else Web3.to_hex(tx_hash),
        gas_used=int(receipt["gasUsed"]),
        block_number=receipt.get("blockNumber"),
        status=int(receipt.get("status", 1)),
    )


class LedgerEndpoint:
    """JSON-RPC endpoint reachable by URL.

    The connection is shared across scenarios; all mutation happens remotely,
    so no local locking is needed.
    """

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        web3: Optional[AsyncWeb3] = None,
        timeout: int = PROVIDER_TIMEOUT_SECONDS,
    ):
        if web3 is None and not rpc_url:
            raise ValidationError("rpc_url or web3 instance is required")
        # Bounded per-request timeout so a hung endpoint cannot stall a scenario forever
        self.w3 = web3 or AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(
            rpc_url,
            request_kwargs={"timeout": ClientTimeout(total=timeout)},
        ))

    async def close(self) -> None:
        await self.w3.provider.disconnect()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    async def gas_price(self) -> int:
        return await self._query("gas price", lambda: self.w3.eth.gas_price)

    async def chain_id(self) -> int:
        return await self._query("chain id", lambda: self.w3.eth.chain_id)

    async def get_nonce(self, address: str) -> int:
        """Transaction count of ``address`` including pending transactions."""
        return await self._query(
            "nonce", lambda: self.w3.eth.get_transaction_count(address, "pending")
        )

    async def get_balance(self, address: str) -> int:
        return await self._query("balance", lambda: self.w3.eth.get_balance(address))

    async def _query(self, what: str, call) -> int:
        try:
            return int(await call())
        except Exception as e:
            _logger.debug("Endpoint query failed", extra={"query": what, "error": str(e)})
            raise NetworkQueryError(f"Failed to fetch {what}: {e}", details={"query": what}) from e

    # ------------------------------------------------------------------
    # Submit / wait
    # ------------------------------------------------------------------
    async def send_raw_transaction(self, raw: Union[bytes, str]) -> str:
        """Broadcast a signed transaction once.

        Returns:
            Transaction hash (0x-prefixed hex string)

        Raises:
            SubmissionError: If the endpoint rejects the transaction
        """
        try:
            tx_hash = await self.w3.eth.send_raw_transaction(raw)
        except Exception as e:
            reason = extract_rpc_reason(e)
            raise SubmissionError(f"Endpoint rejected transaction: {reason}", reason=reason) from e
        return Web3.to_hex(tx_hash)

    async def wait_for_receipt(
        self,
        tx_hash: str,
        poll_interval: float = RECEIPT_POLL_INTERVAL,
    ) -> ReceiptSummary:
        """Poll until the transaction is included.

        Unbounded on purpose: the caller owns the deadline and cancels the
        wait when it expires.

        Raises:
            ConfirmationError: If polling fails or the receipt reports a revert
        """
        while True:
            try:
                receipt = await self.w3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                await asyncio.sleep(poll_interval)
                continue
            except Exception as e:
                raise ConfirmationError(
                    f"Receipt query failed: {extract_rpc_reason(e)}", tx_hash=tx_hash
                ) from e

            summary = to_receipt_summary(receipt)
            if summary.status != 1:
                raise ConfirmationError(
                    "Transaction reverted",
                    tx_hash=tx_hash,
                    details={"gas_used": summary.gas_used, "block_number": summary.block_number},
                )
            return summary
