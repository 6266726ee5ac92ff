"""EIP-712 signing for custom-fee (type 113) transactions.

zkSync Era accepts transactions whose signature covers an EIP-712 typed
``Transaction`` struct and whose wire form is ``0x71 || rlp(fields)``.

Key Features:
- EIP-712 domain separation per chain
- Typed structured data hashing via eth_account
- RLP serialization including the data-gas unit price and custom signature
"""

from typing import Any, Dict, Protocol, runtime_checkable

import rlp
from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_account.signers.local import LocalAccount
from eth_utils import to_canonical_address

from .constants import EIP712_DOMAIN_NAME, EIP712_DOMAIN_VERSION, EIP712_TX_TYPE
from .errors import ValidationError
from .models import TransactionEnvelope

__all__ = ["Signer", "Eip712Signer", "EIP712_TRANSACTION_TYPES", "EIP712_SERIALIZED_PREFIX"]

EIP712_SERIALIZED_PREFIX = b"\x71"

EIP712_TRANSACTION_TYPES = {
    "Transaction": [
        {"name": "txType", "type": "uint256"},
        {"name": "from", "type": "uint256"},
        {"name": "to", "type": "uint256"},
        {"name": "gasLimit", "type": "uint256"},
        {"name": "gasPerPubdataByteLimit", "type": "uint256"},
        {"name": "maxFeePerGas", "type": "uint256"},
        {"name": "maxPriorityFeePerGas", "type": "uint256"},
        {"name": "paymaster", "type": "uint256"},
        {"name": "nonce", "type": "uint256"},
        {"name": "value", "type": "uint256"},
        {"name": "data", "type": "bytes"},
        {"name": "factoryDeps", "type": "bytes32[]"},
        {"name": "paymasterInput", "type": "bytes"},
    ]
}


@runtime_checkable
class Signer(Protocol):
    """Signing authority: an address plus the ability to sign envelopes."""

    @property
    def address(self) -> str: ...

    def sign(self, envelope: TransactionEnvelope) -> bytes: ...


class Eip712Signer:
    """Local-key signer for type-113 envelopes."""

    def __init__(self, private_key: str):
        # Sanitize private key errors to prevent key leakage in stack traces
        try:
            self.account: LocalAccount = Account.from_key(private_key)
        except Exception:
            raise ValidationError("Invalid private key format (key not shown for security)") from None

    @property
    def address(self) -> str:
        return self.account.address

    @staticmethod
    def typed_data(envelope: TransactionEnvelope) -> Dict[str, Any]:
        """EIP-712 payload covering every field of the envelope."""
        return {
            "types": {
                "EIP712Domain": [
                    {"name": "name", "type": "string"},
                    {"name": "version", "type": "string"},
                    {"name": "chainId", "type": "uint256"},
                ],
                **EIP712_TRANSACTION_TYPES,
            },
            "primaryType": "Transaction",
            "domain": {
                "name": EIP712_DOMAIN_NAME,
                "version": EIP712_DOMAIN_VERSION,
                "chainId": envelope.chain_id,
            },
            "message": {
                "txType": envelope.tx_type,
                "from": int(envelope.from_, 16),
                "to": int(envelope.to, 16),
                "gasLimit": envelope.gas_limit,
                "gasPerPubdataByteLimit": envelope.gas_per_pubdata,
                "maxFeePerGas": envelope.max_fee_per_gas,
                "maxPriorityFeePerGas": envelope.max_priority_fee_per_gas,
                "paymaster": 0,
                "nonce": envelope.nonce,
                "value": envelope.value,
                "data": envelope.data,
                "factoryDeps": [],
                "paymasterInput": b"",
            },
        }

    def sign(self, envelope: TransactionEnvelope) -> bytes:
        """Sign and serialize an envelope.

        Returns:
            Raw transaction bytes ready for ``eth_sendRawTransaction``

        Raises:
            ValidationError: If the envelope is not a type-113 envelope from this signer
        """
        if envelope.tx_type != EIP712_TX_TYPE:
            raise ValidationError(f"Unsupported transaction type {envelope.tx_type}")
        if envelope.from_.lower() != self.address.lower():
            raise ValidationError("Envelope sender does not match signer address")

        signable = encode_typed_data(full_message=self.typed_data(envelope))
        signed = self.account.sign_message(signable)
        y_parity = signed.v - 27 if signed.v >= 27 else signed.v

        fields = [
            envelope.nonce,
            envelope.max_priority_fee_per_gas,
            envelope.max_fee_per_gas,
            envelope.gas_limit,
            to_canonical_address(envelope.to),
            envelope.value,
            envelope.data,
            y_parity,
            signed.r,
            signed.s,
            envelope.chain_id,
            to_canonical_address(envelope.from_),
            envelope.gas_per_pubdata,
            [],  # factory deps
            bytes(signed.signature),
            [],  # paymaster params
        ]
        return EIP712_SERIALIZED_PREFIX + rlp.encode(fields)
