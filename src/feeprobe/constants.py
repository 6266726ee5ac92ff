"""Constants for feeprobe.

This module defines the constant values used across the package,
including the custom-fee envelope discriminator, gas parameters,
scenario literals, and ABI decoding constants.
"""

# ABI Encoding Constants
ABI_SELECTOR_LENGTH = 4
ABI_WORD_LENGTH = 32
REVERT_SELECTOR = "0x08c379a0"

# EIP-712 custom-fee transaction (zkSync Era)
EIP712_TX_TYPE = 113
EIP712_DOMAIN_NAME = "zkSync"
EIP712_DOMAIN_VERSION = "2"
DEFAULT_GAS_PER_PUBDATA_LIMIT = 50_000

# Gas Constants
DEFAULT_GAS_LIMIT = 2_000_000
HIGH_GAS_LIMIT = 100_000_000
LOW_GAS_PER_PUBDATA = 100

# Confirmation / Network Constants
DEFAULT_CONFIRMATION_TIMEOUT = 60  # seconds
RECEIPT_POLL_INTERVAL = 1.0  # seconds
PROVIDER_TIMEOUT_SECONDS = 30

# Voting contract
VOTE_FUNCTION = "vote"
STAGE_NAMES = ("Culture", "DeFi", "ElasticChain")

__all__ = [
    "ABI_SELECTOR_LENGTH",
    "ABI_WORD_LENGTH",
    "REVERT_SELECTOR",
    "EIP712_TX_TYPE",
    "EIP712_DOMAIN_NAME",
    "EIP712_DOMAIN_VERSION",
    "DEFAULT_GAS_PER_PUBDATA_LIMIT",
    "DEFAULT_GAS_LIMIT",
    "HIGH_GAS_LIMIT",
    "LOW_GAS_PER_PUBDATA",
    "DEFAULT_CONFIRMATION_TIMEOUT",
    "RECEIPT_POLL_INTERVAL",
    "PROVIDER_TIMEOUT_SECONDS",
    "VOTE_FUNCTION",
    "STAGE_NAMES",
]
