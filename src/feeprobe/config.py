import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .constants import DEFAULT_CONFIRMATION_TIMEOUT, PROVIDER_TIMEOUT_SECONDS, RECEIPT_POLL_INTERVAL
from .errors import ValidationError

__all__ = [
    "Network",
    "NetworkConfig",
    "NETWORKS",
    "get_network_config",
    "ProbeConfig",
    "ProbeSettings",
    "load_probe_settings",
]


class Network(str, Enum):
    ZKSYNC_SEPOLIA = "zksync-sepolia"
    ZKSYNC = "zksync"
    IN_MEMORY_NODE = "in-memory-node"


@dataclass(frozen=True)
class NetworkConfig:
    name: Network
    chain_id: int
    rpc_url: str
    explorer_url: str


NETWORKS: dict[Network, NetworkConfig] = {
    Network.ZKSYNC_SEPOLIA: NetworkConfig(
        name=Network.ZKSYNC_SEPOLIA,
        chain_id=300,
        rpc_url="https://sepolia.era.zksync.dev",
        explorer_url="https://sepolia.explorer.zksync.io",
    ),
    Network.ZKSYNC: NetworkConfig(
        name=Network.ZKSYNC,
        chain_id=324,
        rpc_url="https://mainnet.era.zksync.io",
        explorer_url="https://explorer.zksync.io",
    ),
    # era_test_node / anvil-zksync defaults
    Network.IN_MEMORY_NODE: NetworkConfig(
        name=Network.IN_MEMORY_NODE,
        chain_id=260,
        rpc_url="http://127.0.0.1:8011",
        explorer_url="",
    ),
}


def get_network_config(network: Network, rpc_url: Optional[str] = None) -> NetworkConfig:
    cfg = NETWORKS[network]
    if rpc_url:
        return NetworkConfig(
            name=cfg.name,
            chain_id=cfg.chain_id,
            rpc_url=rpc_url,
            explorer_url=cfg.explorer_url,
        )
    return cfg


class ProbeConfig(BaseModel):
    """
    Tunables for a scenario batch.

    Example:
        ```python
        config = ProbeConfig(confirmation_timeout=30, scenario_attempts=2)
        ```
    """

    model_config = ConfigDict(frozen=True)

    confirmation_timeout: float = Field(
        default=DEFAULT_CONFIRMATION_TIMEOUT,
        gt=0,
        description="Seconds to wait for a receipt before reporting a timeout",
    )
    request_timeout: int = Field(
        default=PROVIDER_TIMEOUT_SECONDS,
        ge=1,
        description="HTTP request timeout in seconds for each RPC call",
    )
    receipt_poll_interval: float = Field(
        default=RECEIPT_POLL_INTERVAL,
        gt=0,
        description="Seconds between receipt polls while confirming",
    )
    scenario_attempts: int = Field(
        default=1,
        ge=1,
        description="Attempts per scenario when building fails on a network query",
    )
    retry_base_delay_ms: int = Field(
        default=1000,
        ge=0,
        description="Base backoff delay between scenario attempts",
    )


@dataclass(frozen=True)
class ProbeSettings:
    """Deployment-specific settings read from the environment."""

    network: NetworkConfig
    private_key: str
    contract_address: str
    probe: ProbeConfig


def load_probe_settings(env_file: Optional[str] = None) -> ProbeSettings:
    """Load settings from the environment (and ``.env`` if present).

    Environment Variables:
        WALLET_PRIVATE_KEY: Sender private key (required)
        CONTRACT_ADDRESS: Deployed voting contract (required)
        NETWORK: One of the ``Network`` values (default: in-memory-node)
        RPC_URL: Overrides the network's default RPC URL
        CONFIRMATION_TIMEOUT: Seconds (default: 60)

    Raises:
        ValidationError: If a required variable is missing or malformed
    """
    load_dotenv(env_file)

    private_key = os.getenv("WALLET_PRIVATE_KEY", "")
    contract_address = os.getenv("CONTRACT_ADDRESS", "")
    if not private_key:
        raise ValidationError("WALLET_PRIVATE_KEY is not set")
    if not contract_address:
        raise ValidationError("CONTRACT_ADDRESS is not set")

    try:
        network = Network(os.getenv("NETWORK", Network.IN_MEMORY_NODE.value))
    except ValueError:
        raise ValidationError(
            f"NETWORK must be one of: {', '.join(n.value for n in Network)}"
        ) from None

    timeout_raw = os.getenv("CONFIRMATION_TIMEOUT")
    try:
        probe = ProbeConfig(confirmation_timeout=float(timeout_raw)) if timeout_raw else ProbeConfig()
    except ValueError as e:
        # pydantic's ValidationError subclasses ValueError
        raise ValidationError(f"Invalid CONFIRMATION_TIMEOUT: {timeout_raw}") from e

    return ProbeSettings(
        network=get_network_config(network, os.getenv("RPC_URL") or None),
        private_key=private_key,
        contract_address=contract_address,
        probe=probe,
    )
