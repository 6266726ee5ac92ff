import dataclasses

import pydantic
import pytest

from feeprobe.config import Network, ProbeConfig, get_network_config, load_probe_settings
from feeprobe.errors import ValidationError

ENV_VARS = ("WALLET_PRIVATE_KEY", "CONTRACT_ADDRESS", "NETWORK", "RPC_URL", "CONFIRMATION_TIMEOUT")


@pytest.fixture()
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Point at a missing file so no ambient .env is picked up
    return str(tmp_path / ".env")


def test_network_override_keeps_chain_id():
    cfg = get_network_config(Network.ZKSYNC_SEPOLIA, rpc_url="http://localhost:3050")
    assert cfg.rpc_url == "http://localhost:3050"
    assert cfg.chain_id == 300
    assert get_network_config(Network.ZKSYNC_SEPOLIA).rpc_url == "https://sepolia.era.zksync.dev"


def test_network_config_is_immutable():
    cfg = get_network_config(Network.IN_MEMORY_NODE)
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.rpc_url = "http://elsewhere:8011"


def test_probe_config_defaults():
    cfg = ProbeConfig()
    assert cfg.confirmation_timeout == 60
    assert cfg.scenario_attempts == 1


@pytest.mark.parametrize("kwargs", [{"confirmation_timeout": 0}, {"scenario_attempts": 0}])
def test_probe_config_bounds(kwargs):
    with pytest.raises(pydantic.ValidationError):
        ProbeConfig(**kwargs)


def test_probe_config_is_frozen():
    with pytest.raises(pydantic.ValidationError):
        ProbeConfig().confirmation_timeout = 5


def test_load_settings(monkeypatch, clean_env):
    monkeypatch.setenv("WALLET_PRIVATE_KEY", "0x" + "11" * 32)
    monkeypatch.setenv("CONTRACT_ADDRESS", "0x" + "ab" * 20)
    monkeypatch.setenv("NETWORK", "zksync-sepolia")
    monkeypatch.setenv("CONFIRMATION_TIMEOUT", "15")

    settings = load_probe_settings(clean_env)

    assert settings.network.name is Network.ZKSYNC_SEPOLIA
    assert settings.contract_address == "0x" + "ab" * 20
    assert settings.probe.confirmation_timeout == 15


def test_load_settings_reads_env_file(tmp_path, clean_env, monkeypatch):
    env_file = tmp_path / "probe.env"
    env_file.write_text(
        "WALLET_PRIVATE_KEY=0x" + "11" * 32 + "\n"
        "CONTRACT_ADDRESS=0x" + "ab" * 20 + "\n"
        "RPC_URL=http://127.0.0.1:9000\n"
    )
    for name in ENV_VARS:
        # load_dotenv writes into os.environ; undo after the test
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)

    settings = load_probe_settings(str(env_file))

    assert settings.network.name is Network.IN_MEMORY_NODE
    assert settings.network.rpc_url == "http://127.0.0.1:9000"


@pytest.mark.parametrize(
    "env, message",
    [
        ({}, "WALLET_PRIVATE_KEY"),
        ({"WALLET_PRIVATE_KEY": "0x11"}, "CONTRACT_ADDRESS"),
        ({"WALLET_PRIVATE_KEY": "0x11", "CONTRACT_ADDRESS": "0xab", "NETWORK": "mars"}, "NETWORK"),
        ({"WALLET_PRIVATE_KEY": "0x11", "CONTRACT_ADDRESS": "0xab", "CONFIRMATION_TIMEOUT": "-1"}, "CONFIRMATION_TIMEOUT"),
    ],
)
def test_load_settings_errors(monkeypatch, clean_env, env, message):
    for name, value in env.items():
        monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError, match=message):
        load_probe_settings(clean_env)
