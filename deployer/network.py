"""
Network resolution for the Hedera JSON-RPC relays.

Each supported network has its own RPC URL and private key variables, with
HEDERA_RPC_URL / HEDERA_PRIVATE_KEY as generic fallbacks.
"""

import os
import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

NETWORK_ENV = "HEDERA_NETWORK"
DEFAULT_NETWORK = "testnet"
GENERIC_RPC_ENV = "HEDERA_RPC_URL"
GENERIC_KEY_ENV = "HEDERA_PRIVATE_KEY"


@dataclass(frozen=True)
class NetworkSpec:
    """Static description of a supported network"""
    chain_id: int
    name: str
    slug: str
    rpc_env: str
    key_env: str
    runner_network: str


NETWORKS: Dict[str, NetworkSpec] = {
    "testnet": NetworkSpec(
        chain_id=296,
        name="Hedera Testnet",
        slug="hedera-testnet",
        rpc_env="HEDERA_RPC_URL",
        key_env="HEDERA_PRIVATE_KEY",
        runner_network="hederaTestnet",
    ),
    "mainnet": NetworkSpec(
        chain_id=295,
        name="Hedera Mainnet",
        slug="hedera-mainnet",
        rpc_env="HEDERA_MAINNET_RPC_URL",
        key_env="HEDERA_MAINNET_PRIVATE_KEY",
        runner_network="hederaMainnet",
    ),
}


@dataclass(frozen=True)
class NetworkConfig:
    """Resolved network, endpoint and signing key for a single run"""
    key: str
    chain_id: int
    name: str
    rpc_url: str
    private_key: str
    runner_network: str

    def __repr__(self) -> str:
        # keep the key out of logs and tracebacks
        return (f"NetworkConfig(key={self.key!r}, chain_id={self.chain_id}, "
                f"rpc_url={self.rpc_url!r}, runner_network={self.runner_network!r})")


def _lookup(env: Mapping[str, str], primary: str, fallback: str) -> Optional[str]:
    for var in (primary, fallback):
        value = (env.get(var) or "").strip()
        if value:
            return value
    return None


def normalize_private_key(private_key: str) -> str:
    """Prefix a hex private key with 0x if it was given without one."""
    if private_key.startswith(("0x", "0X")):
        return private_key
    return "0x" + private_key


def resolve_network(env: Optional[Mapping[str, str]] = None) -> NetworkConfig:
    """
    Resolve the active network configuration from the environment.

    Args:
        env: Environment mapping to read from (defaults to os.environ)

    Returns:
        Immutable NetworkConfig

    Raises:
        ConfigurationError: unsupported network, or missing RPC URL / private key
    """
    if env is None:
        env = os.environ

    raw = (env.get(NETWORK_ENV) or "").strip().lower() or DEFAULT_NETWORK
    spec = NETWORKS.get(raw)
    if spec is None:
        supported = '" or "'.join(NETWORKS)
        raise ConfigurationError(f'Unsupported {NETWORK_ENV} "{raw}". Use "{supported}".')

    rpc_url = _lookup(env, spec.rpc_env, GENERIC_RPC_ENV)
    if not rpc_url:
        raise ConfigurationError(
            f"Set {spec.rpc_env} (or {GENERIC_RPC_ENV}) to point at the desired Hedera RPC endpoint."
        )

    private_key = _lookup(env, spec.key_env, GENERIC_KEY_ENV)
    if not private_key:
        raise ConfigurationError(
            f"Set {spec.key_env} (or {GENERIC_KEY_ENV}) with the funded EVM private key."
        )

    config = NetworkConfig(
        key=raw,
        chain_id=spec.chain_id,
        name=spec.name,
        rpc_url=rpc_url,
        private_key=normalize_private_key(private_key),
        runner_network=spec.runner_network,
    )
    logger.debug(f"Resolved network {config!r}")
    return config
