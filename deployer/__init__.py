"""
LetsPay Deployer
================

Deployment, upgrade and funding orchestration for the LetsPayHBAR UUPS
contracts on Hedera:
- network: environment resolution (testnet / mainnet)
- artifacts: Hardhat artifact loading
- address / encoding: CREATE address prediction, ABI payloads
- costs: concurrent gas estimation and balance requirements
- executor / upgrade / funding: the operator flows
"""

from .exceptions import (
    ArtifactError,
    AuthorizationError,
    ChainError,
    ConfigurationError,
    DeployerError,
    DeploymentError,
    EstimationError,
    ValidationError,
)
from .network import NetworkConfig, resolve_network
from .types import RunStatus

__version__ = "1.0.0"

__all__ = [
    "ArtifactError",
    "AuthorizationError",
    "ChainError",
    "ConfigurationError",
    "DeployerError",
    "DeploymentError",
    "EstimationError",
    "NetworkConfig",
    "RunStatus",
    "ValidationError",
    "resolve_network",
]
