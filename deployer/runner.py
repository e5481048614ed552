"""
Delegation to Hardhat Ignition for the actual implementation + proxy deployment.
"""

import os
import sys
import json
import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .exceptions import DeploymentError

logger = logging.getLogger(__name__)

IGNITION_MODULE = "ignition/modules/LetsPayHBAR.ts"
IGNITION_MODULE_ID = "LetsPayHBARModule"
IMPLEMENTATION_FUTURE = f"{IGNITION_MODULE_ID}#LetsPayHBAR_V1_UUPS"
PROXY_FUTURE = f"{IGNITION_MODULE_ID}#ERC1967Proxy"


@dataclass(frozen=True)
class DeployedAddresses:
    implementation: Optional[str] = None
    proxy: Optional[str] = None


def deployed_addresses_path(project_dir: str, chain_id: int) -> str:
    return os.path.join(project_dir, "ignition", "deployments", f"chain-{chain_id}", "deployed_addresses.json")


def read_deployed_addresses(project_dir: str, chain_id: int) -> DeployedAddresses:
    """Read what Ignition recorded for the chain; empty if it left no journal."""
    path = deployed_addresses_path(project_dir, chain_id)
    try:
        with open(path, 'r') as f:
            addresses: Dict[str, str] = json.load(f)
    except FileNotFoundError:
        logger.warning(f"No deployed addresses recorded at {path}")
        return DeployedAddresses()
    return DeployedAddresses(
        implementation=addresses.get(IMPLEMENTATION_FUTURE),
        proxy=addresses.get(PROXY_FUTURE),
    )


class HardhatIgnitionRunner:
    """Runs `npx hardhat ignition deploy` for the LetsPay module"""

    def __init__(self, chain_id: int, project_dir: str = ".", module: str = IGNITION_MODULE):
        self.chain_id = chain_id
        self.project_dir = project_dir
        self.module = module

    def command(self, network_name: str):
        npx = "npx.cmd" if sys.platform == "win32" else "npx"
        return [npx, "hardhat", "ignition", "deploy", "--network", network_name, self.module]

    async def run_deployment(self, network_name: str) -> DeployedAddresses:
        """
        Deploy implementation and proxy through Ignition on `network_name`.

        Raises:
            DeploymentError: Ignition could not be started or exited non-zero
        """
        cmd = self.command(network_name)
        logger.info(f"Running: {' '.join(cmd)}")
        try:
            process = await asyncio.create_subprocess_exec(*cmd, cwd=self.project_dir)
        except OSError as e:
            raise DeploymentError(f"Could not launch Hardhat: {e}") from e

        code = await process.wait()
        if code != 0:
            raise DeploymentError(f"Hardhat exited with code {code}")

        return read_deployed_addresses(self.project_dir, self.chain_id)
