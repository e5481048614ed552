#!/usr/bin/env python3
"""
Upgrade the LetsPayHBAR proxy to the V2 implementation
"""

import os
import sys
from typing import Mapping, Optional

from dotenv import load_dotenv

from deployer.artifacts import ARTIFACTS_DIR_ENV, ArtifactProvider
from deployer.chain import ChainClient
from deployer.network import resolve_network
from deployer.upgrade import UpgradeOrchestrator, UpgradeResult, resolve_proxy_address

from scripts.common import run_flow, setup_logging


async def upgrade(env: Optional[Mapping[str, str]] = None) -> UpgradeResult:
    if env is None:
        env = os.environ
    config = resolve_network(env)
    proxy_address = resolve_proxy_address(env)
    artifacts = ArtifactProvider(env.get(ARTIFACTS_DIR_ENV))
    client = await ChainClient.connect(config)
    try:
        return await UpgradeOrchestrator(client, artifacts, proxy_address).run()
    finally:
        await client.close()


def main() -> int:
    load_dotenv()
    setup_logging()
    return run_flow(upgrade())


if __name__ == "__main__":
    sys.exit(main())
