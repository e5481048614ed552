#!/usr/bin/env python3
"""
LetsPayHBAR deployment helper

Checks the operator balance, estimates what the implementation + proxy
deployment will cost, and hands over to Hardhat Ignition once confirmed.
"""

import os
import sys
from typing import Callable, Mapping, Optional

from dotenv import load_dotenv

from deployer.artifacts import ARTIFACTS_DIR_ENV, ArtifactProvider
from deployer.chain import ChainClient
from deployer.executor import DeploymentExecutor, DeploymentResult
from deployer.network import resolve_network
from deployer.prompts import Prompter
from deployer.runner import HardhatIgnitionRunner

from scripts.common import run_flow, setup_logging


async def deploy(env: Optional[Mapping[str, str]] = None,
                 ask: Callable[[str], str] = input) -> DeploymentResult:
    if env is None:
        env = os.environ
    config = resolve_network(env)
    artifacts = ArtifactProvider(env.get(ARTIFACTS_DIR_ENV))
    client = await ChainClient.connect(config)
    try:
        runner = HardhatIgnitionRunner(chain_id=config.chain_id)
        executor = DeploymentExecutor(config, client, artifacts, Prompter(ask), runner)
        return await executor.run()
    finally:
        await client.close()


def main() -> int:
    load_dotenv()
    setup_logging()
    return run_flow(deploy())


if __name__ == "__main__":
    sys.exit(main())
