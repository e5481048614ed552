#!/usr/bin/env python3
"""
Fund the LetsPayHBAR proxy with HBAR
"""

import os
import sys
from typing import Callable, Mapping, Optional

from dotenv import load_dotenv

from deployer.artifacts import ARTIFACTS_DIR_ENV, ArtifactProvider
from deployer.chain import ChainClient
from deployer.funding import DEFAULT_FUND_AMOUNT, FUND_AMOUNT_ENV, FundingFlow, FundingResult
from deployer.network import resolve_network
from deployer.prompts import Prompter
from deployer.upgrade import resolve_proxy_address

from scripts.common import run_flow, setup_logging


async def fund(env: Optional[Mapping[str, str]] = None,
               ask: Callable[[str], str] = input) -> FundingResult:
    if env is None:
        env = os.environ
    config = resolve_network(env)
    proxy_address = resolve_proxy_address(env)
    default_amount = (env.get(FUND_AMOUNT_ENV) or "").strip() or DEFAULT_FUND_AMOUNT
    artifacts = ArtifactProvider(env.get(ARTIFACTS_DIR_ENV))
    client = await ChainClient.connect(config)
    try:
        flow = FundingFlow(client, artifacts, Prompter(ask), proxy_address, default_amount)
        return await flow.run()
    finally:
        await client.close()


def main() -> int:
    load_dotenv()
    setup_logging()
    return run_flow(fund())


if __name__ == "__main__":
    sys.exit(main())
