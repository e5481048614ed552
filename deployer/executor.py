"""
Fresh deployment of the LetsPay implementation behind an ERC1967 proxy.

Everything that has to happen before it is safe to hand over to Hardhat
Ignition: balance check, operator confirmation, cost estimation and the
sufficiency report. The deployment itself is delegated to the runner.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from eth_utils import to_bytes

from .address import predict_contract_address
from .artifacts import IMPLEMENTATION_V1, PROXY, Artifact, ArtifactProvider
from .costs import CostEstimator, DeploymentPlan, format_native
from .encoding import encode_deploy_data, encode_function_call
from .exceptions import ArtifactError
from .network import NetworkConfig
from .prompts import Prompter
from .runner import DeployedAddresses
from .types import BalanceSnapshot, RunStatus, Sufficiency

logger = logging.getLogger(__name__)

TOTAL_STEPS = 7


@dataclass
class DeploymentResult:
    status: RunStatus
    initial_balance: Optional[BalanceSnapshot] = None
    plan: Optional[DeploymentPlan] = None
    sufficiency: Optional[Sufficiency] = None
    addresses: Optional[DeployedAddresses] = None
    final_balance: Optional[BalanceSnapshot] = None


class DeploymentExecutor:
    def __init__(self, config: NetworkConfig, client, artifacts: ArtifactProvider,
                 prompter: Prompter, runner):
        self.config = config
        self.client = client
        self.artifacts = artifacts
        self.prompter = prompter
        self.runner = runner

    async def _balance(self, label: str) -> BalanceSnapshot:
        address = self.client.address
        return BalanceSnapshot(address=address, wei=await self.client.get_balance(address), label=label)

    async def plan(self, implementation: Artifact, proxy: Artifact) -> DeploymentPlan:
        """
        Predict the implementation address and estimate both deployments.

        The proxy payload is sized against the address the implementation is
        expected to get at the current nonce. If another transaction from the
        same key lands first the prediction goes stale; that is accepted.
        """
        operator = self.client.address
        nonce = await self.client.get_transaction_count(operator)
        predicted = predict_contract_address(operator, nonce)
        logger.info(f"   Predicted implementation address: {predicted} (nonce {nonce})")

        try:
            init_data = encode_function_call(implementation.abi, "initialize", [operator])
            implementation_data = encode_deploy_data(implementation)
            proxy_data = encode_deploy_data(proxy, [predicted, to_bytes(hexstr=init_data)])
        except ValueError as e:
            raise ArtifactError(f"Could not encode deployment payloads: {e}") from e

        costs = await CostEstimator(self.client).estimate(operator, implementation_data, proxy_data)
        return DeploymentPlan(predicted_implementation=predicted, initializer_data=init_data, costs=costs)

    async def run(self) -> DeploymentResult:
        implementation = self.artifacts.load(IMPLEMENTATION_V1)
        proxy = self.artifacts.load(PROXY)

        logger.info(f"[1/{TOTAL_STEPS}] Checking balance for deployer {self.client.address} "
                    f"on Hedera {self.config.key}")
        initial = await self._balance("initial")
        logger.info(f"[2/{TOTAL_STEPS}] Operator balance: {initial}")
        result = DeploymentResult(status=RunStatus.CANCELLED, initial_balance=initial)

        if not self.prompter.confirm(f"[3/{TOTAL_STEPS}] Continue with deployment preparation?"):
            logger.info("Aborting before deployment preparation.")
            return result

        logger.info(f"[4/{TOTAL_STEPS}] Estimating required balance for deployment transactions...")
        result.plan = await self.plan(implementation, proxy)

        pre_deploy = await self._balance("pre-deploy")
        result.sufficiency = Sufficiency(balance=pre_deploy.wei, required=result.plan.required_balance)
        if result.sufficiency.met:
            logger.info(f"[5/{TOTAL_STEPS}] Operator balance meets the required threshold "
                        f"({pre_deploy} >= {format_native(result.plan.required_balance)}).")
        else:
            logger.warning(f"[5/{TOTAL_STEPS}] Operator balance is {result.sufficiency.describe()}. "
                           f"Top up before deploying for a smoother experience.")

        if not self.prompter.confirm(f"[6/{TOTAL_STEPS}] Proceed with Hardhat Ignition deployment now?"):
            logger.info("Deployment cancelled by user.")
            return result

        logger.info(f"[7/{TOTAL_STEPS}] Launching Hardhat Ignition on {self.config.runner_network}...")
        result.addresses = await self.runner.run_deployment(self.config.runner_network)
        result.status = RunStatus.COMPLETED

        if result.addresses.proxy:
            logger.info(f"Implementation: {result.addresses.implementation}")
            logger.info(f"Proxy:          {result.addresses.proxy}")

        result.final_balance = await self._balance("post-deploy")
        spent = initial.wei - result.final_balance.wei
        logger.info(f"Operator balance after deployment: {result.final_balance} "
                    f"(spent {format_native(max(spent, 0))})")
        return result
