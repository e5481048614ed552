"""
UUPS proxy upgrade: deploy the V2 implementation and point the proxy at it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from eth_utils import is_address, to_checksum_address

from .artifacts import IMPLEMENTATION_V1, IMPLEMENTATION_V2, ArtifactProvider
from .encoding import encode_deploy_data
from .exceptions import AuthorizationError, ConfigurationError
from .types import BalanceSnapshot, RunStatus

logger = logging.getLogger(__name__)

# ERC-1967 implementation slot: bytes32(uint256(keccak256("eip1967.proxy.implementation")) - 1)
IMPLEMENTATION_SLOT = "0x360894a13ba1a3210667c828492db98dca3e2076cc3735a920a3ca505d382bbc"

PROXY_ADDRESS_ENV = "LETSPAY_PROXY_ADDRESS"


@dataclass(frozen=True)
class ExpectedConstant:
    """A read-only accessor whose value identifies the implementation version"""
    name: str
    value: Any


# V2 raises the per-payment credit to 200 HBAR in tinybar (8 decimals)
V2_CREDIT = ExpectedConstant(name="CREDIT", value=200 * 10**8)


@dataclass
class ProxyUpgradeState:
    proxy_address: str
    current_implementation: Optional[str] = None
    owner: Optional[str] = None
    new_implementation: Optional[str] = None
    post_upgrade_implementation: Optional[str] = None


@dataclass
class UpgradeResult:
    status: RunStatus
    state: ProxyUpgradeState
    balance: Optional[BalanceSnapshot] = None
    upgrade_tx: Optional[str] = None
    verified: bool = False
    sanity_check_passed: Optional[bool] = None
    sanity_value: Any = None


def resolve_proxy_address(env) -> str:
    """Read and checksum the proxy address from the environment."""
    raw = (env.get(PROXY_ADDRESS_ENV) or "").strip()
    if not raw:
        raise ConfigurationError(f"{PROXY_ADDRESS_ENV} must be set to the ERC1967 proxy to operate on.")
    if not is_address(raw):
        raise ConfigurationError(f"{PROXY_ADDRESS_ENV} is not a valid address: {raw}")
    return to_checksum_address(raw)


def address_from_slot(word: bytes) -> str:
    """The implementation pointer is the low 20 bytes of the slot."""
    return to_checksum_address(bytes(word)[-20:].rjust(20, b"\0"))


class UpgradeOrchestrator:
    def __init__(self, client, artifacts: ArtifactProvider, proxy_address: str,
                 expected: ExpectedConstant = V2_CREDIT):
        self.client = client
        self.artifacts = artifacts
        self.proxy_address = to_checksum_address(proxy_address)
        self.expected = expected

    async def read_implementation(self) -> str:
        word = await self.client.get_storage_at(self.proxy_address, IMPLEMENTATION_SLOT)
        return address_from_slot(word)

    async def run(self) -> UpgradeResult:
        v1 = self.artifacts.load(IMPLEMENTATION_V1)
        v2 = self.artifacts.load(IMPLEMENTATION_V2)
        deployer = self.client.address
        state = ProxyUpgradeState(proxy_address=self.proxy_address)
        result = UpgradeResult(status=RunStatus.COMPLETED, state=state)

        logger.info(f"Upgrading proxy {self.proxy_address} to V2 with account: {deployer}")
        balance = await self.client.get_balance(deployer)
        result.balance = BalanceSnapshot(address=deployer, wei=balance, label="initial")
        logger.info(f"Account balance: {result.balance}")

        logger.info("Deploying V2 implementation...")
        state.new_implementation = await self.client.deploy_contract(encode_deploy_data(v2))
        logger.info(f"V2 implementation deployed to: {state.new_implementation}")

        logger.info("Verifying current proxy implementation...")
        state.current_implementation = await self.read_implementation()
        logger.info(f"Current implementation (from storage): {state.current_implementation}")

        state.owner = await self.client.call_function(self.proxy_address, v1.abi, "owner")
        logger.info(f"Proxy owner: {state.owner}")
        logger.info(f"Deployer address: {deployer}")
        if str(state.owner).lower() != deployer.lower():
            raise AuthorizationError(
                f"Deployer {deployer} is not the owner of proxy {self.proxy_address} "
                f"(owner is {state.owner}). Cannot upgrade."
            )

        logger.info("Upgrading proxy to V2...")
        result.upgrade_tx = await self.client.transact_function(
            self.proxy_address, v1.abi, "upgradeTo", [state.new_implementation]
        )
        logger.info(f"Upgrade transaction hash: {result.upgrade_tx}")
        await self.client.wait_for_receipt(result.upgrade_tx)
        logger.info("Upgrade transaction confirmed")

        logger.info("Verifying upgrade...")
        state.post_upgrade_implementation = await self.read_implementation()
        logger.info(f"New implementation (from storage): {state.post_upgrade_implementation}")
        result.verified = state.post_upgrade_implementation.lower() == state.new_implementation.lower()
        if not result.verified:
            logger.warning(f"Proxy points at {state.post_upgrade_implementation}, "
                           f"expected {state.new_implementation}")

        result.sanity_value = await self.client.call_function(self.proxy_address, v2.abi, self.expected.name)
        result.sanity_check_passed = result.sanity_value == self.expected.value
        logger.info(f"{self.expected.name} constant: {result.sanity_value} (expected {self.expected.value})")
        if result.sanity_check_passed:
            logger.info("V2 upgrade verified successfully")
        else:
            logger.warning(f"{self.expected.name} value doesn't match expected V2 value")

        logger.info(f"Upgrade complete. Proxy: {self.proxy_address}, implementation: {state.new_implementation}")
        return result
