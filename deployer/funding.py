"""Top up the proxy through its payable fundContract() method."""

import logging
from dataclasses import dataclass
from typing import Optional

from web3 import Web3

from .artifacts import IMPLEMENTATION_V1, ArtifactProvider
from .costs import format_native
from .exceptions import ValidationError
from .prompts import Prompter, parse_positive_amount
from .types import BalanceSnapshot, RunStatus

logger = logging.getLogger(__name__)

FUND_AMOUNT_ENV = "LETSPAY_FUND_AMOUNT"
DEFAULT_FUND_AMOUNT = "10"


@dataclass
class FundingResult:
    status: RunStatus
    amount_wei: int
    sender_before: Optional[BalanceSnapshot] = None
    sender_after: Optional[BalanceSnapshot] = None
    proxy_balance: Optional[BalanceSnapshot] = None
    tx_hash: Optional[str] = None
    gas_used: Optional[int] = None


def amount_to_wei(amount: str) -> int:
    """Convert a validated HBAR amount to wei. Refuses values that round to zero or overflow uint256."""
    try:
        amount_wei = Web3.to_wei(parse_positive_amount(amount), 'ether')
    except ValidationError:
        raise
    except ValueError as e:
        raise ValidationError(f'Amount "{amount}" is out of range: {e}') from e
    if amount_wei == 0:
        raise ValidationError(f'Amount "{amount}" is smaller than 1 wei.')
    return amount_wei


class FundingFlow:
    def __init__(self, client, artifacts: ArtifactProvider, prompter: Prompter,
                 proxy_address: str, default_amount: str = DEFAULT_FUND_AMOUNT):
        self.client = client
        self.artifacts = artifacts
        self.prompter = prompter
        self.proxy_address = proxy_address
        self.default_amount = default_amount

    async def run(self) -> FundingResult:
        amount = self.prompter.prompt_amount("Amount of HBAR to send to the proxy", self.default_amount)
        if amount is None:
            logger.info("Funding cancelled by user.")
            return FundingResult(status=RunStatus.CANCELLED, amount_wei=0)
        amount_wei = amount_to_wei(amount)
        abi = self.artifacts.load(IMPLEMENTATION_V1).abi
        sender = self.client.address
        result = FundingResult(status=RunStatus.CANCELLED, amount_wei=amount_wei)

        logger.info(f"Funding proxy contract at {self.proxy_address} with {format_native(amount_wei)}...")
        logger.info(f"From account: {sender}")
        result.sender_before = BalanceSnapshot(sender, await self.client.get_balance(sender), "before")
        logger.info(f"Sender balance before: {result.sender_before}")
        if result.sender_before.wei < amount_wei:
            logger.warning(f"Sender balance is below the funding amount by "
                           f"{format_native(amount_wei - result.sender_before.wei)}")

        if not self.prompter.confirm(f"Send {format_native(amount_wei)} to {self.proxy_address}?"):
            logger.info("Funding cancelled by user.")
            return result

        result.tx_hash = await self.client.transact_function(
            self.proxy_address, abi, "fundContract", value=amount_wei
        )
        logger.info("Waiting for confirmation...")
        receipt = await self.client.wait_for_receipt(result.tx_hash)
        result.gas_used = receipt.get('gasUsed')
        result.status = RunStatus.COMPLETED

        result.sender_after = BalanceSnapshot(sender, await self.client.get_balance(sender), "after")
        result.proxy_balance = BalanceSnapshot(
            self.proxy_address, await self.client.get_balance(self.proxy_address), "proxy"
        )
        logger.info(f"Sender balance after: {result.sender_after}")
        logger.info(f"Proxy balance: {result.proxy_balance}")
        logger.info(f"Gas used: {result.gas_used} units")
        return result
