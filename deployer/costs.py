"""
Gas cost estimation for the implementation + proxy deployment pair.
"""

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal

from web3 import Web3

from .exceptions import EstimationError

logger = logging.getLogger(__name__)

NATIVE_SYMBOL = "HBAR"

# required = cost + cost // BUFFER_DIVISOR, i.e. 20% headroom
BUFFER_DIVISOR = 5


def format_native(amount_wei: int, symbol: str = NATIVE_SYMBOL) -> str:
    """Render a wei amount in whole native units at full precision."""
    value = Decimal(Web3.from_wei(amount_wei, 'ether'))
    text = f"{value:f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return f"{text} {symbol}"


@dataclass(frozen=True)
class CostEstimate:
    implementation_gas: int
    proxy_gas: int
    total_gas: int
    gas_price: int
    estimated_cost: int
    safety_buffer: int
    required_balance: int


@dataclass(frozen=True)
class DeploymentPlan:
    """Everything known about a fresh deployment before it is broadcast"""
    predicted_implementation: str
    initializer_data: str
    costs: CostEstimate

    @property
    def required_balance(self) -> int:
        return self.costs.required_balance


def combine_costs(implementation_gas: int, proxy_gas: int, gas_price: int) -> CostEstimate:
    total_gas = implementation_gas + proxy_gas
    estimated_cost = total_gas * gas_price
    safety_buffer = estimated_cost // BUFFER_DIVISOR
    return CostEstimate(
        implementation_gas=implementation_gas,
        proxy_gas=proxy_gas,
        total_gas=total_gas,
        gas_price=gas_price,
        estimated_cost=estimated_cost,
        safety_buffer=safety_buffer,
        required_balance=estimated_cost + safety_buffer,
    )


class CostEstimator:
    """Probes gas for both deployments and the gas price concurrently"""

    def __init__(self, client):
        self.client = client

    async def estimate(self, operator: str, implementation_data: str, proxy_data: str) -> CostEstimate:
        """
        Estimate the cost of deploying the implementation and then the proxy.

        The three probes run concurrently and all of them must settle before
        anything is combined. A single failure fails the whole estimate.

        Raises:
            EstimationError: any probe failed
        """
        probes = ("implementation gas", "proxy gas", "gas price")
        results = await asyncio.gather(
            self.client.estimate_gas({'from': operator, 'data': implementation_data}),
            self.client.estimate_gas({'from': operator, 'data': proxy_data}),
            self.client.get_gas_price(),
            return_exceptions=True,
        )

        for probe, result in zip(probes, results):
            if isinstance(result, BaseException):
                logger.error(f"Cost probe for {probe} failed: {result}")
                raise EstimationError(f"Could not estimate {probe}: {result}") from result

        implementation_gas, proxy_gas, gas_price = (int(r) for r in results)
        costs = combine_costs(implementation_gas, proxy_gas, gas_price)
        log_costs(costs)
        return costs


def log_costs(costs: CostEstimate) -> None:
    logger.info(f"   Implementation deploy gas: {costs.implementation_gas} units")
    logger.info(f"   Proxy deploy gas:          {costs.proxy_gas} units")
    logger.info(f"   Total estimated gas:       {costs.total_gas} units")
    logger.info(f"   Current gas price:         {format_native(costs.gas_price)} (in wei equivalent)")
    logger.info(f"   Estimated cost:            {format_native(costs.estimated_cost)}")
    logger.info(f"   20% safety buffer:         {format_native(costs.safety_buffer)}")
    logger.info(f"   Required balance:          {format_native(costs.required_balance)}")
