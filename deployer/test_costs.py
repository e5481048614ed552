"""
Tests for gas cost estimation
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from deployer.conftest import HBAR, OPERATOR, make_client
from deployer.costs import CostEstimator, combine_costs, format_native
from deployer.exceptions import ChainError, EstimationError


class TestCombineCosts:
    @pytest.mark.parametrize("impl_gas,proxy_gas,gas_price", [
        (600_000, 400_000, 10**13),
        (1, 0, 1),
        (2_345_678, 987_654, 710_000_000_000),
        (21_000, 21_000, 3),
        (0, 0, 10**12),
    ])
    def test_buffer_is_a_fifth_of_cost(self, impl_gas, proxy_gas, gas_price):
        """Test buffer and required balance across gas figures"""
        costs = combine_costs(impl_gas, proxy_gas, gas_price)
        assert costs.total_gas == impl_gas + proxy_gas
        assert costs.estimated_cost == costs.total_gas * gas_price
        assert costs.safety_buffer == costs.estimated_cost // 5
        assert costs.required_balance == costs.estimated_cost + costs.estimated_cost // 5

    def test_buffer_floors(self):
        """Test the buffer uses floor division"""
        costs = combine_costs(7, 0, 1)
        assert costs.safety_buffer == 1
        assert costs.required_balance == 8

    def test_ten_hbar_needs_twelve(self):
        """Test a 10 HBAR estimate requires 12 HBAR"""
        costs = combine_costs(600_000, 400_000, 10**13)
        assert costs.estimated_cost == 10 * HBAR
        assert costs.required_balance == 12 * HBAR


class TestCostEstimator:
    def test_estimate(self):
        """Test the estimate combines the three probe results"""
        client = make_client()
        costs = asyncio.run(CostEstimator(client).estimate(OPERATOR, "0xaa", "0xbb"))
        assert costs.implementation_gas == 600_000
        assert costs.proxy_gas == 400_000
        assert costs.gas_price == 10**13
        assert costs.required_balance == 12 * HBAR
        client.estimate_gas.assert_any_await({"from": OPERATOR, "data": "0xaa"})
        client.estimate_gas.assert_any_await({"from": OPERATOR, "data": "0xbb"})

    def test_probes_run_concurrently_and_combine_in_fixed_order(self):
        """The implementation probe finishing last must not swap it with the proxy figure"""
        started = []

        async def estimate_gas(tx):
            started.append(tx["data"])
            await asyncio.sleep(0.02 if tx["data"] == "0xaa" else 0)
            return 111 if tx["data"] == "0xaa" else 222

        async def gas_price():
            started.append("price")
            return 3

        client = make_client()
        client.estimate_gas = AsyncMock(side_effect=estimate_gas)
        client.get_gas_price = AsyncMock(side_effect=gas_price)

        costs = asyncio.run(CostEstimator(client).estimate(OPERATOR, "0xaa", "0xbb"))
        assert costs.implementation_gas == 111
        assert costs.proxy_gas == 222
        assert costs.estimated_cost == 333 * 3
        assert len(started) == 3

    def test_single_probe_failure_fails_estimate(self):
        """Test one failed probe fails the whole estimate"""
        client = make_client()
        client.get_gas_price = AsyncMock(side_effect=ChainError("Reading gas price failed: timeout"))
        with pytest.raises(EstimationError, match="gas price") as exc_info:
            asyncio.run(CostEstimator(client).estimate(OPERATOR, "0xaa", "0xbb"))
        assert isinstance(exc_info.value.__cause__, ChainError)

    def test_all_probes_settle_before_failure_is_reported(self):
        """Test a failure is reported only after every probe settles"""
        finished = []

        async def slow_price():
            await asyncio.sleep(0.01)
            finished.append("price")
            return 1

        client = make_client()
        client.estimate_gas = AsyncMock(side_effect=[RuntimeError("execution reverted"), 5])
        client.get_gas_price = AsyncMock(side_effect=slow_price)

        with pytest.raises(EstimationError, match="implementation gas"):
            asyncio.run(CostEstimator(client).estimate(OPERATOR, "0xaa", "0xbb"))
        assert finished == ["price"]

    def test_no_retry(self):
        """Test failed probes are not retried"""
        client = make_client()
        client.estimate_gas = AsyncMock(side_effect=[5, RuntimeError("boom")])
        with pytest.raises(EstimationError, match="proxy gas"):
            asyncio.run(CostEstimator(client).estimate(OPERATOR, "0xaa", "0xbb"))
        assert client.estimate_gas.await_count == 2
        assert client.get_gas_price.await_count == 1


class TestFormatNative:
    @pytest.mark.parametrize("wei,expected", [
        (0, "0 HBAR"),
        (HBAR, "1 HBAR"),
        (12 * HBAR, "12 HBAR"),
        (HBAR // 2, "0.5 HBAR"),
        (1, "0.000000000000000001 HBAR"),
        (123456789012345678901, "123.456789012345678901 HBAR"),
    ])
    def test_full_precision(self, wei, expected):
        """Test amounts are shown with full precision"""
        assert format_native(wei) == expected

    def test_custom_symbol(self):
        """Test a custom currency symbol"""
        assert format_native(10 * HBAR, "ETH") == "10 ETH"
