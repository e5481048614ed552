"""Tests for funding the proxy"""

import asyncio

import pytest

from deployer.artifacts import ArtifactProvider
from deployer.conftest import HBAR, PROXY_ADDRESS, make_client, scripted
from deployer.exceptions import ValidationError
from deployer.funding import FundingFlow, amount_to_wei
from deployer.prompts import Prompter
from deployer.types import RunStatus


def run_funding(artifacts_dir, client, *answers, default="10"):
    flow = FundingFlow(client, ArtifactProvider(artifacts_dir), Prompter(scripted(*answers)),
                       PROXY_ADDRESS, default)
    return asyncio.run(flow.run())


def interrupted(question):
    raise KeyboardInterrupt


class TestFundingFlow:
    def test_default_amount(self, artifacts_dir):
        """Test an empty answer sends the default amount through fundContract()"""
        client = make_client()
        result = run_funding(artifacts_dir, client, "", "y")

        assert result.status == RunStatus.COMPLETED
        assert result.amount_wei == 10 * HBAR
        client.transact_function.assert_awaited_once()
        assert client.transact_function.await_args.args[2] == "fundContract"
        assert client.transact_function.await_args.kwargs["value"] == 10 * HBAR
        assert result.gas_used == 21_000

    def test_fractional_amount(self, artifacts_dir):
        """Test fractional HBAR amounts convert exactly"""
        result = run_funding(artifacts_dir, make_client(), "25.5", "y")
        assert result.amount_wei == 25 * HBAR + HBAR // 2

    def test_reports_balances_after(self, artifacts_dir):
        """Test sender and proxy balances are read after the transfer"""
        client = make_client()
        result = run_funding(artifacts_dir, client, "1", "y")
        assert result.sender_before.wei == 50 * HBAR
        assert result.proxy_balance.address == PROXY_ADDRESS
        assert [c.args[0] for c in client.get_balance.await_args_list][-1] == PROXY_ADDRESS

    @pytest.mark.parametrize("answer", ["-3", "abc", "1e-30", "1e80"])
    def test_invalid_amount_fails_before_balance_check(self, artifacts_dir, answer):
        """Test unusable amounts abort before any chain access"""
        client = make_client()
        with pytest.raises(ValidationError):
            run_funding(artifacts_dir, client, answer)
        client.get_balance.assert_not_awaited()
        client.transact_function.assert_not_awaited()

    def test_declined(self, artifacts_dir):
        """Test declining the confirmation sends nothing"""
        client = make_client()
        result = run_funding(artifacts_dir, client, "5", "n")
        assert result.status == RunStatus.CANCELLED
        client.transact_function.assert_not_awaited()

    def test_interrupted_amount_prompt_cancels(self, artifacts_dir):
        """Test Ctrl-C at the amount prompt cancels without touching the chain"""
        client = make_client()
        flow = FundingFlow(client, ArtifactProvider(artifacts_dir), Prompter(interrupted), PROXY_ADDRESS)
        result = asyncio.run(flow.run())
        assert result.status == RunStatus.CANCELLED
        assert result.amount_wei == 0
        client.get_balance.assert_not_awaited()

    def test_low_balance_does_not_block_confirmation(self, artifacts_dir):
        """Test a short balance only warns"""
        client = make_client(balance=HBAR)
        result = run_funding(artifacts_dir, client, "5", "y")
        assert result.status == RunStatus.COMPLETED


class TestAmountToWei:
    def test_smallest_unit(self):
        """Test one wei is accepted"""
        assert amount_to_wei("0.000000000000000001") == 1

    def test_below_one_wei(self):
        """Test amounts that floor to zero wei are rejected"""
        with pytest.raises(ValidationError, match="smaller than 1 wei"):
            amount_to_wei("1e-30")

    def test_above_uint256(self):
        """Test amounts beyond uint256 are a validation error, not a bare ValueError"""
        with pytest.raises(ValidationError, match="out of range") as exc_info:
            amount_to_wei("1e80")
        assert isinstance(exc_info.value.__cause__, ValueError)
