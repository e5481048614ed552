"""Shared fixtures for the deployer tests: artifacts on disk and a fake chain client."""

import os
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from eth_utils import to_checksum_address

# Hardhat's first default account
OPERATOR_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
OPERATOR = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

PROXY_ADDRESS = to_checksum_address("0xea700d3e8b8a076a390fbb8155b4834d1e3d6895")
V1_IMPLEMENTATION = to_checksum_address("0x91fa37060c459994729b29726dced8ce2ffa8981")
V2_IMPLEMENTATION = to_checksum_address("0x5fbdb2315678afecb367f032d93f642f64180aa3")

HBAR = 10**18


def _fn(name, inputs=(), outputs=(), mutability="nonpayable"):
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": "", "type": t} for t in outputs],
        "stateMutability": mutability,
    }


LETSPAY_V1_ABI = [
    _fn("initialize", [("initialOwner", "address")]),
    _fn("owner", outputs=["address"], mutability="view"),
    _fn("upgradeTo", [("newImplementation", "address")]),
    _fn("fundContract", mutability="payable"),
    _fn("CREDIT", outputs=["uint256"], mutability="view"),
]

LETSPAY_V2_ABI = LETSPAY_V1_ABI

PROXY_ABI = [
    {
        "type": "constructor",
        "inputs": [
            {"name": "implementation", "type": "address"},
            {"name": "_data", "type": "bytes"},
        ],
        "stateMutability": "payable",
    },
]

ARTIFACTS = {
    ("LetsPayHBAR_V1_UUPS.sol", "LetsPayHBAR_V1_UUPS"): {"abi": LETSPAY_V1_ABI, "bytecode": "0x60806040aa"},
    ("LetsPayHBAR_V2_UUPS.sol", "LetsPayHBAR_V2_UUPS"): {"abi": LETSPAY_V2_ABI, "bytecode": "0x60806040bb"},
    ("Proxy.sol", "ERC1967Proxy"): {"abi": PROXY_ABI, "bytecode": "0x60806040cc"},
}


def write_artifact(root, source_file, name, data):
    directory = os.path.join(root, "contracts", source_file)
    os.makedirs(directory, exist_ok=True)
    with open(os.path.join(directory, f"{name}.json"), "w") as f:
        json.dump(data, f)


@pytest.fixture
def artifacts_dir(tmp_path):
    root = str(tmp_path / "artifacts")
    for (source_file, name), data in ARTIFACTS.items():
        write_artifact(root, source_file, name, data)
    return root


def make_client(balance=50 * HBAR, nonce=0, implementation_gas=600_000, proxy_gas=400_000,
                gas_price=10**13):
    """A chain client double; every chain operation is an AsyncMock."""
    client = MagicMock()
    client.address = OPERATOR
    client.get_balance = AsyncMock(return_value=balance)
    client.get_transaction_count = AsyncMock(return_value=nonce)
    client.estimate_gas = AsyncMock(side_effect=[implementation_gas, proxy_gas])
    client.get_gas_price = AsyncMock(return_value=gas_price)
    client.get_storage_at = AsyncMock()
    client.call_function = AsyncMock()
    client.transact_function = AsyncMock(return_value="0x" + "ab" * 32)
    client.wait_for_receipt = AsyncMock(return_value={"status": 1, "blockNumber": 7, "gasUsed": 21_000})
    client.deploy_contract = AsyncMock(return_value=V2_IMPLEMENTATION)
    client.close = AsyncMock()
    return client


@pytest.fixture
def fake_client():
    return make_client()


def scripted(*answers):
    """An ask callable that replays answers in order and records the prompts it saw."""
    replies = list(answers)
    prompts = []

    def ask(question):
        prompts.append(question)
        return replies.pop(0)

    ask.prompts = prompts
    return ask
