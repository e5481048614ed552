"""
Async chain client for the Hedera JSON-RPC relay.

Wraps AsyncWeb3 with the handful of operations the deployment flows need and
signs transactions locally with the operator key.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional, Sequence, Union

from eth_account import Account
from eth_utils import to_checksum_address
from hexbytes import HexBytes
from web3 import AsyncHTTPProvider, AsyncWeb3

from .encoding import encode_function_call
from .exceptions import ChainError
from .network import NetworkConfig

logger = logging.getLogger(__name__)

RECEIPT_TIMEOUT = 300


@contextmanager
def rpc_errors(action: str):
    """Re-raise anything the provider throws as a ChainError."""
    try:
        yield
    except ChainError:
        raise
    except Exception as e:
        raise ChainError(f"{action} failed: {e}") from e


class ChainClient:
    def __init__(self, w3: AsyncWeb3, private_key: str, chain_id: int):
        self.w3 = w3
        self.account = Account.from_key(private_key)
        self.chain_id = chain_id

    @classmethod
    async def connect(cls, config: NetworkConfig) -> "ChainClient":
        """Open a connection to the configured RPC endpoint."""
        w3 = AsyncWeb3(AsyncHTTPProvider(config.rpc_url))
        try:
            with rpc_errors("Connecting to RPC"):
                connected = await w3.is_connected()
            if not connected:
                raise ChainError(f"Could not connect to RPC URL: {config.rpc_url}")
        except ChainError:
            await w3.provider.disconnect()
            raise
        logger.info(f"Connected to {config.name} at {config.rpc_url}")
        return cls(w3, config.private_key, config.chain_id)

    async def close(self) -> None:
        """Release the provider's cached HTTP sessions."""
        await self.w3.provider.disconnect()

    @property
    def address(self) -> str:
        return self.account.address

    async def get_balance(self, address: str) -> int:
        with rpc_errors(f"Reading balance of {address}"):
            return await self.w3.eth.get_balance(to_checksum_address(address))

    async def get_transaction_count(self, address: str) -> int:
        with rpc_errors(f"Reading nonce of {address}"):
            return await self.w3.eth.get_transaction_count(to_checksum_address(address))

    async def estimate_gas(self, tx: Dict[str, Any]) -> int:
        with rpc_errors("Gas estimation"):
            return await self.w3.eth.estimate_gas(tx)

    async def get_gas_price(self) -> int:
        with rpc_errors("Reading gas price"):
            return await self.w3.eth.gas_price

    async def get_storage_at(self, address: str, slot: Union[int, str]) -> bytes:
        position = int(slot, 16) if isinstance(slot, str) else slot
        with rpc_errors(f"Reading storage of {address}"):
            return bytes(await self.w3.eth.get_storage_at(to_checksum_address(address), position))

    async def call_function(self, address: str, abi: Sequence[Dict[str, Any]], name: str,
                            args: Sequence[Any] = ()) -> Any:
        """Invoke a read-only contract method."""
        contract = self.w3.eth.contract(address=to_checksum_address(address), abi=abi)
        with rpc_errors(f"Calling {name}()"):
            return await getattr(contract.functions, name)(*args).call()

    async def send_transaction(self, tx: Dict[str, Any]) -> str:
        """
        Fill in nonce, gas and fee fields, sign with the operator key and broadcast.

        Returns:
            Transaction hash as a 0x-prefixed hex string
        """
        tx = dict(tx)
        tx['from'] = self.address
        tx.setdefault('value', 0)
        tx.setdefault('chainId', self.chain_id)
        with rpc_errors("Transaction submission"):
            if 'nonce' not in tx:
                tx['nonce'] = await self.w3.eth.get_transaction_count(self.address)
            if 'gasPrice' not in tx:
                tx['gasPrice'] = await self.w3.eth.gas_price
            if 'gas' not in tx:
                tx['gas'] = await self.w3.eth.estimate_gas(tx)

            signed_tx = self.account.sign_transaction(tx)
            tx_hash = await self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)

        tx_hash_hex = HexBytes(tx_hash).to_0x_hex()
        logger.info(f"Transaction sent: {tx_hash_hex}")
        return tx_hash_hex

    async def wait_for_receipt(self, tx_hash: str, timeout: int = RECEIPT_TIMEOUT) -> Dict[str, Any]:
        with rpc_errors(f"Waiting for receipt of {tx_hash}"):
            receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
        if receipt['status'] != 1:
            raise ChainError(f"Transaction {tx_hash} failed in block {receipt['blockNumber']}")
        logger.info(f"Transaction confirmed in block {receipt['blockNumber']}")
        return receipt

    async def deploy_contract(self, deploy_data: str) -> str:
        """Broadcast a contract-creation transaction and return the new contract address."""
        tx_hash = await self.send_transaction({'data': deploy_data})
        receipt = await self.wait_for_receipt(tx_hash)
        address = receipt.get('contractAddress')
        if not address:
            raise ChainError(f"Receipt for {tx_hash} carries no contract address")
        return to_checksum_address(address)

    async def transact_function(self, address: str, abi: Sequence[Dict[str, Any]], name: str,
                                args: Sequence[Any] = (), value: int = 0,
                                gas: Optional[int] = None) -> str:
        """Submit a state-changing contract call. Returns the transaction hash."""
        tx: Dict[str, Any] = {
            'to': to_checksum_address(address),
            'data': encode_function_call(abi, name, args),
            'value': value,
        }
        if gas is not None:
            tx['gas'] = gas
        return await self.send_transaction(tx)
