"""Deterministic CREATE address prediction."""

import rlp
from eth_utils import keccak, to_canonical_address, to_checksum_address


def predict_contract_address(sender: str, nonce: int) -> str:
    """
    Address a contract-creation transaction from `sender` at `nonce` will receive.

    keccak256(rlp([sender, nonce]))[12:], as the EVM assigns CREATE addresses.
    The result is only as fresh as the nonce it was computed from.
    """
    if nonce < 0:
        raise ValueError(f"Nonce must be non-negative, got {nonce}")
    encoded = rlp.encode([to_canonical_address(sender), nonce])
    return to_checksum_address(keccak(encoded)[12:])
